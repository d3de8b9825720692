"""Default plasma tool definitions.

Kerf widths (mm) are typical for mild steel with standard consumables; users
should adjust them to their torch and material.
"""

from ..core.tool import Tool, ToolType, ToolLibrary


def build_default_tool_library() -> ToolLibrary:
    """Return an in-memory ToolLibrary with common plasma consumable sets."""
    lib = ToolLibrary.__new__(ToolLibrary)
    lib._path = None   # in-memory only
    lib._tools = {}

    tools = [
        Tool(
            number=1,
            name="45A shielded",
            tool_type=ToolType.PLASMA_CUTTER,
            kerf_width=1.5,
        ),
        Tool(
            number=2,
            name="65A shielded",
            tool_type=ToolType.PLASMA_CUTTER,
            kerf_width=1.8,
        ),
        Tool(
            number=3,
            name="85A shielded",
            tool_type=ToolType.PLASMA_CUTTER,
            kerf_width=2.1,
        ),
        Tool(
            number=4,
            name="45A FineCut",
            tool_type=ToolType.PLASMA_CUTTER,
            kerf_width=0.8,
        ),
    ]

    for t in tools:
        lib.add(t)

    return lib
