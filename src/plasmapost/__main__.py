"""CLI entry point: ``python -m plasmapost job.json -o output.nc``"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from .config.controllers import ControllerModel, get_profile
from .config.defaults import build_default_tool_library
from .config.settings import PostConfig
from .core.job import JobFormatError, load_job
from .core.tool import ToolLibrary
from .core.units import Units
from .gcode.errors import PostProcessorError
from .gcode.plasma import PlasmaPostProcessor
from .gcode.validate import validate_events


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="plasmapost",
        description="Generate plasma cutter NC programs from CAM toolpath jobs.",
    )
    p.add_argument("input", type=Path, help="Input job file (JSON)")
    p.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output NC file (default: <input>.nc)",
    )
    p.add_argument("--config", type=Path, default=None,
                   help="Post options file (JSON); flags below override it")
    p.add_argument("--tools", type=Path, default=None,
                   help="Tool library file (default: built-in plasma tools)")
    p.add_argument(
        "--controller", choices=[m.value for m in ControllerModel], default=None,
        help="Controller profile (default: standard)",
    )

    # Sequencing and formatting
    p.add_argument("--sequence", action="store_true", default=None,
                   help="Number blocks with N words")
    p.add_argument("--sequence-start", type=int, default=None,
                   help="First sequence number (default: 10)")
    p.add_argument("--sequence-increment", type=int, default=None,
                   help="Sequence number increment (default: 5)")
    p.add_argument("--no-spaces", action="store_true", default=None,
                   help="Write words without separating spaces")
    p.add_argument("--no-comments", action="store_true", default=None,
                   help="Leave out informational comments")
    p.add_argument("--program-name", default=None,
                   help="Program name comment (default: job name)")
    p.add_argument("--program-comment", default=None,
                   help="Extra comment written after the program name")

    # Cutting
    p.add_argument("--material-selection", action="store_true", default=None,
                   help="Select the cut process automatically from the tool number")
    p.add_argument("--no-merge-circles", action="store_true", default=None,
                   help="Write every arc as its own block")
    p.add_argument("--slow-speed", type=int, default=None,
                   help="Small-hole speed in percent, 10-99 (default: 50)")
    p.add_argument("--pierce-delay", type=float, default=None,
                   help="Dwell after torch on, in seconds (default: 0)")

    # Tolerances (mm)
    p.add_argument("--blend-tolerance", type=float, default=None,
                   help="Path blending tolerance in mm (default: CAM tolerance)")
    p.add_argument("--cam-tolerance", type=float, default=None,
                   help="CAM tolerance in mm (default: 0.01)")
    p.add_argument("--chordal-tolerance", type=float, default=None,
                   help="Arc linearization tolerance in mm (default: 0.01)")

    # Validation
    p.add_argument("--skip-validate", action="store_true",
                   help="Skip cutting table and feed validation")

    return p


def _config_from_args(args: argparse.Namespace, job_units: Units) -> PostConfig:
    base = PostConfig.load(args.config) if args.config else PostConfig()
    overrides = {
        # Event coordinates are in the job's units.
        "units": job_units,
        "controller": ControllerModel(args.controller) if args.controller else None,
        "sequencing": args.sequence,
        "sequence_start": args.sequence_start,
        "sequence_increment": args.sequence_increment,
        "word_separator": "" if args.no_spaces else None,
        "write_comments": False if args.no_comments else None,
        "program_name": args.program_name,
        "program_comment": args.program_comment,
        "automatic_material_selection": args.material_selection,
        "merge_circles": False if args.no_merge_circles else None,
        "slow_speed_percent": args.slow_speed,
        "pierce_delay": args.pierce_delay,
        "blend_tolerance": args.blend_tolerance,
        "cam_tolerance": args.cam_tolerance,
        "chordal_tolerance": args.chordal_tolerance,
    }
    return replace(base, **{k: v for k, v in overrides.items() if v is not None})


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    output: Path = args.output or args.input.with_suffix(".nc")

    library = ToolLibrary(args.tools) if args.tools else build_default_tool_library()

    # Load job
    print(f"Loading {args.input} ...")
    try:
        job = load_job(args.input, library)
    except (OSError, JobFormatError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"  {len(job.operations)} operations, {job.total_events} events")

    config = _config_from_args(args, job.units)
    if not config.program_name:
        config.program_name = job.name
    profile = get_profile(config.controller)
    print(f"Controller: {profile}")

    events = list(job.events())

    # Validate
    if not args.skip_validate:
        result = validate_events(events, profile.envelope, config.units)
        if result.has_errors:
            print("VALIDATION ERRORS:", file=sys.stderr)
            for issue in result.issues:
                if issue.severity == "error":
                    print(f"  ERROR: {issue.message}", file=sys.stderr)
            return 1
        if result.has_warnings:
            for issue in result.issues:
                if issue.severity == "warning":
                    print(f"  Warning: {issue.message}")

    # Generate NC program
    post = PlasmaPostProcessor(config, profile)
    try:
        post.generate(events, output)
    except PostProcessorError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Wrote {output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
