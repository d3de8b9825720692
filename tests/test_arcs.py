"""Tests for circular move aggregation and cutter compensation."""

import pytest

from plasmapost.config.settings import PostConfig
from plasmapost.core.tool import Tool
from plasmapost.core.toolpath.base import (
    CircularMove,
    CompensationRequest,
    CompensationSide,
    LinearMove,
    Plane,
    Point,
    RapidMove,
    SectionEnd,
    SectionStart,
)
from plasmapost.core.units import Units
from plasmapost.gcode.compensation import CompensationState, CutterCompensationFSM
from plasmapost.gcode.errors import InvalidCompensationTimingError
from plasmapost.gcode.plasma import PlasmaPostProcessor

CENTER = Point(0.0, 0.0)


def _run(*events, tool: Tool = Tool(1, "45A"), **options) -> list[str]:
    stream = [SectionStart(tool), *events, SectionEnd()]
    return PlasmaPostProcessor(PostConfig(**options)).get_lines(stream)


def _arc_lines(lines: list[str]) -> list[str]:
    return [line for line in lines if "I" in line and "J" in line and not line.startswith("(")]


class TestCircleMerging:
    def test_two_halves_make_one_full_circle(self):
        lines = _run(
            RapidMove(1.0, 0.0),
            CircularMove(False, CENTER, Point(-1.0, 0.0), feed=40.0),
            CircularMove(False, CENTER, Point(1.0, 0.0)),
        )
        assert _arc_lines(lines) == ["G3 X1. Y0. I-1. J0. F40"]

    def test_single_full_circle(self):
        lines = _run(
            RapidMove(1.0, 0.0),
            CircularMove(True, CENTER, Point(1.0, 0.0), feed=40.0),
        )
        assert _arc_lines(lines) == ["G2 X1. Y0. I-1. J0. F40"]

    def test_partial_merge(self):
        lines = _run(
            RapidMove(1.0, 0.0),
            CircularMove(False, CENTER, Point(0.0, 1.0)),
            CircularMove(False, CENTER, Point(-1.0, 0.0)),
            LinearMove(-1.0, -1.0, 40.0),
        )
        assert _arc_lines(lines) == ["G3 X-1. I-1. J0."]

    def test_centers_apart_not_merged(self):
        # 0.01 in is beyond the 0.2 mm center tolerance.
        lines = _run(
            RapidMove(1.0, 0.0),
            CircularMove(False, CENTER, Point(-1.0, 0.0)),
            CircularMove(False, Point(0.0, 0.01), Point(1.0, 0.0)),
        )
        assert _arc_lines(lines) == ["G3 X-1. I-1. J0.", "X1. I1. J0.01"]

    def test_centers_within_tolerance_merged(self):
        lines = _run(
            RapidMove(1.0, 0.0),
            CircularMove(False, CENTER, Point(-1.0, 0.0)),
            CircularMove(False, Point(0.0, 0.001), Point(0.0, -1.0)),
        )
        assert len(_arc_lines(lines)) == 1

    def test_direction_change_not_merged(self):
        lines = _run(
            RapidMove(1.0, 0.0),
            CircularMove(False, CENTER, Point(0.0, 1.0)),
            CircularMove(True, CENTER, Point(1.0, 0.0)),
        )
        assert _arc_lines(lines) == ["G3 X0. Y1. I-1. J0.", "G2 X1. Y0. I0. J-1."]

    def test_merge_disabled(self):
        lines = _run(
            RapidMove(1.0, 0.0),
            CircularMove(False, CENTER, Point(-1.0, 0.0)),
            CircularMove(False, CENTER, Point(1.0, 0.0)),
            merge_circles=False,
        )
        assert _arc_lines(lines) == ["G3 X-1. I-1. J0.", "X1. I1. J0."]

    def test_offsets_relative_to_start(self):
        lines = _run(
            RapidMove(2.0, 1.0),
            CircularMove(True, Point(1.0, 1.0), Point(1.0, 2.0)),
        )
        assert _arc_lines(lines) == ["G2 X1. Y2. I-1. J0."]

    def test_next_circle_starts_fresh(self):
        lines = _run(
            RapidMove(1.0, 0.0),
            CircularMove(False, CENTER, Point(1.0, 0.0)),
            CircularMove(False, CENTER, Point(1.0, 0.0)),
        )
        assert _arc_lines(lines) == ["G3 X1. Y0. I-1. J0.", "X1. Y0. I-1. J0."]

    def test_mm_program(self):
        lines = _run(
            RapidMove(10.0, 0.0),
            CircularMove(False, CENTER, Point(-10.0, 0.0)),
            CircularMove(False, Point(0.1, 0.0), Point(10.0, 0.0)),
            units=Units.MM,
        )
        assert _arc_lines(lines) == ["G3 X10. Y0. I-10. J0."]


class TestOutOfPlaneArcs:
    def test_zx_arc_linearized(self):
        lines = _run(
            RapidMove(1.0, 0.0),
            CircularMove(False, CENTER, Point(-1.0, 0.0, 0.0), plane=Plane.ZX),
        )
        assert not any(line.startswith(("G2", "G3")) for line in lines)
        cut = lines[lines.index("G0 X1. Y0.") + 1:lines.index("G0 X0. Y0.")]
        assert cut[0].startswith("G1 X")
        assert len(cut) > 10
        assert cut[-1] == "X-1."


class TestCompensation:
    def test_activation_written_with_linear_move(self):
        lines = _run(
            RapidMove(0.0, 0.0),
            CompensationRequest(CompensationSide.LEFT),
            LinearMove(1.0, 0.0, 50.0),
        )
        assert "G41 D1 G1 X1. F50" in lines

    def test_right_uses_tool_register(self):
        lines = _run(
            RapidMove(0.0, 0.0),
            CompensationRequest(CompensationSide.RIGHT),
            LinearMove(1.0, 0.0, 50.0),
            tool=Tool(3, "85A"),
        )
        assert "G42 D3 G1 X1. F50" in lines

    def test_rapid_while_pending(self):
        with pytest.raises(InvalidCompensationTimingError):
            _run(CompensationRequest(CompensationSide.LEFT), RapidMove(1.0, 1.0))

    def test_arc_while_pending(self):
        with pytest.raises(InvalidCompensationTimingError):
            _run(
                RapidMove(1.0, 0.0),
                CompensationRequest(CompensationSide.LEFT),
                CircularMove(False, CENTER, Point(-1.0, 0.0)),
            )

    def test_linear_without_xy_change(self):
        with pytest.raises(InvalidCompensationTimingError):
            _run(
                RapidMove(1.0, 0.0),
                CompensationRequest(CompensationSide.LEFT),
                LinearMove(1.0, 0.0, 50.0),
            )

    def test_deactivation_immediate(self):
        lines = _run(
            RapidMove(0.0, 0.0),
            CompensationRequest(CompensationSide.LEFT),
            LinearMove(1.0, 0.0, 50.0),
            CompensationRequest(CompensationSide.OFF),
            RapidMove(2.0, 0.0),
        )
        i = lines.index("G41 D1 G1 X1. F50")
        assert lines[i + 1:i + 3] == ["G40", "G0 X2."]

    def test_repeated_side_not_rewritten(self):
        lines = _run(
            RapidMove(0.0, 0.0),
            CompensationRequest(CompensationSide.LEFT),
            LinearMove(1.0, 0.0, 50.0),
            CompensationRequest(CompensationSide.LEFT),
            LinearMove(2.0, 0.0),
        )
        assert sum("G41" in line for line in lines) == 1
        assert "X2." in lines

    def test_pending_at_program_end(self):
        with pytest.raises(InvalidCompensationTimingError):
            _run(RapidMove(1.0, 1.0), CompensationRequest(CompensationSide.LEFT))

    def test_fsm_states(self):
        fsm = CutterCompensationFSM()
        assert fsm.state is CompensationState.OFF
        fsm.state = CompensationState.PENDING_RIGHT
        assert fsm.pending
        with pytest.raises(InvalidCompensationTimingError):
            fsm.check_motion("rapid")
        fsm.clear()
        assert not fsm.pending
        assert fsm.active_side is CompensationSide.OFF
