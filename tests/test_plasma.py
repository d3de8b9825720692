"""Tests for the plasma post-processor: program layout and event handling."""

import pytest

from plasmapost.config.controllers import ControllerModel
from plasmapost.config.settings import PostConfig
from plasmapost.core.tool import Tool
from plasmapost.core.toolpath.base import (
    EVENT_TYPES,
    Command,
    CommandKind,
    Dwell,
    LinearMove,
    MoveType,
    MultiAxisMove,
    ParameterChange,
    PowerRequest,
    RapidMove,
    SectionEnd,
    SectionStart,
)
from plasmapost.core.units import Units
from plasmapost.gcode import codes
from plasmapost.gcode.errors import (
    ConfigError,
    DwellOutOfRangeWarning,
    NonFiniteValueError,
    UnsupportedCommandError,
    UnsupportedMotionError,
    UnsupportedUnitError,
)
from plasmapost.gcode.plasma import PlasmaPostProcessor

HEADER = ["%", "G20", "G90 G17 G40", "G64 P0.000394", "M65", "M66", "M51", "M62"]
FOOTER = ["G0 X0. Y0.", "G40", "M50", "M63", "M8", "M30", "%"]
TOOL_CALL = ["(T1 45A KERF=0.)", "T1"]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _tool(number: int = 1) -> Tool:
    return Tool(number, "45A")


def _run(*events, **options) -> list[str]:
    return PlasmaPostProcessor(PostConfig(**options)).get_lines(events)


def _body(lines: list[str]) -> list[str]:
    """Lines between the default header and footer."""
    assert lines[:len(HEADER)] == HEADER
    assert lines[-len(FOOTER):] == FOOTER
    return lines[len(HEADER):-len(FOOTER)]


def _section(*events, **kwargs) -> tuple:
    return (SectionStart(_tool(), **kwargs), *events, SectionEnd())


# ---------------------------------------------------------------------------
# Program layout
# ---------------------------------------------------------------------------

class TestProgramLayout:
    def test_empty_program(self):
        assert _run() == HEADER + FOOTER

    def test_mm_header(self):
        lines = _run(units=Units.MM)
        assert lines[1] == "G21"
        assert lines[3] == "G64 P0.01"

    def test_blend_tolerance_overrides_cam_tolerance(self):
        lines = _run(blend_tolerance=0.254)
        assert lines[3] == "G64 P0.01"

    def test_program_name_and_comment(self):
        lines = _run(program_name="Bracket #2", program_comment="3/8 plate")
        assert lines[:4] == ["%", "(BRACKET 2)", "(38 PLATE)", "G20"]

    def test_cut_sequence(self):
        lines = _run(*_section(
            RapidMove(0.0, 0.0),
            PowerRequest(True),
            PowerRequest(True),
            LinearMove(1.0, 0.0, 50.0),
            LinearMove(1.0, 1.0),
            PowerRequest(False),
        ))
        assert _body(lines) == TOOL_CALL + [
            "G0 X0. Y0.",
            "M7",
            "(TORCH ALREADY ON)",
            "G1 X1. F50",
            "Y1.",
            "M8",
        ]

    def test_redundant_words_left_out(self):
        lines = _run(*_section(
            RapidMove(0.0, 0.0),
            LinearMove(1.0, 0.0, 50.0),
            LinearMove(2.0, 0.0, 50.0),
            LinearMove(2.0, 0.0, 40.0),
            LinearMove(2.0, 0.0, 40.0),
        ))
        assert _body(lines)[-3:] == ["G1 X1. F50", "X2.", "F40"]

    def test_sequence_numbers(self):
        lines = _run(sequencing=True, sequence_start=10, sequence_increment=5)
        assert lines[0] == "%"
        assert lines[1] == "N10 G20"
        assert lines[2] == "N15 G90 G17 G40"
        assert lines[-2] == "N70 M30"
        assert lines[-1] == "%"

    def test_comments_not_numbered(self):
        lines = _run(*_section(name="Outer"), sequencing=True)
        assert "(OUTER)" in lines

    def test_no_word_separator(self):
        lines = _run(word_separator="")
        assert lines[2] == "G90G17G40"
        assert lines[-7] == "G0X0.Y0."

    def test_comments_off(self):
        lines = _run(*_section(RapidMove(1.0, 1.0), name="Outer"),
                     program_name="Job", write_comments=False)
        assert not any(line.startswith("(") for line in lines)

    def test_generate_writes_file(self, tmp_path):
        out = tmp_path / "part.nc"
        PlasmaPostProcessor().generate(list(_section(RapidMove(1.0, 1.0))), out)
        text = out.read_text()
        assert text.startswith("%\nG20\n")
        assert text.endswith("M30\n%\n")

    def test_every_event_type_has_handler(self):
        assert set(PlasmaPostProcessor()._handlers) == set(EVENT_TYPES)

    def test_runs_are_independent(self):
        post = PlasmaPostProcessor()
        events = list(_section(RapidMove(1.0, 1.0), LinearMove(2.0, 1.0, 30.0)))
        assert post.get_lines(events) == post.get_lines(events)


# ---------------------------------------------------------------------------
# Configuration and units
# ---------------------------------------------------------------------------

class TestConfiguration:
    def test_inch_only_controller_rejects_mm(self):
        with pytest.raises(UnsupportedUnitError):
            _run(*_section(RapidMove(1.0, 1.0)),
                 units=Units.MM, controller=ControllerModel.INCH_ONLY)

    def test_inch_only_controller_accepts_inch(self):
        lines = _run(controller=ControllerModel.INCH_ONLY)
        assert lines[1] == "G20"

    @pytest.mark.parametrize("options", [
        {"slow_speed_percent": 5},
        {"slow_speed_percent": 100},
        {"word_separator": "\t"},
        {"sequence_increment": 0},
        {"chordal_tolerance": 0.0},
    ])
    def test_invalid_options(self, options):
        with pytest.raises(ConfigError):
            _run(**options)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

class TestDwell:
    def test_dwell(self):
        lines = _run(*_section(Dwell(1.5)))
        assert _body(lines)[-1] == "G4 P1.5"

    def test_dwell_above_range_clamped(self):
        with pytest.warns(DwellOutOfRangeWarning):
            lines = _run(*_section(Dwell(200000.0)))
        assert _body(lines)[-2:] == [
            "(DWELL OUT OF RANGE, CLAMPED TO 99999.999 SECONDS)",
            "G4 P99999.999",
        ]

    def test_negative_dwell_clamped(self):
        with pytest.warns(DwellOutOfRangeWarning):
            lines = _run(*_section(Dwell(-1.0)))
        assert _body(lines)[-1] == "G4 P0."

    def test_non_finite_dwell_rejected(self):
        with pytest.raises(NonFiniteValueError):
            _run(*_section(Dwell(float("nan"))))


class TestCommands:
    @pytest.mark.parametrize("kind, word", [
        (CommandKind.STOP, "M0"),
        (CommandKind.OPTIONAL_STOP, "M1"),
        (CommandKind.END, "M2"),
        (CommandKind.POWER_ON, "M7"),
    ])
    def test_mapped_commands(self, kind, word):
        lines = _run(*_section(Command(kind)))
        assert _body(lines)[-1] == word

    def test_ignored_commands_write_nothing(self):
        events = [Command(kind) for kind in codes.IGNORED_COMMANDS]
        assert _body(_run(*_section(*events))) == TOOL_CALL

    def test_unsupported_command(self):
        with pytest.raises(UnsupportedCommandError):
            _run(*_section(Command(CommandKind.COOLANT_ON)))

    def test_every_command_classified(self):
        for kind in CommandKind:
            if kind in codes.TORCH_COMMANDS:
                continue
            if kind in codes.COMMAND_CODES or kind in codes.IGNORED_COMMANDS:
                codes.command_code(kind)
            else:
                with pytest.raises(UnsupportedCommandError):
                    codes.command_code(kind)

    def test_work_offset_words(self):
        assert codes.work_offset_words(1) == ("G54",)
        assert codes.work_offset_words(6) == ("G59",)
        assert codes.work_offset_words(7) == ("G54.1", "P1")
        with pytest.raises(ValueError):
            codes.work_offset_words(0)


class TestParameters:
    def test_operation_comment(self):
        lines = _run(*_section(ParameterChange("operation-comment", "Outer cut")))
        assert _body(lines)[-1] == "(OUTER CUT)"

    def test_other_parameters_ignored(self):
        lines = _run(*_section(ParameterChange("feed-override", 3)))
        assert _body(lines) == TOOL_CALL


class TestErrors:
    def test_multi_axis_move_rejected(self):
        with pytest.raises(UnsupportedMotionError):
            _run(*_section(MultiAxisMove(1.0, 2.0, 3.0, a=10.0)))

    def test_error_locates_event(self):
        with pytest.raises(UnsupportedMotionError) as info:
            _run(*_section(MultiAxisMove(1.0, 2.0, 3.0), name="Profile"))
        assert info.value.event_index == 1
        assert "event #1 (MultiAxisMove) in section 'Profile'" in str(info.value)

    def test_non_finite_coordinate_rejected(self):
        with pytest.raises(NonFiniteValueError) as info:
            _run(*_section(RapidMove(0.0, 0.0), LinearMove(float("inf"), 0.0, 50.0)))
        assert info.value.event_index == 2


class TestTorch:
    def test_pierce_delay(self):
        lines = _run(*_section(PowerRequest(True)), pierce_delay=0.5)
        assert _body(lines)[-2:] == ["M7", "G4 P0.5"]

    def test_duplicate_off(self):
        lines = _run(*_section(PowerRequest(False)))
        assert _body(lines)[-1] == "(TORCH ALREADY OFF)"

    def test_torch_off_at_program_end(self):
        lines = _run(*_section(PowerRequest(True)))
        assert lines[-3:] == ["M8", "M30", "%"]

    def test_motion_hints_drive_torch(self):
        lines = _run(
            *_section(
                RapidMove(0.0, 0.0),
                PowerRequest(True),
                LinearMove(0.0, 0.0, move_type=MoveType.PLUNGE),
                LinearMove(1.0, 0.0),
                RapidMove(2.0, 2.0),
            ),
            controller=ControllerModel.MOTION_THC,
        )
        assert _body(lines) == TOOL_CALL + [
            "G0 X0. Y0.",
            "M7",
            "G1 X1.",
            "M8",
            "G0 X2. Y2.",
        ]
