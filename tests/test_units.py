"""Tests for unit conversion and the units modal code."""

import pytest

from plasmapost.core.units import Units


@pytest.mark.parametrize("units, mm, native", [
    (Units.INCH, 25.4, 1.0),
    (Units.INCH, 0.2, 0.2 / 25.4),
    (Units.MM, 0.2, 0.2),
])
def test_conversion(units, mm, native):
    assert units.from_mm(mm) == pytest.approx(native)
    assert units.to_mm(native) == pytest.approx(mm)


def test_modal_codes():
    assert Units.INCH.modal_code == 20
    assert Units.MM.modal_code == 21


def test_feed_labels():
    assert Units.INCH.label() == "in"
    assert Units.MM.label() == "mm"
