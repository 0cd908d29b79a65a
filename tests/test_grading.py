from decimal import Decimal

import pytest

from config.settings import settings
from schemas.results import Letter
from services.results.grading import (
    SUBJECT_SCALE,
    TOTAL_SCALE,
    ScaleBasis,
    GradeScale,
    SUBJECT_BANDS,
    grade_subject,
    remark_for,
    to_decimal,
    total_scale,
)
from services.results_service import scale_for


@pytest.mark.parametrize(
    "score, expected",
    [
        (100, Letter.A),
        (80, Letter.A),
        (Decimal("79.99"), Letter.A_MINUS),
        (75, Letter.A_MINUS),
        (70, Letter.B_PLUS),
        (65, Letter.B),
        (60, Letter.B_MINUS),
        (55, Letter.C_PLUS),
        (50, Letter.C),
        (45, Letter.C_MINUS),
        (40, Letter.D_PLUS),
        (35, Letter.D),
        (30, Letter.D_MINUS),
        (Decimal("29.99"), Letter.E),
        (0, Letter.E),
    ],
)
def test_subject_scale_boundaries(score, expected):
    assert grade_subject(score) == expected


def test_subject_scale_is_monotone_over_0_to_100():
    previous = None
    for tenths in range(0, 1001):
        letter = SUBJECT_SCALE.grade(Decimal(tenths) / 10)
        assert letter in Letter
        if previous is not None:
            # 점수가 오르면 등급은 같거나 더 좋아짐
            assert letter.position <= previous.position
        previous = letter


@pytest.mark.parametrize("value", [None, "abc", float("nan"), True, Decimal("Infinity")])
def test_non_numeric_input_maps_to_e(value):
    assert SUBJECT_SCALE.grade(value) == Letter.E


def test_out_of_range_values_map_deterministically():
    assert SUBJECT_SCALE.grade(150) == Letter.A
    assert SUBJECT_SCALE.grade(-5) == Letter.E


def test_total_scale_uses_percentage_of_1100():
    assert TOTAL_SCALE.basis is ScaleBasis.TOTAL
    assert TOTAL_SCALE.grade(858) == Letter.A          # 78%
    assert TOTAL_SCALE.grade(857) == Letter.A_MINUS
    assert TOTAL_SCALE.grade(275) == Letter.D_MINUS    # 25%
    assert TOTAL_SCALE.grade(274) == Letter.E


def test_total_scale_denominator_is_configurable():
    scale = total_scale(300)
    assert scale.grade(234) == Letter.A          # 78%


def test_total_scale_requires_max_total():
    with pytest.raises(ValueError):
        GradeScale("broken", SUBJECT_BANDS, basis=ScaleBasis.TOTAL)


def test_to_decimal():
    assert to_decimal("72.5") == Decimal("72.5")
    assert to_decimal(60) == Decimal("60")
    assert to_decimal("") is None
    assert to_decimal(False) is None


def test_every_letter_has_a_remark():
    for letter in Letter:
        assert remark_for(letter)
    assert remark_for(Letter.A) == "Excellent performance!"


def test_total_basis_scale_follows_configured_max_marks(monkeypatch):
    monkeypatch.setattr(settings, "TOTAL_MAX_MARKS", 300)
    scale = scale_for(ScaleBasis.TOTAL)

    assert scale.basis is ScaleBasis.TOTAL
    assert scale.grade(234) == Letter.A          # 78%
    assert scale.grade(233) == Letter.A_MINUS
    assert scale_for() is SUBJECT_SCALE
