from types import SimpleNamespace

import pytest

from services.aggregation import (
    annual, annual_from_terms, average, average_of_totals, grand_total, round2, term1, term2,
)


def _row(**scores):
    fields = dict.fromkeys([
        "first_monthly_score", "second_monthly_score", "midterm_exam_score",
        "third_monthly_score", "fourth_monthly_score", "final_exam_score",
    ])
    fields.update(scores)
    return SimpleNamespace(**fields)


def test_term1_sums_first_term_components():
    row = _row(first_monthly_score=18, second_monthly_score=19, midterm_exam_score=35)
    assert term1(row) == 72


def test_term2_uses_six_field_formula():
    row = _row(third_monthly_score=15, fourth_monthly_score=16.5, final_exam_score=60)
    assert term2(row) == 91.5


def test_missing_scores_count_as_zero():
    row = _row(final_exam_score=32)
    assert term1(row) == 0
    assert term2(row) == 32
    assert annual(row) == 32


def test_accepts_plain_dicts():
    assert term1({"first_monthly_score": 10, "midterm_exam_score": 40.25}) == 50.25


def test_annual_equals_sum_of_terms():
    row = _row(
        first_monthly_score=18, second_monthly_score=19, midterm_exam_score=35,
        final_exam_score=32,
    )
    assert annual(row) == round2(term1(row) + term2(row)) == 104


def test_recompute_is_deterministic():
    row = _row(first_monthly_score=17.33, second_monthly_score=12.1, midterm_exam_score=70.07)
    assert [term1(row) for _ in range(3)] == [99.5, 99.5, 99.5]


@pytest.mark.parametrize("value, expected", [
    (0.125, 0.13),
    (2.675, 2.68),     # float round() 는 2.67
    (1.005, 1.01),
    (10, 10.0),
    (None, 0.0),
])
def test_round2_is_half_up(value, expected):
    assert round2(value) == expected


def test_annual_from_terms_rounds_each_boundary():
    assert annual_from_terms(33.335, 10.004) == 43.34


def test_average_guards_zero_rows():
    assert average([]) == 0
    assert average_of_totals([]) == 0


def test_average_over_subjects():
    rows = [
        _row(first_monthly_score=20, midterm_exam_score=80),   # 100
        _row(first_monthly_score=10, final_exam_score=40.01),  # 50.01
    ]
    assert average(rows) == 75.01  # 150.01 / 2 = 75.005 → 75.01


def test_grand_total():
    assert grand_total([72, 32.5, None]) == 104.5
