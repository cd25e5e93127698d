"""
services/aggregation.py

- 원점수(6개 항목)로부터 학기 합계 · 연간 합계 · 평균을 계산하는 순수 함수 모음
- 누락된 점수는 0으로 취급
- 모든 경계(학기 → 연간 → 평균)에서 소수 둘째 자리 반올림(ROUND_HALF_UP)
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Mapping, Optional, Union

TERM_1_FIELDS = ("first_monthly_score", "second_monthly_score", "midterm_exam_score")
TERM_2_FIELDS = ("third_monthly_score", "fourth_monthly_score", "final_exam_score")
SCORE_FIELDS = TERM_1_FIELDS + TERM_2_FIELDS

Number = Union[int, float, Decimal]
_CENT = Decimal("0.01")


def _dec(value: Optional[Number]) -> Decimal:
    if value is None:
        return Decimal(0)
    # float → str 경유 변환으로 2진 오차 제거 (18.1 → Decimal("18.1"))
    return Decimal(str(value))


def round2(value: Optional[Number]) -> float:
    """소수 둘째 자리 half-up 반올림 (0.125 → 0.13)"""
    return float(_dec(value).quantize(_CENT, rounding=ROUND_HALF_UP))


def _get(row: Any, field: str) -> Optional[Number]:
    if isinstance(row, Mapping):
        return row.get(field)
    return getattr(row, field, None)


def _sum_fields(row: Any, fields: Iterable[str]) -> float:
    return round2(sum((_dec(_get(row, f)) for f in fields), Decimal(0)))


def term1(row: Any) -> float:
    """1학기 합계 = 1차 월말 + 2차 월말 + 중간고사"""
    return _sum_fields(row, TERM_1_FIELDS)


def term2(row: Any) -> float:
    """2학기 합계 = 3차 월말 + 4차 월말 + 기말고사"""
    return _sum_fields(row, TERM_2_FIELDS)


def annual_from_terms(term_1_total: Optional[Number], term_2_total: Optional[Number]) -> float:
    return round2(_dec(round2(term_1_total)) + _dec(round2(term_2_total)))


def annual(row: Any) -> float:
    return annual_from_terms(term1(row), term2(row))


def grand_total(values: Iterable[Optional[Number]]) -> float:
    return round2(sum((_dec(v) for v in values), Decimal(0)))


def average_of_totals(annual_totals: Iterable[Optional[Number]]) -> float:
    """연간 합계 목록의 평균 (과목 0개면 분모 1)"""
    totals = list(annual_totals)
    total = _dec(grand_total(totals))
    return round2(total / max(1, len(totals)))


def average(rows: Iterable[Any]) -> float:
    return average_of_totals(annual(r) for r in rows)
