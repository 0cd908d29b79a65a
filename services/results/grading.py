"""
services/results/grading.py

점수 → 등급(Letter) 변환 척도.

- SUBJECT_SCALE : 과목 점수 또는 0~100 으로 정규화된 평균에 적용
- TOTAL_SCALE   : 전 교과 총점(기본 1100점 만점)을 백분율로 환산해 적용
두 척도는 경계값이 서로 다르므로 호출하는 쪽에서 입력 성격에 맞게 골라야 함.
범위를 벗어난 값(음수, 100 초과)도 예외 없이 등급으로 매핑됨 (0~100 검증은 점수 제출 시점 담당).
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Iterable, Optional, Tuple

from schemas.results import Letter


class ScaleBasis(str, Enum):
    AVERAGE = "average"   # 과목 점수 / 평균 (0~100)
    TOTAL = "total"       # 고정 만점 대비 원점수 총합


def to_decimal(value) -> Optional[Decimal]:
    """숫자로 해석 가능한 값이면 Decimal, 아니면 None (NaN/Infinity 포함)"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    return number if number.is_finite() else None


class GradeScale:
    """
    하한값 내림차순 구간표 기반 등급 척도
    - bands: ((하한, 등급), ...) 형태, 첫 번째로 하한 이상인 구간의 등급 반환
    - 어느 구간에도 못 미치면 E
    """

    def __init__(
        self,
        name: str,
        bands: Iterable[Tuple[int, Letter]],
        basis: ScaleBasis = ScaleBasis.AVERAGE,
        max_total: Optional[int] = None,
    ):
        if basis is ScaleBasis.TOTAL and not max_total:
            raise ValueError("total-based scale requires a positive max_total")
        self.name = name
        self.bands = tuple((Decimal(low), letter) for low, letter in bands)
        self.basis = basis
        self.max_total = max_total

    def normalize(self, value: Decimal) -> Decimal:
        if self.basis is ScaleBasis.TOTAL:
            return value / Decimal(self.max_total) * 100
        return value

    def grade(self, value) -> Letter:
        number = to_decimal(value)
        if number is None:
            return Letter.E
        number = self.normalize(number)
        for low, letter in self.bands:
            if number >= low:
                return letter
        return Letter.E

    def __repr__(self) -> str:
        return f"GradeScale(name={self.name!r}, basis={self.basis.value})"


# ✅ 과목 척도 (D-/E 경계 30점)
SUBJECT_BANDS = (
    (80, Letter.A),
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
)

# ✅ 총점 척도 (백분율 기준)
TOTAL_BANDS = (
    (78, Letter.A),
    (73, Letter.A_MINUS),
    (68, Letter.B_PLUS),
    (63, Letter.B),
    (58, Letter.B_MINUS),
    (53, Letter.C_PLUS),
    (48, Letter.C),
    (43, Letter.C_MINUS),
    (38, Letter.D_PLUS),
    (33, Letter.D),
    (25, Letter.D_MINUS),
)

DEFAULT_MAX_TOTAL = 1100

SUBJECT_SCALE = GradeScale("subject", SUBJECT_BANDS)


def total_scale(max_total: int = DEFAULT_MAX_TOTAL) -> GradeScale:
    return GradeScale("total", TOTAL_BANDS, basis=ScaleBasis.TOTAL, max_total=max_total)


TOTAL_SCALE = total_scale()


def grade_subject(score) -> Letter:
    return SUBJECT_SCALE.grade(score)


# 등급대별 안내 문구 (성적표/문자 발송용)
_REMARKS = {
    Letter.A: "Excellent performance!",
    Letter.A_MINUS: "Excellent performance!",
    Letter.B_PLUS: "Very good, keep it up!",
    Letter.B: "Very good, keep it up!",
    Letter.B_MINUS: "Very good, keep it up!",
    Letter.C_PLUS: "Fair, needs improvement.",
    Letter.C: "Fair, needs improvement.",
    Letter.C_MINUS: "Fair, needs improvement.",
    Letter.D_PLUS: "Weak, more effort required.",
    Letter.D: "Weak, more effort required.",
    Letter.D_MINUS: "Weak, more effort required.",
    Letter.E: "Very poor, urgent improvement needed.",
}


def remark_for(letter: Letter) -> str:
    return _REMARKS[letter]
