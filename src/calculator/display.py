# src/calculator/display.py
"""
Display text for the calculator result panel.

The page renders these objects as-is: every number is already formatted,
every label already localised.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Tuple

from src.pricing.config import CATEGORY_LABELS, Gender, Term
from src.pricing.estimate import EstimateResult

# Coverage units are multiples of this many won
COVERAGE_UNIT_WON = 10_000

CURRENCY_UNIT = "원"

RESULT_TITLE = "예상 보험료 계산 완료"
PREMIUM_LABEL = "월 납입 보험료"
DETAILS_HEADING = "계산 조건"

EMPTY_STATE_MESSAGE = "정보를 입력하고\n계산하기 버튼을 눌러주세요"
APPLY_NOTICE = "가입 신청 페이지로 이동합니다.\n(실제 서비스에서는 가입 페이지로 연결됩니다)"


@dataclass(frozen=True)
class CardAction:
    action: str
    label: str


@dataclass(frozen=True)
class ResultCard:
    title: str
    subtitle: str
    premium_label: str
    premium_amount: str
    premium_unit: str
    details_heading: str
    details: List[Tuple[str, str]]
    actions: List[CardAction]

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["details"] = [{"label": k, "value": v} for k, v in self.details]
        return out


@dataclass(frozen=True)
class EmptyState:
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def format_amount(value: float) -> str:
    """43200 -> '43,200'"""
    return f"{value:,.0f}"


def category_label(category: str) -> str:
    return CATEGORY_LABELS.get(category, category)


def gender_text(gender: str) -> str:
    return "남성" if gender == Gender.MALE.value else "여성"


def smoker_text(is_smoker: bool) -> str:
    return "흡연자" if is_smoker else "비흡연자"


def term_text(term_years: str) -> str:
    if term_years == Term.TO_AGE_100.value:
        return "100세까지"
    return f"{term_years}년"


def coverage_text(coverage_unit: int) -> str:
    return f"{format_amount(coverage_unit * COVERAGE_UNIT_WON)}{CURRENCY_UNIT}"


def build_result_card(result: EstimateResult) -> ResultCard:
    label = category_label(result.category)
    return ResultCard(
        title=RESULT_TITLE,
        subtitle=label,
        premium_label=PREMIUM_LABEL,
        premium_amount=format_amount(result.monthly_premium),
        premium_unit=CURRENCY_UNIT,
        details_heading=DETAILS_HEADING,
        details=[
            ("보험종류", label),
            ("성별 / 나이", f"{gender_text(result.gender)} / 만 {result.age}세"),
            ("보장금액", coverage_text(result.coverage_unit)),
            ("보장기간", term_text(result.term_years)),
            ("흡연여부", smoker_text(result.is_smoker)),
        ],
        actions=[
            CardAction(action="apply", label="가입 신청하기"),
            CardAction(action="reset", label="다시 계산하기"),
        ],
    )


def empty_state() -> EmptyState:
    return EmptyState(message=EMPTY_STATE_MESSAGE)


def apply_notice() -> str:
    # Placeholder until the application page exists
    return APPLY_NOTICE
