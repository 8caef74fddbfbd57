# src/calculator/form.py
"""
Calculator form handling.

Turns the raw values of the six calculator controls into a validated
EstimateRequest. Checks run in the order the page asks for them and stop
at the first failure, which is reported as a FormValidationError carrying
the field name and the message to show the visitor.

Non-fatal issues (unknown insurance type, unreadable smoker flag) are
returned as warnings next to the request.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from src.pricing.config import CATEGORY_LABELS, MAX_AGE, MIN_AGE, Gender
from src.pricing.estimate import EstimateRequest
from src.utils.coerce import to_flag, to_int

MSG_CATEGORY = "Please select an insurance type."
MSG_GENDER = "Please select a gender."
MSG_AGE = "Please enter a valid age (0-100)."
MSG_COVERAGE = "Please select a coverage amount."
MSG_PERIOD = "Please select a coverage period."

_LABEL_TO_CODE = {label: code for code, label in CATEGORY_LABELS.items()}


class FormValidationError(ValueError):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class FormParseResult:
    request: EstimateRequest
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FormState:
    """Values held by the calculator controls; blank means nothing selected."""

    insurance_type: str = ""
    gender: str = ""
    age: str = ""
    coverage: str = ""
    period: str = ""
    smoker: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _text(val: Any) -> str:
    if val is None:
        return ""
    return str(val).strip()


def resolve_category(value: Any) -> Optional[str]:
    """
    Map a category code or its display label to the code.
    Returns None for anything unknown.
    """
    text = _text(value)
    if text in CATEGORY_LABELS:
        return text
    return _LABEL_TO_CODE.get(text)


def parse_form(raw: Mapping[str, Any]) -> FormParseResult:
    """
    Validate raw form values and build the request.

    Expected keys: insurance_type, gender, age, coverage, period, smoker.
    """
    warnings: List[str] = []

    category_raw = _text(raw.get("insurance_type"))
    if not category_raw:
        raise FormValidationError("insurance_type", MSG_CATEGORY)
    category = resolve_category(category_raw)
    if category is None:
        category = category_raw
        warnings.append(f"Unrecognised insurance_type='{category_raw}'; default base price applied.")

    gender = _text(raw.get("gender")).lower()
    if gender not in {g.value for g in Gender}:
        raise FormValidationError("gender", MSG_GENDER)

    age = to_int(raw.get("age"))
    if age is None or age < MIN_AGE or age > MAX_AGE:
        raise FormValidationError("age", MSG_AGE)

    coverage = to_int(raw.get("coverage"))
    if coverage is None or coverage <= 0:
        raise FormValidationError("coverage", MSG_COVERAGE)

    period = _text(raw.get("period"))
    if not period:
        raise FormValidationError("period", MSG_PERIOD)

    smoker_raw = raw.get("smoker")
    smoker = to_flag(smoker_raw)
    if smoker is None:
        if smoker_raw is not None and _text(smoker_raw) != "":
            warnings.append(f"Could not map smoker='{smoker_raw}' to yes/no; treated as non-smoker.")
        smoker = False

    request = EstimateRequest(
        category=category,
        gender=Gender(gender),
        age=age,
        coverage_unit=coverage,
        term_years=period,
        is_smoker=smoker,
    )
    return FormParseResult(request=request, warnings=warnings)


def blank_form() -> FormState:
    return FormState()


def prefill(category: Any) -> FormState:
    """
    Form opened from a product card: the category is pre-selected when known.
    """
    code = resolve_category(category)
    return FormState(insurance_type=code or "")
