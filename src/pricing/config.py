# src/pricing/config.py
"""
Estimator configuration.

Fixed rating tables for the illustrative monthly premium:
- base_prices: starting monthly premium per insurance category (KRW)
- default_base_price: used for any category not in the table
- age_brackets: half-open (upper_exclusive, multiplier) brackets; oldest_multiplier above the last
- female_multiplier / smoker_multiplier
- term_multipliers: by exact term value ("100" = cover to age 100)
- reference_coverage: coverage unit that prices at x1.0
- rounding_unit: final premium is rounded to a multiple of this
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple


class Category(str, Enum):
    MEDICAL_EXPENSE = "MedicalExpense"
    CANCER = "Cancer"
    DRIVER = "Driver"
    DENTAL = "Dental"
    WHOLE_LIFE = "WholeLife"
    PENSION = "Pension"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class Term(str, Enum):
    TEN = "10"
    TWENTY = "20"
    THIRTY = "30"
    TO_AGE_100 = "100"


# Accepted applicant ages, inclusive
MIN_AGE = 0
MAX_AGE = 100

# Labels shown on the product cards and in the result card
CATEGORY_LABELS: Dict[str, str] = {
    Category.MEDICAL_EXPENSE.value: "실손의료보험",
    Category.CANCER.value: "암보험",
    Category.DRIVER.value: "운전자보험",
    Category.DENTAL.value: "치아보험",
    Category.WHOLE_LIFE.value: "종신보험",
    Category.PENSION.value: "연금보험",
}

DEFAULT_BASE_PRICES: Dict[str, float] = {
    Category.MEDICAL_EXPENSE.value: 25000.0,
    Category.CANCER.value: 35000.0,
    Category.DRIVER.value: 18000.0,
    Category.DENTAL.value: 22000.0,
    Category.WHOLE_LIFE.value: 45000.0,
    Category.PENSION.value: 100000.0,
}

DEFAULT_TERM_MULTIPLIERS: Dict[str, float] = {
    Term.TEN.value: 0.8,
    Term.TWENTY.value: 1.0,
    Term.THIRTY.value: 1.2,
    Term.TO_AGE_100.value: 1.5,
}


@dataclass(frozen=True)
class EstimatorConfig:
    currency: str = "KRW"

    base_prices: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_BASE_PRICES))
    default_base_price: float = 20000.0

    # age < 30 -> 0.8, age < 40 -> 1.0, ... anything older -> oldest_multiplier
    age_brackets: Tuple[Tuple[int, float], ...] = ((30, 0.8), (40, 1.0), (50, 1.3), (60, 1.6))
    oldest_multiplier: float = 2.0

    female_multiplier: float = 0.95
    smoker_multiplier: float = 1.3

    term_multipliers: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_TERM_MULTIPLIERS))
    default_term_multiplier: float = 1.0

    # coverage_unit / reference_coverage, no clamp
    reference_coverage: float = 5000.0

    rounding_unit: int = 100
