# src/pricing/estimate.py
"""
Premium estimation.

Provides:
- the request / result objects
- one helper per multiplier in the chain
- estimate(): request -> monthly premium

Chain:
  adjusted_base = base_price * age * gender
  premium       = round_half_up(adjusted_base * coverage * term * smoker / unit) * unit

Notes:
- Pure and deterministic; no validation here (see src.calculator.form).
- Rounding happens once, on the full product.
- Illustrative pricing only, not an actuarial rating engine.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

import numpy as np

from src.pricing.config import EstimatorConfig, Gender


@dataclass(frozen=True)
class EstimateRequest:
    category: str
    gender: Union[Gender, str]
    age: int
    coverage_unit: int
    term_years: Union[str, int]
    is_smoker: bool


@dataclass(frozen=True)
class EstimateResult:
    monthly_premium: int
    category: str
    gender: str
    age: int
    coverage_unit: int
    term_years: str
    is_smoker: bool
    currency: str
    factors: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def gender_key(gender: Union[Gender, str]) -> str:
    """
    "Female", " female " and Gender.FEMALE all become "female".
    """
    return str(_plain(gender)).strip().lower()


def term_key(term_years: Any) -> str:
    """
    "10", 10 and 10.0 all become "10".
    """
    value = _plain(term_years)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def base_price(category: Optional[str], cfg: EstimatorConfig) -> float:
    """
    Category base price; anything not in the table uses cfg.default_base_price.
    """
    return float(cfg.base_prices.get(_plain(category), cfg.default_base_price))


def age_multiplier(age: int, cfg: EstimatorConfig) -> float:
    """
    Half-open brackets on age:

    - [0, 30)  : 0.8
    - [30, 40) : 1.0
    - [40, 50) : 1.3
    - [50, 60) : 1.6
    - 60+      : 2.0
    """
    for upper, mult in cfg.age_brackets:
        if age < upper:
            return mult
    return cfg.oldest_multiplier


def gender_multiplier(gender: Union[Gender, str], cfg: EstimatorConfig) -> float:
    if gender_key(gender) == Gender.FEMALE.value:
        return cfg.female_multiplier
    return 1.0


def coverage_multiplier(coverage_unit: int, cfg: EstimatorConfig) -> float:
    return coverage_unit / cfg.reference_coverage


def term_multiplier(term_years: Any, cfg: EstimatorConfig) -> float:
    return cfg.term_multipliers.get(term_key(term_years), cfg.default_term_multiplier)


def smoker_multiplier(is_smoker: bool, cfg: EstimatorConfig) -> float:
    return cfg.smoker_multiplier if is_smoker else 1.0


def round_to_unit(amount: float, unit: int = 100) -> int:
    """
    Round half up to the nearest multiple of unit (floor(x / unit + 0.5) * unit).
    """
    return int(np.floor(amount / unit + 0.5)) * unit


def estimate(
    request: EstimateRequest,
    cfg: Optional[EstimatorConfig] = None,
) -> EstimateResult:
    """
    Estimate the monthly premium for an already validated request.
    """
    cfg = cfg or EstimatorConfig()

    base = base_price(request.category, cfg)
    age_m = age_multiplier(request.age, cfg)
    gender_m = gender_multiplier(request.gender, cfg)
    adjusted_base = base * age_m * gender_m

    coverage_m = coverage_multiplier(request.coverage_unit, cfg)
    term_m = term_multiplier(request.term_years, cfg)
    smoker_m = smoker_multiplier(request.is_smoker, cfg)

    premium = round_to_unit(adjusted_base * coverage_m * term_m * smoker_m, cfg.rounding_unit)

    return EstimateResult(
        monthly_premium=premium,
        category=str(_plain(request.category)),
        gender=gender_key(request.gender),
        age=int(request.age),
        coverage_unit=int(request.coverage_unit),
        term_years=term_key(request.term_years),
        is_smoker=bool(request.is_smoker),
        currency=cfg.currency,
        factors={
            "base_price": base,
            "age": age_m,
            "gender": gender_m,
            "coverage": coverage_m,
            "term": term_m,
            "smoker": smoker_m,
        },
    )
