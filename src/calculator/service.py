# src/calculator/service.py
"""
End-to-end calculator service.

Single source of truth:
- raw form dict -> form validation -> EstimateRequest
- EstimateRequest -> estimate -> EstimateResult -> result card
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Mapping, Optional, Tuple

from src.calculator.display import ResultCard, build_result_card
from src.calculator.form import parse_form
from src.pricing.config import CATEGORY_LABELS, EstimatorConfig
from src.pricing.estimate import EstimateResult, estimate
from src.utils.config import get_currency

logger = logging.getLogger(__name__)

OVERRIDABLE_FIELDS = [
    "currency",
    "default_base_price",
    "reference_coverage",
    "smoker_multiplier",
    "female_multiplier",
    "rounding_unit",
]

# Divisors and multipliers; zero or negative values break the premium
POSITIVE_FIELDS = set(OVERRIDABLE_FIELDS) - {"currency"}


def default_config() -> EstimatorConfig:
    return EstimatorConfig(currency=get_currency())


def _merge_overrides(overrides: Mapping[str, Any], base: EstimatorConfig) -> EstimatorConfig:
    """
    Apply caller overrides to EstimatorConfig; None means keep the base value.
    Supported keys:
      currency, default_base_price, reference_coverage, smoker_multiplier, female_multiplier, rounding_unit
    """
    cfg_dict = asdict(base)
    for k in OVERRIDABLE_FIELDS:
        v = overrides.get(k)
        if v is None:
            continue
        if k in POSITIVE_FIELDS and not v > 0:
            raise ValueError(f"Override {k} must be greater than 0, got: {v}")
        cfg_dict[k] = v
    return EstimatorConfig(**cfg_dict)


def estimate_from_form(
    raw: Mapping[str, Any],
    *,
    cfg: Optional[EstimatorConfig] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Tuple[EstimateResult, ResultCard, List[str]]:
    """
    Full calculation:
      raw form -> request -> estimate -> card
    Raises FormValidationError when the form is incomplete.
    Returns (EstimateResult, ResultCard, warnings).
    """
    parsed = parse_form(raw)
    for w in parsed.warnings:
        logger.info("Form warning: %s", w)

    base_cfg = cfg or default_config()
    merged = _merge_overrides(overrides or {}, base_cfg)

    result = estimate(parsed.request, cfg=merged)
    return result, build_result_card(result), parsed.warnings


def estimate_from_form_dict(
    raw: Mapping[str, Any],
    *,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Convenience: returns a JSON-ready dict and includes warnings.
    """
    result, card, warnings = estimate_from_form(raw, overrides=overrides)
    return {"result": result.to_dict(), "card": card.to_dict(), "warnings": warnings}


def list_products(cfg: Optional[EstimatorConfig] = None) -> List[Dict[str, Any]]:
    cfg = cfg or default_config()
    return [
        {
            "category": code,
            "label": label,
            "base_price": float(cfg.base_prices.get(code, cfg.default_base_price)),
            "currency": cfg.currency,
        }
        for code, label in CATEGORY_LABELS.items()
    ]
