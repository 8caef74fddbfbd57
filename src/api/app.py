# src/api/app.py
"""
FastAPI service for the premium calculator (thin API wrapper).

Endpoints:
- GET  /health
- GET  /products          -> insurance categories with base prices
- GET  /calculator/form   -> blank form (optionally with ?category= pre-selected)
- POST /estimate          -> premium + result card (+ warnings)
- POST /apply             -> placeholder notice
- POST /reset             -> blank form + empty-state panel

The API layer stays thin:
- accepts raw form values
- calls src.calculator.service
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from src.calculator.display import apply_notice, empty_state
from src.calculator.form import FormValidationError, blank_form, prefill
from src.calculator.service import estimate_from_form_dict, list_products

logger = logging.getLogger(__name__)

app = FastAPI(title="Insurance Premium Estimator", version="0.1.0")


# -----------------------------
# Schemas
# -----------------------------
class CalculatorForm(BaseModel):
    # Raw control values; validation happens in src.calculator.form
    insurance_type: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[Union[int, float, str]] = None
    coverage: Optional[Union[int, float, str]] = None
    period: Optional[Union[int, str]] = None

    # Checkbox (accept bool or strings)
    smoker: Optional[Union[bool, str]] = None


class EstimateRequestBody(CalculatorForm):
    # Optional pricing overrides
    currency: Optional[str] = None
    default_base_price: Optional[float] = Field(default=None, gt=0)
    reference_coverage: Optional[float] = Field(default=None, gt=0)
    smoker_multiplier: Optional[float] = Field(default=None, gt=0)
    female_multiplier: Optional[float] = Field(default=None, gt=0)
    rounding_unit: Optional[int] = Field(default=None, gt=0)


class EstimateResponse(BaseModel):
    result: Dict[str, Any]
    card: Dict[str, Any]
    warnings: List[str] = Field(default_factory=list)


class Product(BaseModel):
    category: str
    label: str
    base_price: float
    currency: str


class FormStateResponse(BaseModel):
    insurance_type: str = ""
    gender: str = ""
    age: str = ""
    coverage: str = ""
    period: str = ""
    smoker: bool = False


class ResetResponse(BaseModel):
    form: FormStateResponse
    panel: Dict[str, Any]


class NoticeResponse(BaseModel):
    message: str


# -----------------------------
# Routes
# -----------------------------
@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/products", response_model=List[Product])
def products() -> List[Product]:
    return [Product(**p) for p in list_products()]


@app.get("/calculator/form", response_model=FormStateResponse)
def calculator_form(category: Optional[str] = None) -> FormStateResponse:
    state = prefill(category) if category else blank_form()
    return FormStateResponse(**state.to_dict())


@app.post("/estimate", response_model=EstimateResponse)
def estimate(req: EstimateRequestBody) -> EstimateResponse:
    form_fields = set(CalculatorForm.model_fields)
    raw = req.model_dump(include=form_fields)
    overrides = req.model_dump(exclude=form_fields)

    try:
        out = estimate_from_form_dict(raw, overrides=overrides)
    except FormValidationError as e:
        logger.warning("Rejected calculator form: %s (%s)", e.message, e.field)
        raise HTTPException(status_code=422, detail=e.to_dict()) from e

    return EstimateResponse(
        result=dict(out["result"]),
        card=dict(out["card"]),
        warnings=list(out.get("warnings", [])),
    )


@app.post("/apply", response_model=NoticeResponse)
def apply() -> NoticeResponse:
    return NoticeResponse(message=apply_notice())


@app.post("/reset", response_model=ResetResponse)
def reset() -> ResetResponse:
    return ResetResponse(
        form=FormStateResponse(**blank_form().to_dict()),
        panel=empty_state().to_dict(),
    )
