import pytest

from src.calculator.form import FormValidationError
from src.calculator.service import (
    _merge_overrides,
    default_config,
    estimate_from_form,
    estimate_from_form_dict,
    list_products,
)
from src.pricing.config import EstimatorConfig

FORM = {
    "insurance_type": "Driver",
    "gender": "male",
    "age": "25",
    "coverage": "10000",
    "period": "10",
    "smoker": "on",
}


def test_estimate_from_form():
    result, card, warnings = estimate_from_form(FORM)
    assert result.monthly_premium == 30000
    assert card.premium_amount == "30,000"
    assert warnings == []


def test_estimate_from_form_dict_is_json_ready():
    out = estimate_from_form_dict(dict(FORM, insurance_type="Gadget"))
    assert set(out) == {"result", "card", "warnings"}
    assert out["result"]["factors"]["base_price"] == 20000.0
    assert len(out["warnings"]) == 1


def test_validation_errors_propagate():
    with pytest.raises(FormValidationError):
        estimate_from_form(dict(FORM, period=""))


def test_overrides_replace_only_given_fields():
    base = EstimatorConfig()
    merged = _merge_overrides({"currency": "USD", "smoker_multiplier": None, "rounding_unit": 1000}, base)
    assert merged.currency == "USD"
    assert merged.rounding_unit == 1000
    assert merged.smoker_multiplier == base.smoker_multiplier
    assert merged.base_prices == base.base_prices


def test_overrides_change_the_premium():
    result, _, _ = estimate_from_form(FORM, overrides={"smoker_multiplier": 1.0})
    assert result.monthly_premium == 23000


def test_currency_from_environment(monkeypatch):
    monkeypatch.setenv("ESTIMATOR_CURRENCY", "USD")
    assert default_config().currency == "USD"
    result, _, _ = estimate_from_form(FORM)
    assert result.currency == "USD"


def test_list_products():
    products = list_products(EstimatorConfig())
    assert [p["category"] for p in products] == [
        "MedicalExpense",
        "Cancer",
        "Driver",
        "Dental",
        "WholeLife",
        "Pension",
    ]
    assert products[-1] == {"category": "Pension", "label": "연금보험", "base_price": 100000.0, "currency": "KRW"}


@pytest.mark.parametrize(
    "key, value",
    [("rounding_unit", 0), ("reference_coverage", 0), ("default_base_price", -100.0), ("smoker_multiplier", -1.3)],
)
def test_non_positive_overrides_are_rejected(key, value):
    with pytest.raises(ValueError, match=key):
        _merge_overrides({key: value}, EstimatorConfig())
