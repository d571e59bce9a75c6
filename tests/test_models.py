from datetime import date

import pytest

from quote_tool.engine.models import (
    Adjustment,
    AdjustmentKind,
    CorporateProduct,
    IndustrialProduct,
    OrderContext,
    Product,
    ProductType,
    ResidentialProduct,
    RuleOutcome,
)
from quote_tool.errors import ValidationError


def test_industrial_requires_voltage():
    """An industrial product without a voltage cannot be built."""
    with pytest.raises(ValidationError) as exc:
        IndustrialProduct(id="IND-1", base_price=10.0)
    assert exc.value.details["field"] == "voltage"


@pytest.mark.parametrize("kwargs, field", [
    ({"warranty_months": 12}, "color_code"),
    ({"color_code": "  ", "warranty_months": 12}, "color_code"),
    ({"color_code": "RED"}, "warranty_months"),
])
def test_residential_requires_variant_fields(kwargs, field):
    with pytest.raises(ValidationError) as exc:
        ResidentialProduct(id="RES-1", base_price=10.0, **kwargs)
    assert exc.value.details["field"] == field


def test_corporate_requires_seats_and_tier():
    with pytest.raises(ValidationError):
        CorporateProduct(id="C-1", base_price=10.0, support_tier="gold")
    with pytest.raises(ValidationError):
        CorporateProduct(id="C-1", base_price=10.0, license_seats=0, support_tier="gold")
    with pytest.raises(ValidationError):
        CorporateProduct(id="C-1", base_price=10.0, license_seats=5)


def test_common_fields_validated():
    with pytest.raises(ValidationError):
        IndustrialProduct(id="", base_price=10.0, voltage=110)
    with pytest.raises(ValidationError):
        IndustrialProduct(id="IND-1", base_price=-1.0, voltage=110)
    with pytest.raises(ValidationError):
        IndustrialProduct(id="IND-1", base_price="10", voltage=110)


@pytest.mark.parametrize("bad", [float("inf"), float("-inf"), float("nan")])
def test_numeric_fields_must_be_finite(bad):
    with pytest.raises(ValidationError) as exc:
        IndustrialProduct(id="IND-1", base_price=bad, voltage=110)
    assert exc.value.details["field"] == "base_price"
    with pytest.raises(ValidationError) as exc:
        IndustrialProduct(id="IND-1", base_price=10.0, voltage=bad)
    assert exc.value.details["field"] == "voltage"


def test_base_product_is_not_constructible():
    with pytest.raises(ValidationError):
        Product(id="P-1", base_price=1.0)


def test_products_are_immutable(industrial):
    with pytest.raises(AttributeError):
        industrial.voltage = 110


def test_product_type_tags(industrial, residential, corporate):
    assert industrial.product_type == ProductType.INDUSTRIAL
    assert residential.product_type == ProductType.RESIDENTIAL
    assert corporate.product_type == ProductType.CORPORATE


@pytest.mark.parametrize("quantity", [0, -3, 1.5, True, "2"])
def test_context_rejects_bad_quantity(quantity):
    with pytest.raises(ValidationError):
        OrderContext(quantity=quantity, requested_delivery_date=date(2026, 4, 1))


def test_context_rejects_non_date():
    with pytest.raises(ValidationError):
        OrderContext(quantity=1, requested_delivery_date="2026-04-01")


def test_context_field_values_are_frozen_copy():
    values = {"voltage": 300}
    context = OrderContext(quantity=1, requested_delivery_date=date(2026, 4, 1), field_values=values)
    values["voltage"] = 110

    assert context.field_values["voltage"] == 300
    with pytest.raises(TypeError):
        context.field_values["voltage"] = 1


def test_final_price_is_derived_from_adjustments():
    outcome = RuleOutcome(base_price=1000.0)
    outcome = outcome.with_adjustment(Adjustment("volume-discount", -150.0, AdjustmentKind.DISCOUNT))
    outcome = outcome.with_adjustment(Adjustment("urgency-fee", 170.0, AdjustmentKind.SURCHARGE))

    assert outcome.final_price == 1020.0
    assert outcome.final_price == outcome.base_price + sum(a.amount for a in outcome.adjustments)


def test_outcome_rejects_hidden_required_field():
    with pytest.raises(ValueError):
        RuleOutcome(base_price=1.0, required_fields=frozenset({"certification"}))


def test_required_field_becomes_visible():
    outcome = RuleOutcome(base_price=1.0).with_required_field("certification")
    assert outcome.required_fields == {"certification"}
    assert "certification" in outcome.visible_fields


def test_outcome_transformations_do_not_mutate():
    original = RuleOutcome(base_price=10.0)
    original.with_adjustment(Adjustment("x", -1.0, AdjustmentKind.DISCOUNT))
    original.with_visible_fields({"quantity"})
    assert original.adjustments == ()
    assert original.visible_fields == frozenset()


def test_trace_text(industrial):
    context = OrderContext(quantity=2, requested_delivery_date=date(2026, 4, 1))
    outcome = RuleOutcome.initial(industrial, context)
    assert outcome.base_price == 200.0
    assert outcome.get_trace_text() == "→ Base Price: 2 × $100.00 = $200.00"
