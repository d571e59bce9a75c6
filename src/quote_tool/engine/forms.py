"""
Form field declarations for each product variant.

The form layer renders these; visibility rules expose exactly the names
declared here for the product's variant.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .models import ProductType


@dataclass(frozen=True)
class FormField:
    """A single input on a quote form."""
    name: str
    label: str
    kind: str  # "integer", "number", "text", "date", "file"


QUANTITY = FormField("quantity", "Quantity", "integer")
DELIVERY_DATE = FormField("delivery_date", "Requested delivery date", "date")

# Hidden unless a rule requires it
CERTIFICATION = FormField("certification", "Safety certification", "file")

VARIANT_FORMS: Mapping[ProductType, tuple[FormField, ...]] = MappingProxyType({
    ProductType.INDUSTRIAL: (
        QUANTITY,
        DELIVERY_DATE,
        FormField("voltage", "Voltage (V)", "number"),
    ),
    ProductType.RESIDENTIAL: (
        QUANTITY,
        DELIVERY_DATE,
        FormField("color_code", "Color code", "text"),
        FormField("warranty_months", "Warranty (months)", "integer"),
    ),
    ProductType.CORPORATE: (
        QUANTITY,
        DELIVERY_DATE,
        FormField("license_seats", "License seats", "integer"),
        FormField("support_tier", "Support tier", "text"),
    ),
})

ALL_FIELDS: Mapping[str, FormField] = MappingProxyType({
    f.name: f
    for form in VARIANT_FORMS.values()
    for f in form + (CERTIFICATION,)
})


def visible_field_names(product_type: ProductType) -> frozenset:
    """Names of the fields a variant's form shows before any rule runs."""
    return frozenset(f.name for f in VARIANT_FORMS[product_type])
