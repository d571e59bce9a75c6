"""
Product Factory - builds product variants from raw mappings.

Raw data comes from CSV rows or JSON bodies, so keys may be camelCase or
snake_case and numbers may arrive as strings.
"""
import math
import re
from dataclasses import fields
from typing import Any, Mapping

from ..engine.models import PRODUCT_CLASSES, Product, ProductType
from ..errors import ValidationError


def to_snake_case(key: str) -> str:
    """Normalize a key like 'basePrice' or 'Base Price' to 'base_price'."""
    key = re.sub(r'(?<=[a-z0-9])([A-Z])', r'_\1', str(key).strip())
    return re.sub(r'[\s\-]+', '_', key).lower()


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ''


def parse_bool(value: Any) -> bool:
    """Parse a boolean from CSV/JSON."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('true', '1', 'yes', 'on')


def parse_number(name: str, value: Any, integer: bool = False):
    if isinstance(value, bool):
        raise ValidationError(f"Field '{name}' must be a number", {"field": name})
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Field '{name}' must be a number",
            {"field": name, "value": str(value)},
        ) from None
    if integer:
        if not number.is_integer():
            raise ValidationError(
                f"Field '{name}' must be a whole number",
                {"field": name, "value": str(value)},
            )
        return int(number)
    return number


# Field name → parser for the non-text fields of every variant
FIELD_PARSERS = {
    'base_price': lambda v: parse_number('base_price', v),
    'voltage': lambda v: parse_number('voltage', v),
    'certification_required': parse_bool,
    'warranty_months': lambda v: parse_number('warranty_months', v, integer=True),
    'license_seats': lambda v: parse_number('license_seats', v, integer=True),
}


class ProductFactory:
    """Creates Product variants from raw data keyed by a 'type' tag."""

    TYPE_KEYS = ('type', 'product_type')

    def _normalize(self, data: Mapping[str, Any]) -> dict:
        return {to_snake_case(k): v for k, v in data.items() if not _is_missing(v)}

    def resolve_type(self, data: Mapping[str, Any]) -> ProductType:
        """Product variant named by the raw data. Raises ValidationError."""
        normalized = self._normalize(data)
        tag = next((normalized[k] for k in self.TYPE_KEYS if k in normalized), None)
        if tag is None:
            raise ValidationError("Product type is required")
        if isinstance(tag, ProductType):
            return tag
        try:
            return ProductType(str(tag).strip().lower())
        except ValueError:
            raise ValidationError(
                f"Unknown product type '{tag}'",
                {"product_type": str(tag), "known": [t.value for t in ProductType]},
            ) from None

    def can_create(self, data: Mapping[str, Any]) -> bool:
        """True if create() would succeed for this data."""
        try:
            self.create(data)
        except ValidationError:
            return False
        return True

    def create(self, data: Mapping[str, Any]) -> Product:
        """
        Build a product variant.

        Unknown keys are ignored. Raises ValidationError for an unknown
        type, unparseable values or missing variant fields.
        """
        product_type = self.resolve_type(data)
        cls = PRODUCT_CLASSES[product_type]
        normalized = self._normalize(data)
        if 'price' in normalized and 'base_price' not in normalized:
            normalized['base_price'] = normalized['price']

        kwargs = {}
        for f in fields(cls):
            if f.name not in normalized:
                continue
            value = normalized[f.name]
            parser = FIELD_PARSERS.get(f.name)
            kwargs[f.name] = parser(value) if parser else str(value).strip()

        for required in ('id', 'base_price'):
            if required not in kwargs:
                raise ValidationError(
                    f"Product field '{required}' is required",
                    {"field": required, "product_type": product_type.value},
                )
        return cls(**kwargs)
