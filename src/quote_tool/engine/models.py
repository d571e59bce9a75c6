"""
Data models for the rule evaluation engine.

Uses frozen dataclasses so products, contexts and outcomes are immutable
values; rules produce new outcomes instead of mutating them.
"""
import math
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Mapping, Optional

from ..errors import ValidationError


class ProductType(str, Enum):
    """The closed set of product variants."""
    INDUSTRIAL = "industrial"
    RESIDENTIAL = "residential"
    CORPORATE = "corporate"


class AdjustmentKind(str, Enum):
    DISCOUNT = "discount"
    SURCHARGE = "surcharge"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require_number(product_id: str, name: str, value: Any) -> None:
    if _is_blank(value):
        raise ValidationError(
            f"Product '{product_id}' is missing required field '{name}'",
            {"product_id": product_id, "field": name},
        )
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValidationError(
            f"Field '{name}' must be a finite number",
            {"product_id": product_id, "field": name, "value": repr(value)},
        )


def _require_text(product_id: str, name: str, value: Any) -> None:
    if _is_blank(value):
        raise ValidationError(
            f"Product '{product_id}' is missing required field '{name}'",
            {"product_id": product_id, "field": name},
        )


@dataclass(frozen=True)
class Product:
    """Common product attributes. Use one of the variant subclasses."""
    id: str
    base_price: float
    name: Optional[str] = None

    product_type: ClassVar[ProductType]

    def __post_init__(self):
        if _is_blank(self.id):
            raise ValidationError("Product id is required")
        _require_number(self.id, "base_price", self.base_price)
        if self.base_price < 0:
            raise ValidationError(
                f"Product '{self.id}' has a negative base price",
                {"product_id": self.id, "base_price": self.base_price},
            )
        self.validate()

    def validate(self):
        """Validate variant-specific fields."""
        raise ValidationError(
            "Product must be constructed as a concrete variant",
            {"product_id": self.id},
        )

    def attribute(self, name: str) -> Any:
        """Variant attribute by field name, or None if the variant lacks it."""
        return getattr(self, name, None)


@dataclass(frozen=True)
class IndustrialProduct(Product):
    voltage: Optional[float] = None
    certification_required: bool = False

    product_type: ClassVar[ProductType] = ProductType.INDUSTRIAL

    def validate(self):
        _require_number(self.id, "voltage", self.voltage)
        if self.voltage <= 0:
            raise ValidationError(
                f"Product '{self.id}' voltage must be positive",
                {"product_id": self.id, "voltage": self.voltage},
            )


@dataclass(frozen=True)
class ResidentialProduct(Product):
    color_code: Optional[str] = None
    warranty_months: Optional[int] = None

    product_type: ClassVar[ProductType] = ProductType.RESIDENTIAL

    def validate(self):
        _require_text(self.id, "color_code", self.color_code)
        _require_number(self.id, "warranty_months", self.warranty_months)
        if self.warranty_months < 0:
            raise ValidationError(
                f"Product '{self.id}' warranty months cannot be negative",
                {"product_id": self.id, "warranty_months": self.warranty_months},
            )


@dataclass(frozen=True)
class CorporateProduct(Product):
    license_seats: Optional[int] = None
    support_tier: Optional[str] = None

    product_type: ClassVar[ProductType] = ProductType.CORPORATE

    def validate(self):
        _require_number(self.id, "license_seats", self.license_seats)
        if self.license_seats < 1:
            raise ValidationError(
                f"Product '{self.id}' needs at least one license seat",
                {"product_id": self.id, "license_seats": self.license_seats},
            )
        _require_text(self.id, "support_tier", self.support_tier)


PRODUCT_CLASSES: Mapping[ProductType, type] = MappingProxyType({
    ProductType.INDUSTRIAL: IndustrialProduct,
    ProductType.RESIDENTIAL: ResidentialProduct,
    ProductType.CORPORATE: CorporateProduct,
})


@dataclass(frozen=True)
class OrderContext:
    """Inputs of one quote attempt."""
    quantity: int
    requested_delivery_date: date
    field_values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValidationError(
                "Quantity must be an integer",
                {"quantity": repr(self.quantity)},
            )
        if self.quantity < 1:
            raise ValidationError(
                "Quantity must be at least 1",
                {"quantity": self.quantity},
            )
        if not isinstance(self.requested_delivery_date, date):
            raise ValidationError(
                "Requested delivery date must be a date",
                {"requested_delivery_date": repr(self.requested_delivery_date)},
            )
        # Freeze a private copy so callers cannot change values mid-evaluation
        object.__setattr__(self, 'field_values', MappingProxyType(dict(self.field_values or {})))


@dataclass(frozen=True)
class TraceStep:
    """A single step in the evaluation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class Adjustment:
    """A named price delta. Discounts are negative, surcharges positive."""
    label: str
    amount: float
    kind: AdjustmentKind


@dataclass(frozen=True)
class RuleOutcome:
    """
    Accumulated result of rule evaluation for one quote attempt.

    The final price is always derived from the base price and the
    adjustments; it is never stored.
    """
    base_price: float
    adjustments: tuple[Adjustment, ...] = ()
    required_fields: frozenset = frozenset()
    visible_fields: frozenset = frozenset()
    rules_applied: tuple[str, ...] = ()
    trace: tuple[TraceStep, ...] = ()

    def __post_init__(self):
        hidden = self.required_fields - self.visible_fields
        if hidden:
            raise ValueError(f"Required fields must be visible: {sorted(hidden)}")

    @classmethod
    def initial(cls, product: Product, context: OrderContext) -> 'RuleOutcome':
        """Starting outcome: base price × quantity, nothing else decided."""
        base = round(product.base_price * context.quantity, 2)
        return cls(
            base_price=base,
            trace=(TraceStep("Base Price", f"{context.quantity} × ${product.base_price:.2f}", f"${base:.2f}"),),
        )

    @property
    def final_price(self) -> float:
        return round(self.base_price + sum(a.amount for a in self.adjustments), 2)

    @property
    def subtotal(self) -> float:
        """Running price at this point of the evaluation."""
        return self.final_price

    def with_adjustment(self, adjustment: Adjustment) -> 'RuleOutcome':
        return replace(self, adjustments=self.adjustments + (adjustment,))

    def with_visible_fields(self, fields) -> 'RuleOutcome':
        return replace(self, visible_fields=frozenset(fields))

    def with_required_field(self, name: str) -> 'RuleOutcome':
        """Mark a field mandatory; it is made visible as well."""
        return replace(
            self,
            visible_fields=self.visible_fields | {name},
            required_fields=self.required_fields | {name},
        )

    def with_rule_applied(self, rule_id: str, description: str, value: Optional[str] = None) -> 'RuleOutcome':
        return replace(
            self,
            rules_applied=self.rules_applied + (rule_id,),
            trace=self.trace + (TraceStep("Rule Applied", description, value),),
        )

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "base_price": self.base_price,
            "adjustments": [
                {"label": a.label, "amount": a.amount, "kind": a.kind.value}
                for a in self.adjustments
            ],
            "final_price": self.final_price,
            "required_fields": sorted(self.required_fields),
            "visible_fields": sorted(self.visible_fields),
            "rules_applied": list(self.rules_applied),
            "trace": self.get_trace_text(),
        }
