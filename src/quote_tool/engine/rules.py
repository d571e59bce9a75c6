"""
Business rules applied by the evaluation engine.

Each rule is a predicate/effect pair. ``applies`` inspects the product,
the order context and the outcome so far; ``apply`` returns a new outcome
and never mutates its inputs.
"""
import math
from datetime import date
from enum import IntEnum
from typing import Any, Iterable, Optional

from ..errors import MissingFieldError
from .forms import CERTIFICATION
from .models import (
    Adjustment,
    AdjustmentKind,
    OrderContext,
    Product,
    ProductType,
    RuleOutcome,
)


class RulePhase(IntEnum):
    """Evaluation phases, in the order the engine runs them."""
    VISIBILITY = 10
    PRICE = 20
    REQUIREMENT = 30


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _as_number(value: Any) -> Optional[float]:
    if _is_blank(value) or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def resolve_field(product: Product, context: OrderContext, name: str) -> Any:
    """
    Look up a field for a predicate.

    The product attribute is authoritative; a value typed into the form is
    used only when the product does not carry the field. Raises
    MissingFieldError when neither has a value.
    """
    value = product.attribute(name)
    if _is_blank(value):
        value = context.field_values.get(name)
    if _is_blank(value):
        raise MissingFieldError(name)
    return value


def typed_number(context: OrderContext, name: str) -> Optional[float]:
    """Numeric form value, or None when blank or unparseable."""
    return _as_number(context.field_values.get(name))


def resolve_number(product: Product, context: OrderContext, name: str) -> float:
    """
    Numeric field for a predicate: the product attribute, else a parseable
    form value. Raises MissingFieldError when neither is usable.
    """
    number = _as_number(product.attribute(name))
    if number is None:
        number = typed_number(context, name)
    if number is None:
        raise MissingFieldError(name)
    return number


class Rule:
    """Base class for evaluation rules."""

    rule_id: str = "rule"
    name: str = "Rule"
    phase: RulePhase = RulePhase.PRICE

    def applies(self, product: Product, context: OrderContext, outcome: RuleOutcome, today: date) -> bool:
        raise NotImplementedError

    def apply(self, product: Product, context: OrderContext, outcome: RuleOutcome, today: date) -> RuleOutcome:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}({self.rule_id!r})"


class FieldVisibilityRule(Rule):
    """Shows exactly the fields declared for one product variant."""

    phase = RulePhase.VISIBILITY

    def __init__(self, product_type: ProductType, fields: Iterable[str]):
        self.product_type = product_type
        self.fields = frozenset(fields)
        self.rule_id = f"visibility-{product_type.value}"
        self.name = f"{product_type.value.title()} form fields"

    def applies(self, product, context, outcome, today):
        return product.product_type == self.product_type

    def apply(self, product, context, outcome, today):
        return outcome.with_visible_fields(self.fields).with_rule_applied(
            self.rule_id, self.name, ", ".join(sorted(self.fields))
        )


class VolumeDiscountRule(Rule):
    """Percentage discount on the running subtotal for large orders."""

    rule_id = "volume-discount"
    name = "Volume discount"
    phase = RulePhase.PRICE

    def __init__(self, threshold: int = 50, rate: float = 0.15):
        self.threshold = threshold
        self.rate = rate

    def applies(self, product, context, outcome, today):
        return context.quantity >= self.threshold

    def apply(self, product, context, outcome, today):
        subtotal = outcome.subtotal
        amount = round(subtotal * self.rate, 2)
        outcome = outcome.with_adjustment(Adjustment(self.rule_id, -amount, AdjustmentKind.DISCOUNT))
        return outcome.with_rule_applied(
            self.rule_id,
            f"{self.name} {self.rate:.0%} for qty>={self.threshold}: ${subtotal:.2f} → ${outcome.subtotal:.2f}",
            f"-${amount:.2f}",
        )


class UrgencyFeeRule(Rule):
    """Surcharge on the running subtotal when delivery is requested soon."""

    rule_id = "urgency-fee"
    name = "Urgency fee"
    phase = RulePhase.PRICE

    def __init__(self, window_days: int = 7, rate: float = 0.20):
        self.window_days = window_days
        self.rate = rate

    def applies(self, product, context, outcome, today):
        # Past dates count as urgent too
        return (context.requested_delivery_date - today).days < self.window_days

    def apply(self, product, context, outcome, today):
        subtotal = outcome.subtotal
        amount = round(subtotal * self.rate, 2)
        outcome = outcome.with_adjustment(Adjustment(self.rule_id, amount, AdjustmentKind.SURCHARGE))
        return outcome.with_rule_applied(
            self.rule_id,
            f"{self.name} {self.rate:.0%} for delivery within {self.window_days} days: "
            f"${subtotal:.2f} → ${outcome.subtotal:.2f}",
            f"+${amount:.2f}",
        )


class CertificationRequiredRule(Rule):
    """High-voltage industrial products need a safety certification."""

    rule_id = "certification-required"
    name = "Certification required"
    phase = RulePhase.REQUIREMENT

    def __init__(self, voltage_threshold: float = 220.0):
        self.voltage_threshold = voltage_threshold

    def applies(self, product, context, outcome, today):
        if product.product_type != ProductType.INDUSTRIAL:
            return False
        if product.attribute("certification_required"):
            return True
        voltage = resolve_number(product, context, "voltage")
        # A typed voltage can raise the rating, never lower it
        typed = typed_number(context, "voltage")
        if typed is not None:
            voltage = max(voltage, typed)
        return voltage > self.voltage_threshold

    def apply(self, product, context, outcome, today):
        return outcome.with_required_field(CERTIFICATION.name).with_rule_applied(
            self.rule_id,
            f"{self.name} above {self.voltage_threshold:g}V",
            CERTIFICATION.name,
        )
