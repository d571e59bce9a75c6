"""
Quote Service - looks up products and runs the evaluation engine.
"""
from dataclasses import dataclass
from typing import Optional

from ..catalog.product_repository import ProductRepository
from ..engine.evaluation_engine import EvaluationEngine
from ..engine.forms import ALL_FIELDS, VARIANT_FORMS, FormField
from ..engine.models import OrderContext, Product, RuleOutcome


@dataclass(frozen=True)
class Quote:
    """Complete result of one quote attempt."""
    product: Product
    context: OrderContext
    outcome: RuleOutcome
    missing_required_fields: tuple[str, ...] = ()

    @property
    def final_price(self) -> float:
        return self.outcome.final_price

    @property
    def is_complete(self) -> bool:
        """True when every mandatory field has a value."""
        return not self.missing_required_fields

    def to_dict(self) -> dict:
        return {
            "product_id": self.product.id,
            "product_type": self.product.product_type.value,
            "quantity": self.context.quantity,
            "requested_delivery_date": self.context.requested_delivery_date.isoformat(),
            **self.outcome.to_dict(),
            "final_price": self.final_price,
            "missing_required_fields": list(self.missing_required_fields),
            "complete": self.is_complete,
        }


def _has_value(context: OrderContext, name: str) -> bool:
    # quantity and delivery_date are always carried by the context itself
    if name in ("quantity", "delivery_date"):
        return True
    value = context.field_values.get(name)
    return value is not None and not (isinstance(value, str) and not value.strip())


class QuoteService:
    """Entry point for the form layer."""

    def __init__(self, repository: ProductRepository, engine: EvaluationEngine):
        self.repository = repository
        self.engine = engine

    def quote(self, product_id: str, context: OrderContext) -> Quote:
        """
        Price a product and report which fields the form must show.

        Raises ProductNotFoundError for an unknown id and ConfigurationError
        if the product's variant has no registered rules.
        """
        product = self.repository.get(product_id)
        outcome = self.engine.evaluate(product, context)
        missing = tuple(sorted(
            name for name in outcome.required_fields if not _has_value(context, name)
        ))
        return Quote(product=product, context=context, outcome=outcome, missing_required_fields=missing)

    def form_for(self, product_id: str, outcome: Optional[RuleOutcome] = None) -> list[dict]:
        """
        Visible form fields for a product, in display order.

        Without an outcome only the variant's declared fields are returned;
        with one, rule-revealed fields are appended and required flags set.
        """
        product = self.repository.get(product_id)
        declared = VARIANT_FORMS[product.product_type]
        if outcome is None:
            return [self._field_dict(f, False) for f in declared]

        names = [f.name for f in declared if f.name in outcome.visible_fields]
        names += sorted(outcome.visible_fields - set(names))
        return [
            self._field_dict(ALL_FIELDS[n], n in outcome.required_fields)
            for n in names if n in ALL_FIELDS
        ]

    @staticmethod
    def _field_dict(form_field: FormField, required: bool) -> dict:
        return {
            "name": form_field.name,
            "label": form_field.label,
            "kind": form_field.kind,
            "required": required,
        }
