"""
RuleSet Registry - maps each product variant to its ordered rule list.

Built once at startup from Settings and passed to the engine; it has no
mutation API after construction.
"""
import logging
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from ..config.settings import Settings, get_settings
from ..errors import ConfigurationError
from .forms import visible_field_names
from .models import ProductType
from .rules import (
    CertificationRequiredRule,
    FieldVisibilityRule,
    Rule,
    UrgencyFeeRule,
    VolumeDiscountRule,
)

logger = logging.getLogger(__name__)


class RuleSetRegistry:
    """Read-only table of product variant → rules."""

    def __init__(self, rule_sets: Mapping[ProductType, Sequence[Rule]]):
        table = {}
        for product_type, rules in rule_sets.items():
            product_type = ProductType(product_type)
            rules = tuple(rules)
            self._check_visibility(product_type, rules)
            table[product_type] = rules
        self._rule_sets = MappingProxyType(table)

    @staticmethod
    def _check_visibility(product_type: ProductType, rules: tuple):
        visibility = [r for r in rules if isinstance(r, FieldVisibilityRule)]
        if len(visibility) != 1:
            raise ConfigurationError(
                f"Variant '{product_type.value}' needs exactly one visibility rule, got {len(visibility)}",
                {"product_type": product_type.value},
            )
        if visibility[0].product_type != product_type:
            raise ConfigurationError(
                f"Visibility rule for '{visibility[0].product_type.value}' registered under "
                f"'{product_type.value}'",
                {"product_type": product_type.value},
            )

    @property
    def product_types(self) -> frozenset:
        return frozenset(self._rule_sets)

    def rules_for(self, product_type: ProductType) -> tuple[Rule, ...]:
        """Ordered rules for a variant. Raises ConfigurationError if unregistered."""
        if product_type not in self:
            raise ConfigurationError(
                f"No rules registered for product type '{getattr(product_type, 'value', product_type)}'",
                {"product_type": str(getattr(product_type, 'value', product_type))},
            )
        return self._rule_sets[product_type]

    def __contains__(self, product_type) -> bool:
        return product_type in self._rule_sets


def build_default_registry(settings: Optional[Settings] = None) -> RuleSetRegistry:
    """
    Build the rule table for every known variant.

    Price rules are declared volume discount first, then urgency fee, so
    the fee is charged on the discounted subtotal.
    """
    settings = settings or get_settings()

    def price_rules():
        return [
            VolumeDiscountRule(settings.volume_discount_threshold, settings.volume_discount_rate),
            UrgencyFeeRule(settings.urgency_window_days, settings.urgency_fee_rate),
        ]

    rule_sets = {}
    for product_type in ProductType:
        rules = [FieldVisibilityRule(product_type, visible_field_names(product_type))]
        rules.extend(price_rules())
        if product_type == ProductType.INDUSTRIAL:
            rules.append(CertificationRequiredRule(settings.certification_voltage_threshold))
        rule_sets[product_type] = rules

    registry = RuleSetRegistry(rule_sets)
    logger.info(
        "Rule registry built for %s",
        ", ".join(f"{t.value}={len(r)}" for t, r in rule_sets.items()),
    )
    return registry
