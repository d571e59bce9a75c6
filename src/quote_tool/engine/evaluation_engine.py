"""
Evaluation Engine - folds a variant's rules over an initial outcome.

Resolution order:
1. Base price × quantity
2. Visibility rule for the variant
3. Price rules in declared order (volume discount, then urgency fee)
4. Requirement rules (certification)
"""
import logging
from datetime import date
from typing import Callable, Optional

from ..errors import MissingFieldError
from .models import OrderContext, Product, RuleOutcome
from .registry import RuleSetRegistry
from .rules import Rule

logger = logging.getLogger(__name__)


class EvaluationEngine:
    """
    Core engine that turns (product, context) into a RuleOutcome.

    Evaluation is synchronous and pure: the registry is read-only and each
    rule returns a new outcome, so one engine may serve many threads.
    """

    def __init__(self, registry: RuleSetRegistry, clock: Callable[[], date] = date.today):
        self.registry = registry
        self.clock = clock

    def ordered_rules(self, product: Product) -> list[Rule]:
        """Variant rules sorted by phase; declared order is kept within a phase."""
        rules = self.registry.rules_for(product.product_type)
        return sorted(rules, key=lambda r: r.phase)

    def evaluate(self, product: Product, context: OrderContext, today: Optional[date] = None) -> RuleOutcome:
        """
        Evaluate all rules for a quote attempt.

        Args:
            product: Validated product variant
            context: Validated order context
            today: Reference date for urgency; defaults to the engine clock

        Returns:
            Final RuleOutcome
        """
        today = today or self.clock()
        outcome = RuleOutcome.initial(product, context)
        applied = set()

        for rule in self.ordered_rules(product):
            if rule.rule_id in applied:
                logger.warning("Rule %s already applied to %s, skipping", rule.rule_id, product.id)
                continue

            try:
                matches = rule.applies(product, context, outcome, today)
            except MissingFieldError as e:
                # Missing optional fields mean the rule does not apply
                logger.debug("Rule %s skipped for %s: field '%s' not provided",
                             rule.rule_id, product.id, e.field_name)
                continue

            if not matches:
                logger.debug("Rule %s does not apply to %s", rule.rule_id, product.id)
                continue

            outcome = rule.apply(product, context, outcome, today)
            applied.add(rule.rule_id)
            logger.debug("Rule %s applied to %s, subtotal %.2f", rule.rule_id, product.id, outcome.subtotal)

        return outcome
