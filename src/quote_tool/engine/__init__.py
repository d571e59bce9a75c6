"""Engine subpackage - rule evaluation core."""
from .evaluation_engine import EvaluationEngine
from .models import (
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
from .registry import RuleSetRegistry, build_default_registry

__all__ = [
    'EvaluationEngine', 'RuleSetRegistry', 'build_default_registry',
    'Product', 'IndustrialProduct', 'ResidentialProduct', 'CorporateProduct',
    'ProductType', 'OrderContext', 'RuleOutcome', 'Adjustment', 'AdjustmentKind',
]
