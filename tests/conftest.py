import os
import sys
from datetime import date

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from quote_tool.config.settings import Settings
from quote_tool.engine import (
    CorporateProduct,
    EvaluationEngine,
    IndustrialProduct,
    ResidentialProduct,
    build_default_registry,
)

TODAY = date(2026, 3, 2)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def registry(settings):
    return build_default_registry(settings)


@pytest.fixture
def engine(registry):
    return EvaluationEngine(registry, clock=lambda: TODAY)


@pytest.fixture
def industrial():
    return IndustrialProduct(id="IND-100", base_price=100.0, voltage=300)


@pytest.fixture
def residential():
    return ResidentialProduct(id="RES-200", base_price=200.0, color_code="WHT-01", warranty_months=24)


@pytest.fixture
def corporate():
    return CorporateProduct(id="CORP-050", base_price=1200.0, license_seats=50, support_tier="gold")
