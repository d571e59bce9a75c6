"""
Process-wide API state: settings, repository, registry and service.

Built once on import; route handlers only read it.
"""
import logging

from ..catalog.product_factory import ProductFactory
from ..catalog.product_repository import ProductRepository
from ..config.settings import get_settings
from ..engine.evaluation_engine import EvaluationEngine
from ..engine.registry import build_default_registry
from ..services.quote_service import QuoteService

logger = logging.getLogger(__name__)

settings = get_settings()
factory = ProductFactory()

if settings.catalog_path and settings.catalog_path.exists():
    repository = ProductRepository.from_csv(settings.catalog_path, factory)
else:
    logger.warning("No product catalog at %s, starting empty", settings.catalog_path)
    repository = ProductRepository()

registry = build_default_registry(settings)
engine = EvaluationEngine(registry)
quote_service = QuoteService(repository, engine)
