"""Services subpackage - quote orchestration."""
from .quote_service import Quote, QuoteService

__all__ = ['Quote', 'QuoteService']
