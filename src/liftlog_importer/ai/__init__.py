"""Language model client management for the LiftLog importer."""
from .client_factory import AIClientFactory, AIRequestContext
from .retry import is_retryable_error, retry_async_call

__all__ = [
    "AIClientFactory",
    "AIRequestContext",
    "is_retryable_error",
    "retry_async_call",
]
