"""Source adapter registry for workout imports."""
import logging
from typing import Dict, List, Type

from liftlog_importer.models import Workout
from liftlog_importer.parsers.csv_parser import CSVDialect, detect_dialect, tokenize_csv
from .base import (
    AdapterConversionError,
    EmptyFileError,
    HealthUnavailableError,
    HevyAPIError,
    ImportServiceError,
    InvalidFormatError,
    MissingCredentialError,
    SourceAdapter,
)

logger = logging.getLogger(__name__)

_ADAPTER_REGISTRY: Dict[str, Type[SourceAdapter]] = {}


def register_adapter(adapter_class: Type[SourceAdapter]) -> None:
    """Register a source adapter class.

    Raises:
        ValueError: If an adapter is already registered for this source.
    """
    name = adapter_class.source_name()
    if name in _ADAPTER_REGISTRY:
        raise ValueError(f"Adapter already registered for source '{name}'")
    _ADAPTER_REGISTRY[name] = adapter_class


def get_adapter(source: str) -> SourceAdapter:
    """Get an instantiated adapter for the given source.

    Raises:
        KeyError: If no adapter is registered for the source.
    """
    cls = _ADAPTER_REGISTRY[source]
    return cls()


def adapter_for_dialect(dialect: CSVDialect) -> SourceAdapter:
    return get_adapter(dialect.value)


def extract_csv(text: str) -> List[Workout]:
    """Tokenize CSV text, detect its dialect once and run the matching adapter.

    Raises:
        EmptyFileError: If there is no data row after the header.
    """
    rows = tokenize_csv(text)
    if len(rows) <= 1:
        raise EmptyFileError()

    dialect = detect_dialect(rows[0])
    logger.info(f"Detected CSV dialect {dialect.value} ({len(rows) - 1} data rows)")
    return adapter_for_dialect(dialect).extract(rows)


__all__ = [
    "register_adapter",
    "get_adapter",
    "adapter_for_dialect",
    "extract_csv",
    "SourceAdapter",
    "AdapterConversionError",
    "EmptyFileError",
    "HealthUnavailableError",
    "HevyAPIError",
    "ImportServiceError",
    "InvalidFormatError",
    "MissingCredentialError",
]

# Auto-load adapters (triggers self-registration)
from . import hevy_api_adapter  # noqa: F401,E402
from . import hevy_csv_adapter  # noqa: F401,E402
from . import strong_csv_adapter  # noqa: F401,E402
from . import generic_csv_adapter  # noqa: F401,E402
from . import health_adapter  # noqa: F401,E402
