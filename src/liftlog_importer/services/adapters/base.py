"""Base classes for source adapters."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Sequence

from liftlog_importer.models import Workout


class ImportServiceError(RuntimeError):
    """Base class for terminal import failures."""

    message = "Import failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class HevyAPIError(ImportServiceError):
    """Raised when the paginated fetch fails; nothing from the fetch is kept."""

    message = "Failed to connect to API"


class EmptyFileError(ImportServiceError):
    message = "The file is empty"


class InvalidFormatError(ImportServiceError):
    message = "Invalid file format"


class HealthUnavailableError(ImportServiceError):
    message = "Health data is not available on this device"


class MissingCredentialError(ImportServiceError):
    message = "No API key configured"


class AdapterConversionError(ValueError):
    """Raised for a single record an adapter cannot convert. Callers collect these."""


class SourceAdapter(ABC):
    """Abstract base class for all import source adapters."""

    @staticmethod
    @abstractmethod
    def source_name() -> str:
        """Return the canonical source identifier (e.g. 'hevy_api')."""
        ...

    @abstractmethod
    def extract(self, raw_batch: Sequence[Any]) -> List[Workout]:
        """Convert a batch of raw source records into Workout aggregates."""
        ...
