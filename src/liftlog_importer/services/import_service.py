"""
Import orchestration.

Each import runs its source's extraction phase to completion before anything
is written; the reconciliation engine then commits the merged batch through
the shared store writer.
"""

import logging
from datetime import datetime
from typing import List, Optional, Union

from liftlog_importer.config import Settings
from liftlog_importer.models import ImportResult, Workout
from liftlog_importer.parsers.csv_parser import decode_content
from liftlog_importer.parsers.models import ParsedWorkoutData
from liftlog_importer.services.adapters import (
    AdapterConversionError,
    HealthUnavailableError,
    MissingCredentialError,
    extract_csv,
    get_adapter,
)
from liftlog_importer.services.credentials import SecretStore, is_valid_hevy_key, resolve_hevy_key
from liftlog_importer.services.health_service import HealthDataSource
from liftlog_importer.services.hevy_client import PaginatedFetcher
from liftlog_importer.services.reconciliation import ReconciliationEngine
from liftlog_importer.services.store import StoreWriter
from liftlog_importer.services.workout_parsing_service import WorkoutParsingService, build_workout

logger = logging.getLogger(__name__)


class ImportService:
    """Entry point for every import source."""

    def __init__(
        self,
        settings: Settings,
        writer: StoreWriter,
        secret_store: Optional[SecretStore] = None,
        fetcher: Optional[PaginatedFetcher] = None,
        parser: Optional[WorkoutParsingService] = None,
    ):
        self.settings = settings
        self.secret_store = secret_store
        self.engine = ReconciliationEngine(writer)
        self.fetcher = fetcher or PaginatedFetcher(settings)
        self.parser = parser or WorkoutParsingService(settings, secret_store=secret_store)

    async def import_hevy(self, api_key: Optional[str] = None) -> ImportResult:
        """
        Import every workout from the Hevy API.

        Raises:
            MissingCredentialError: No key given, stored or configured.
            HevyAPIError: Any page failed; nothing is imported.
        """
        key = api_key or resolve_hevy_key(self.settings, self.secret_store)
        if not key:
            raise MissingCredentialError("No Hevy API key configured")
        if not is_valid_hevy_key(key):
            logger.warning("Hevy API key does not look like a UUID, trying it anyway")

        records = await self.fetcher.fetch_all(key)

        adapter = get_adapter("hevy_api")
        workouts: List[Workout] = []
        errors: List[str] = []
        for record in records:
            try:
                workouts.append(adapter.convert(record))
            except AdapterConversionError as e:
                errors.append(str(e))

        return await self.engine.reconcile(workouts, errors)

    async def import_csv(self, content: Union[bytes, str]) -> ImportResult:
        """
        Import a CSV export from Hevy, Strong or an unknown app.

        Raises:
            EmptyFileError: The file has no data rows.
        """
        text = decode_content(content) if isinstance(content, bytes) else content
        workouts = extract_csv(text)
        return await self.engine.reconcile(workouts)

    async def import_health(self, source: HealthDataSource, since: Optional[datetime] = None) -> ImportResult:
        """
        Import workout samples from the health platform.

        Raises:
            HealthUnavailableError: The device has no health data store.
        """
        if not source.is_available():
            raise HealthUnavailableError()

        await source.request_authorization()
        samples = await source.fetch_workouts(since=since)
        workouts = get_adapter("health").extract(samples)
        return await self.engine.reconcile(workouts)

    async def parse_text(self, text: str) -> ParsedWorkoutData:
        return await self.parser.parse_workout_description(text)

    async def import_text(self, text: str) -> tuple[ParsedWorkoutData, Workout]:
        """Parse free text and save it as one finished workout.

        Raises:
            WorkoutParsingError: The model path failed; nothing is saved.
        """
        parsed = await self.parse_text(text)
        workout = build_workout(parsed)
        await self.engine.reconcile([workout])
        return parsed, workout
