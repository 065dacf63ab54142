"""
Health platform boundary.

The importer never talks to a health store directly. Callers hand it a
``HealthDataSource`` that knows whether health data exists on the device,
how to ask for read access, and how to list workout samples.
"""

import logging
from datetime import datetime
from typing import List, Optional, Protocol

from pydantic import BaseModel, Field, field_validator, model_validator

from liftlog_importer.utils import as_utc

logger = logging.getLogger(__name__)


class HealthWorkoutSample(BaseModel):
    """A workout summary as recorded by the health platform."""
    activity_type: str = Field(..., description="e.g. 'traditional_strength_training', 'running'")
    start_date: datetime
    end_date: datetime
    duration: float = Field(default=0, ge=0, description="Seconds")
    total_energy_burned: Optional[float] = Field(default=None, ge=0, description="Kilocalories")
    total_distance: Optional[float] = Field(default=None, ge=0, description="Meters")

    @field_validator("start_date", "end_date")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        # Samples without an offset are recorded in UTC
        return as_utc(value)

    @model_validator(mode="after")
    def _check_dates(self) -> "HealthWorkoutSample":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be earlier than start_date")
        return self


class HealthDataSource(Protocol):
    def is_available(self) -> bool:
        ...

    async def request_authorization(self) -> None:
        ...

    async def fetch_workouts(self, since: Optional[datetime] = None) -> List[HealthWorkoutSample]:
        ...


class StaticHealthDataSource:
    """Serves samples that were exported from the device ahead of time."""

    def __init__(self, samples: List[HealthWorkoutSample], available: bool = True):
        self._samples = list(samples)
        self._available = available

    def is_available(self) -> bool:
        return self._available

    async def request_authorization(self) -> None:
        logger.debug("Static health source needs no authorization")

    async def fetch_workouts(self, since: Optional[datetime] = None) -> List[HealthWorkoutSample]:
        if since is not None:
            since = as_utc(since)
        samples = [s for s in self._samples if since is None or s.start_date >= since]
        # Newest first
        return sorted(samples, key=lambda s: s.start_date, reverse=True)
