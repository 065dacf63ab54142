"""
Import endpoints

POST /import/csv      CSV export upload (Hevy, Strong or generic)
POST /import/hevy     pull every workout from the Hevy API
POST /import/health   health-platform workout samples
POST /parse/text      free-text workout description
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from pydantic import BaseModel, Field

from liftlog_importer.models import ImportResult
from liftlog_importer.services.adapters import (
    EmptyFileError,
    HealthUnavailableError,
    HevyAPIError,
    InvalidFormatError,
    MissingCredentialError,
)
from liftlog_importer.services.health_service import HealthWorkoutSample, StaticHealthDataSource
from liftlog_importer.services.import_service import ImportService
from liftlog_importer.services.workout_parsing_service import WorkoutParsingError

logger = logging.getLogger(__name__)

router = APIRouter()

# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------


class ImportResultResponse(BaseModel):
    success: bool
    workouts_imported: int
    exercises_imported: int
    errors: List[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: ImportResult) -> "ImportResultResponse":
        return cls(
            success=result.is_success,
            workouts_imported=result.workouts_imported,
            exercises_imported=result.exercises_imported,
            errors=result.errors,
        )


class HevyImportRequest(BaseModel):
    api_key: Optional[str] = Field(default=None, description="Overrides the stored/configured key")


class HealthImportRequest(BaseModel):
    samples: List[HealthWorkoutSample] = Field(default_factory=list)
    since: Optional[datetime] = None


class ParseTextRequest(BaseModel):
    """Request model for POST /parse/text"""
    text: str = Field(..., min_length=1, max_length=10000)
    save: bool = Field(default=False, description="Also save the parsed workout")


class ParseTextResponse(BaseModel):
    """Response model for POST /parse/text"""
    success: bool
    parsed: Dict[str, Any]
    workout: Optional[Dict[str, Any]] = None


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_import_service(request: Request) -> ImportService:
    return request.app.state.import_service


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/import/csv", response_model=ImportResultResponse)
async def import_csv(
    file: UploadFile = File(...),
    service: ImportService = Depends(get_import_service),
):
    try:
        if file.filename and not file.filename.lower().endswith(".csv"):
            raise InvalidFormatError(f"Expected a .csv file, got '{file.filename}'")
        content = await file.read()
        result = await service.import_csv(content)
    except (EmptyFileError, InvalidFormatError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"CSV import failed: {e}")
        raise HTTPException(status_code=500, detail="CSV import failed")

    return ImportResultResponse.from_result(result)


@router.post("/import/hevy", response_model=ImportResultResponse)
async def import_hevy(
    body: HevyImportRequest,
    service: ImportService = Depends(get_import_service),
):
    try:
        result = await service.import_hevy(api_key=body.api_key)
    except MissingCredentialError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HevyAPIError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return ImportResultResponse.from_result(result)


@router.post("/import/health", response_model=ImportResultResponse)
async def import_health(
    body: HealthImportRequest,
    service: ImportService = Depends(get_import_service),
):
    source = StaticHealthDataSource(body.samples)
    try:
        result = await service.import_health(source, since=body.since)
    except HealthUnavailableError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return ImportResultResponse.from_result(result)


@router.post("/parse/text", response_model=ParseTextResponse)
async def parse_text(
    body: ParseTextRequest,
    service: ImportService = Depends(get_import_service),
):
    try:
        if body.save:
            parsed, workout = await service.import_text(body.text)
        else:
            parsed, workout = await service.parse_text(body.text), None
    except WorkoutParsingError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return ParseTextResponse(
        success=True,
        parsed=parsed.model_dump(by_alias=True, exclude_none=True),
        workout=workout.model_dump(mode="json") if workout else None,
    )
