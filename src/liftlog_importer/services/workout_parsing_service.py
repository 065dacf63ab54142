"""Natural-language workout parsing using the Anthropic API.

Turns a free-text (typed or dictated) workout description into the parsed
workout shape. With no API key configured the regex fallback parser is used
instead; once the model path is taken, its failures are terminal for the call.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

import anthropic
from pydantic import ValidationError

from liftlog_importer.ai import AIClientFactory, AIRequestContext, retry_async_call
from liftlog_importer.config import Settings
from liftlog_importer.models import EquipmentType, Exercise, SetType, Workout, WorkoutSet
from liftlog_importer.parsers.models import ParsedWorkoutData
from liftlog_importer.parsers.text_parser import FallbackWorkoutParser
from liftlog_importer.services.credentials import SecretStore, resolve_anthropic_key
from liftlog_importer.services.heuristics import guess_muscle_group


logger = logging.getLogger(__name__)

DEFAULT_WORKOUT_NAME = "Workout"


class WorkoutParsingError(Exception):
    """Base class for natural-language parsing failures."""

    message = "Failed to parse workout"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class ParsingAPIError(WorkoutParsingError):
    message = "Failed to connect to AI service"


class InvalidResponseError(WorkoutParsingError):
    message = "Invalid response from AI service"


class InvalidJSONError(WorkoutParsingError):
    message = "Could not parse workout data"


def extract_json_object(text: str) -> str:
    """Strip Markdown code fences and keep the span from the first '{' to the last '}'."""
    cleaned = text.replace("```json", "").replace("```", "").strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end != -1 and end > start:
        cleaned = cleaned[start:end + 1]
    return cleaned


class WorkoutParsingService:
    """Service for parsing free-text workout descriptions into structured sets."""

    WORKOUT_PARSING_PROMPT = """You convert gym workout notes into structured JSON.

Reply with a single JSON object and nothing else, shaped like this:

{
  "exercises": [
    {
      "name": "Exercise Name",
      "sets": [
        {"weight": 95, "reps": 12, "setType": "warmup"},
        {"weight": 155, "reps": 8, "setType": "working"}
      ],
      "notes": "optional notes for this exercise"
    }
  ],
  "workoutName": "optional name for the session",
  "notes": "optional notes for the whole session"
}

Rules:
- weight is in pounds; use null for bodyweight movements
- setType is one of "warmup", "working", "dropset", "failure", "amrap"
- Use the usual gym name for each exercise
- "4x6" means 4 sets of 6 reps at the same weight
- "155x8" and "155 for 8" both mean 155 lbs for 8 reps
- "BW" and "bodyweight" mean weight is null

Examples:

Input: "deadlift 225x5, 275x3, 315x1"
Output: {"exercises":[{"name":"Deadlift","sets":[{"weight":225,"reps":5,"setType":"working"},{"weight":275,"reps":3,"setType":"working"},{"weight":315,"reps":1,"setType":"working"}]}]}

Input: "ohp warmup 45x10 then 115 for 2x6"
Output: {"exercises":[{"name":"Overhead Press","sets":[{"weight":45,"reps":10,"setType":"warmup"},{"weight":115,"reps":6,"setType":"working"},{"weight":115,"reps":6,"setType":"working"}]}]}

Input: "chin-ups 2x7, push-ups 2x20 bodyweight"
Output: {"exercises":[{"name":"Chin-ups","sets":[{"weight":null,"reps":7,"setType":"working"},{"weight":null,"reps":7,"setType":"working"}]},{"name":"Push-ups","sets":[{"weight":null,"reps":20,"setType":"working"},{"weight":null,"reps":20,"setType":"working"}]}]}

Workout notes:
"""

    def __init__(
        self,
        settings: Settings,
        secret_store: Optional[SecretStore] = None,
        client_factory: type = AIClientFactory,
        fallback_parser: Optional[FallbackWorkoutParser] = None,
    ):
        self.settings = settings
        self.secret_store = secret_store
        self.client_factory = client_factory
        self.fallback_parser = fallback_parser or FallbackWorkoutParser(
            propagate_captures=settings.FALLBACK_PROPAGATE_CAPTURES
        )

    def build_prompt(self, text: str) -> str:
        return f"{self.WORKOUT_PARSING_PROMPT}{text}"

    async def parse_workout_description(self, text: str) -> ParsedWorkoutData:
        """
        Parse a workout description.

        Raises:
            ParsingAPIError: The model call failed or returned a non-2xx status.
            InvalidResponseError: The response had no text content.
            InvalidJSONError: The text did not decode into the parsed workout shape.
        """
        api_key = resolve_anthropic_key(self.settings, self.secret_store)
        if not api_key:
            logger.info("No Anthropic API key configured, using fallback parser")
            return self.fallback_parser.parse(text)

        response_text = await self._call_model(self.build_prompt(text), api_key)
        return self.parse_response(response_text)

    async def _call_model(self, prompt: str, api_key: str) -> str:
        context = AIRequestContext(
            feature_name="workout_text_parsing",
            custom_properties={"model": self.settings.ANTHROPIC_MODEL},
        )
        client = self.client_factory.create_anthropic_client(
            api_key=api_key,
            settings=self.settings,
            context=context,
            timeout=self.settings.HTTP_TIMEOUT_SECONDS,
        )

        try:
            message = await retry_async_call(
                client.messages.create,
                model=self.settings.ANTHROPIC_MODEL,
                max_tokens=self.settings.ANTHROPIC_MAX_TOKENS,
                messages=[{"role": "user", "content": prompt}],
                max_attempts=self.settings.LLM_MAX_ATTEMPTS,
            )
        except anthropic.APIStatusError as e:
            logger.error(f"Anthropic API returned {e.status_code}: {e}")
            raise ParsingAPIError() from e
        except anthropic.APIError as e:
            logger.error(f"Anthropic API request failed: {e}")
            raise ParsingAPIError() from e
        finally:
            await client.close()

        content = getattr(message, "content", None) or []
        text = getattr(content[0], "text", None) if content else None
        if not isinstance(text, str):
            raise InvalidResponseError()
        return text

    @staticmethod
    def parse_response(response_text: str) -> ParsedWorkoutData:
        """Decode the model's reply into ParsedWorkoutData."""
        cleaned = extract_json_object(response_text)
        try:
            return ParsedWorkoutData.model_validate_json(cleaned)
        except ValidationError as e:
            logger.error(f"Failed to decode model response as workout JSON: {e}")
            raise InvalidJSONError() from e


def build_workout(parsed: ParsedWorkoutData, now: Optional[datetime] = None) -> Workout:
    """Build a finished Workout from parsed text, stamped at ``now``."""
    finished_at = now or datetime.now(timezone.utc)
    workout = Workout(
        name=parsed.workout_name or DEFAULT_WORKOUT_NAME,
        date=finished_at,
        start_time=finished_at,
        end_time=finished_at,
        notes=parsed.notes,
    )

    for parsed_exercise in parsed.exercises:
        exercise = workout.add_exercise(Exercise(
            name=parsed_exercise.name,
            primary_muscle=guess_muscle_group(parsed_exercise.name),
            equipment=EquipmentType.BARBELL,
            notes=parsed_exercise.notes,
        ))
        for parsed_set in parsed_exercise.sets:
            exercise.add_set(WorkoutSet(
                weight=parsed_set.weight or 0,
                reps=parsed_set.reps,
                set_type=SetType.from_label(parsed_set.set_type),
                is_completed=True,
                completed_at=finished_at,
            ))

    return workout
