"""
Tests for natural-language workout parsing.

The Anthropic client is replaced by a fake factory so no request leaves the
machine.
"""

import json
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from liftlog_importer.models import MuscleGroup, SetType
from liftlog_importer.parsers.models import ParsedExercise, ParsedSet, ParsedWorkoutData
from liftlog_importer.services.credentials import SecretKey
from liftlog_importer.services.workout_parsing_service import (
    InvalidJSONError,
    InvalidResponseError,
    ParsingAPIError,
    WorkoutParsingService,
    build_workout,
    extract_json_object,
)

MODEL_JSON = {
    "exercises": [
        {
            "name": "Bench Press",
            "sets": [
                {"weight": 135, "reps": 10, "setType": "warmup"},
                {"weight": 185, "reps": 8, "setType": "working"},
            ],
        },
        {"name": "Pull-ups", "sets": [{"weight": None, "reps": 8}], "notes": "strict"},
    ],
    "workoutName": "Upper Body",
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _message(text):
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


def _status_error(status_code: int) -> anthropic.APIStatusError:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    response = httpx.Response(status_code, request=request)
    return anthropic.APIStatusError(f"Error code: {status_code}", response=response, body=None)


@pytest.fixture
def mock_anthropic_client():
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=_message(json.dumps(MODEL_JSON)))
    client.close = AsyncMock()
    return client


@pytest.fixture
def client_factory(mock_anthropic_client):
    factory = MagicMock()
    factory.create_anthropic_client.return_value = mock_anthropic_client
    return factory


@pytest.fixture
def keyed_settings(settings):
    settings.ANTHROPIC_API_KEY = "sk-ant-test-key-0123456789"
    return settings


# ---------------------------------------------------------------------------
# Response cleanup
# ---------------------------------------------------------------------------


class TestExtractJSONObject:

    def test_strips_json_fence(self):
        assert extract_json_object('```json\n{"exercises": []}\n```') == '{"exercises": []}'

    def test_slices_outer_braces(self):
        text = 'Here you go: {"exercises": [{"name": "Dip", "sets": []}]} Enjoy!'
        assert extract_json_object(text) == '{"exercises": [{"name": "Dip", "sets": []}]}'

    def test_no_braces_left_alone(self):
        assert extract_json_object("sorry, no workout") == "sorry, no workout"


# ---------------------------------------------------------------------------
# Model path
# ---------------------------------------------------------------------------


class TestModelPath:

    @pytest.mark.asyncio
    async def test_parses_model_json(self, keyed_settings, client_factory, mock_anthropic_client):
        service = WorkoutParsingService(keyed_settings, client_factory=client_factory)

        result = await service.parse_workout_description("bench 135x10, 185x8, pull-ups 8")

        assert result.workout_name == "Upper Body"
        assert [e.name for e in result.exercises] == ["Bench Press", "Pull-ups"]
        assert result.exercises[0].sets[0].set_type == "warmup"
        assert result.exercises[1].sets[0].weight is None
        assert result.exercises[1].notes == "strict"

        kwargs = mock_anthropic_client.messages.create.await_args.kwargs
        assert kwargs["model"] == "claude-3-haiku-20240307"
        assert kwargs["max_tokens"] == 1000
        assert kwargs["messages"][0]["role"] == "user"
        assert kwargs["messages"][0]["content"].endswith("bench 135x10, 185x8, pull-ups 8")

    @pytest.mark.asyncio
    async def test_stored_key_wins_over_environment(self, keyed_settings, client_factory, secret_store):
        secret_store.set(SecretKey.ANTHROPIC_API_KEY, "sk-ant-REDACTED")
        service = WorkoutParsingService(keyed_settings, secret_store=secret_store, client_factory=client_factory)

        await service.parse_workout_description("squat 225x5")

        call_kwargs = client_factory.create_anthropic_client.call_args.kwargs
        assert call_kwargs["api_key"] == "sk-ant-REDACTED"

    @pytest.mark.asyncio
    async def test_fenced_response(self, keyed_settings, client_factory, mock_anthropic_client):
        mock_anthropic_client.messages.create.return_value = _message(
            "```json\n" + json.dumps(MODEL_JSON) + "\n```"
        )
        service = WorkoutParsingService(keyed_settings, client_factory=client_factory)

        result = await service.parse_workout_description("bench")
        assert len(result.exercises) == 2

    @pytest.mark.asyncio
    async def test_invalid_json_is_terminal(self, keyed_settings, client_factory, mock_anthropic_client):
        mock_anthropic_client.messages.create.return_value = _message("{not json}")
        service = WorkoutParsingService(keyed_settings, client_factory=client_factory)

        with pytest.raises(InvalidJSONError):
            await service.parse_workout_description("bench 135x10")

    @pytest.mark.asyncio
    async def test_wrong_shape_is_invalid_json(self, keyed_settings, client_factory, mock_anthropic_client):
        mock_anthropic_client.messages.create.return_value = _message('{"exercises": [{"sets": []}]}')
        service = WorkoutParsingService(keyed_settings, client_factory=client_factory)

        with pytest.raises(InvalidJSONError):
            await service.parse_workout_description("bench 135x10")

    @pytest.mark.asyncio
    async def test_missing_text_block(self, keyed_settings, client_factory, mock_anthropic_client):
        mock_anthropic_client.messages.create.return_value = SimpleNamespace(content=[])
        service = WorkoutParsingService(keyed_settings, client_factory=client_factory)

        with pytest.raises(InvalidResponseError):
            await service.parse_workout_description("bench 135x10")

    @pytest.mark.asyncio
    async def test_api_error_does_not_fall_back(self, keyed_settings, client_factory, mock_anthropic_client):
        mock_anthropic_client.messages.create.side_effect = _status_error(401)
        fallback = MagicMock()
        service = WorkoutParsingService(keyed_settings, client_factory=client_factory, fallback_parser=fallback)

        with pytest.raises(ParsingAPIError):
            await service.parse_workout_description("bench 135x10")

        fallback.parse.assert_not_called()
        assert mock_anthropic_client.messages.create.await_count == 1
        mock_anthropic_client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_client_closed_after_each_call(self, keyed_settings, client_factory, mock_anthropic_client):
        service = WorkoutParsingService(keyed_settings, client_factory=client_factory)

        await service.parse_workout_description("bench 135x10")
        await service.parse_workout_description("squat 225x5")

        assert mock_anthropic_client.close.await_count == 2

    @pytest.mark.asyncio
    async def test_transient_error_is_retried(self, keyed_settings, client_factory, mock_anthropic_client):
        keyed_settings.LLM_MAX_ATTEMPTS = 3
        mock_anthropic_client.messages.create.side_effect = [
            _status_error(529),
            _message(json.dumps(MODEL_JSON)),
        ]
        service = WorkoutParsingService(keyed_settings, client_factory=client_factory)

        with patch("asyncio.sleep", new_callable=AsyncMock):
            result = await service.parse_workout_description("bench")

        assert len(result.exercises) == 2
        assert mock_anthropic_client.messages.create.await_count == 2


# ---------------------------------------------------------------------------
# Fallback path
# ---------------------------------------------------------------------------


class TestFallbackPath:

    @pytest.mark.asyncio
    async def test_no_key_uses_fallback(self, settings, client_factory):
        service = WorkoutParsingService(settings, client_factory=client_factory)

        result = await service.parse_workout_description("bench 135x10, squat 225x5")

        client_factory.create_anthropic_client.assert_not_called()
        assert [e.name for e in result.exercises] == ["Bench", "Squat"]
        assert [e.sets[0].reps for e in result.exercises] == [10, 10]

    @pytest.mark.asyncio
    async def test_propagate_flag_reaches_fallback(self, settings, client_factory):
        settings.FALLBACK_PROPAGATE_CAPTURES = True
        service = WorkoutParsingService(settings, client_factory=client_factory)

        result = await service.parse_workout_description("squat 225x5")

        assert result.exercises[0].sets[0].reps == 5
        assert result.exercises[0].sets[0].weight == 225


# ---------------------------------------------------------------------------
# Building a workout
# ---------------------------------------------------------------------------


class TestBuildWorkout:

    def test_builds_finished_workout(self):
        parsed = ParsedWorkoutData.model_validate(MODEL_JSON)
        now = datetime(2024, 5, 1, 18, 30, tzinfo=timezone.utc)

        workout = build_workout(parsed, now=now)

        assert workout.name == "Upper Body"
        assert workout.start_time == workout.end_time == now
        bench, pullups = workout.exercises
        assert bench.order == 0 and pullups.order == 1
        assert bench.primary_muscle == MuscleGroup.CHEST
        assert [s.set_type for s in bench.sets] == [SetType.WARMUP, SetType.WORKING]
        assert [s.order for s in bench.sets] == [0, 1]
        assert pullups.sets[0].weight == 0
        assert all(s.is_completed and s.completed_at == now for s in bench.sets)

    def test_default_name(self):
        parsed = ParsedWorkoutData(exercises=[ParsedExercise(name="Dips", sets=[ParsedSet(reps=10)])])
        assert build_workout(parsed).name == "Workout"
