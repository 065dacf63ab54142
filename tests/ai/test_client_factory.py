"""Tests for AIClientFactory with the Anthropic SDK class patched out."""
import pytest
from unittest.mock import MagicMock, patch

from liftlog_importer.ai.client_factory import (
    AIClientFactory,
    AIRequestContext,
    DEFAULT_TIMEOUT,
    _HELICONE_ANTHROPIC_BASE_URL,
)


@pytest.fixture
def mock_anthropic_class():
    mock_class = MagicMock()
    with patch("liftlog_importer.ai.client_factory.AsyncAnthropic", mock_class):
        yield mock_class


class TestAnthropicClientCreation:

    def test_direct_client_when_helicone_disabled(self, settings, mock_anthropic_class):
        settings.HELICONE_ENABLED = False

        client = AIClientFactory.create_anthropic_client(api_key="sk-ant-test", settings=settings)

        assert client is mock_anthropic_class.return_value
        call_kwargs = mock_anthropic_class.call_args[1]
        assert call_kwargs["api_key"] == "sk-ant-test"
        assert "base_url" not in call_kwargs
        assert "default_headers" not in call_kwargs

    def test_sdk_retries_are_disabled(self, settings, mock_anthropic_class):
        AIClientFactory.create_anthropic_client(api_key="sk-ant-test", settings=settings)

        assert mock_anthropic_class.call_args[1]["max_retries"] == 0

    def test_uses_default_timeout_when_not_specified(self, settings, mock_anthropic_class):
        AIClientFactory.create_anthropic_client(api_key="sk-ant-test", settings=settings)

        assert mock_anthropic_class.call_args[1]["timeout"] == DEFAULT_TIMEOUT

    def test_respects_custom_timeout(self, settings, mock_anthropic_class):
        AIClientFactory.create_anthropic_client(api_key="sk-ant-test", settings=settings, timeout=12.5)

        assert mock_anthropic_class.call_args[1]["timeout"] == 12.5

    @pytest.mark.parametrize("api_key", [None, ""])
    def test_raises_value_error_without_api_key(self, settings, api_key, mock_anthropic_class):
        with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
            AIClientFactory.create_anthropic_client(api_key=api_key, settings=settings)

        mock_anthropic_class.assert_not_called()


class TestHeliconeProxy:

    def test_proxied_client_when_helicone_enabled(self, settings, mock_anthropic_class):
        settings.HELICONE_ENABLED = True
        settings.HELICONE_API_KEY = "sk-helicone-key"
        settings.ENVIRONMENT = "production"

        AIClientFactory.create_anthropic_client(api_key="sk-ant-test", settings=settings)

        call_kwargs = mock_anthropic_class.call_args[1]
        assert call_kwargs["base_url"] == _HELICONE_ANTHROPIC_BASE_URL
        assert call_kwargs["default_headers"]["Helicone-Auth"] == "Bearer sk-helicone-key"

    def test_includes_context_headers(self, settings, mock_anthropic_class):
        settings.HELICONE_ENABLED = True
        settings.HELICONE_API_KEY = "sk-helicone-key"
        settings.ENVIRONMENT = "staging"
        context = AIRequestContext(feature_name="workout_text_parsing")

        AIClientFactory.create_anthropic_client(api_key="sk-ant-test", settings=settings, context=context)

        headers = mock_anthropic_class.call_args[1]["default_headers"]
        assert headers["Helicone-Property-Feature"] == "workout_text_parsing"
        assert headers["Helicone-Property-Environment"] == "staging"

    @pytest.mark.parametrize("helicone_key", [None, ""])
    def test_helicone_without_key_falls_back_to_direct(self, settings, helicone_key, mock_anthropic_class):
        settings.HELICONE_ENABLED = True
        settings.HELICONE_API_KEY = helicone_key

        AIClientFactory.create_anthropic_client(api_key="sk-ant-test", settings=settings)

        call_kwargs = mock_anthropic_class.call_args[1]
        assert "base_url" not in call_kwargs
        assert "default_headers" not in call_kwargs

    def test_helicone_base_url(self):
        assert _HELICONE_ANTHROPIC_BASE_URL == "https://anthropic.helicone.ai"
