"""Builds AsyncAnthropic clients, routed through the Helicone proxy when enabled."""
import logging
from dataclasses import dataclass, field
from typing import Any

from anthropic import AsyncAnthropic

from liftlog_importer.config import Settings


logger = logging.getLogger(__name__)

_HELICONE_ANTHROPIC_BASE_URL = "https://anthropic.helicone.ai"

DEFAULT_TIMEOUT = 60.0


@dataclass
class AIRequestContext:
    """Labels attached to a model request for proxy-side tracking."""

    feature_name: str | None = None
    request_id: str | None = None
    custom_properties: dict[str, str] = field(default_factory=dict)

    def to_tracking_headers(self, environment: str) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.feature_name:
            headers["Helicone-Property-Feature"] = self.feature_name
        if self.request_id:
            headers["Helicone-Request-Id"] = self.request_id
        headers["Helicone-Property-Environment"] = environment

        for name, value in self.custom_properties.items():
            property_name = name.replace("_", "-").title()
            headers[f"Helicone-Property-{property_name}"] = str(value)
        return headers


def _helicone_options(settings: Settings, context: AIRequestContext | None) -> dict[str, Any]:
    """Proxy base URL and headers, or nothing when the proxy is off or has no key."""
    if not settings.HELICONE_ENABLED:
        return {}
    if not settings.HELICONE_API_KEY:
        logger.warning("HELICONE_ENABLED is set without HELICONE_API_KEY, calling Anthropic directly")
        return {}

    headers = {"Helicone-Auth": f"Bearer {settings.HELICONE_API_KEY}"}
    if context is not None:
        headers.update(context.to_tracking_headers(settings.ENVIRONMENT))
    return {"base_url": _HELICONE_ANTHROPIC_BASE_URL, "default_headers": headers}


class AIClientFactory:
    """Creates the Anthropic client used by the text parser."""

    @staticmethod
    def create_anthropic_client(
        api_key: str,
        settings: Settings,
        context: AIRequestContext | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> AsyncAnthropic:
        """
        Create an async Anthropic client.

        The SDK's own retries are turned off; ``retry_async_call`` owns retrying.

        Raises:
            ValueError: If ``api_key`` is empty
        """
        if not api_key:
            raise ValueError("Anthropic API key not configured. Set ANTHROPIC_API_KEY or store a key.")

        proxy_options = _helicone_options(settings, context)
        logger.debug(f"Creating Anthropic client ({'helicone' if proxy_options else 'direct'})")
        return AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0, **proxy_options)
