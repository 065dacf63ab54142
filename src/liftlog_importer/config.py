"""Configuration settings for the LiftLog importer."""
import os
from typing import Literal


EnvironmentType = Literal["development", "staging", "production"]


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    """Application settings.

    Read once from the environment. Services receive an instance at
    construction time instead of reaching for the module-level ``settings``.
    """

    # Feature flags
    HELICONE_ENABLED: bool = False
    FALLBACK_PROPAGATE_CAPTURES: bool = False

    # Environment
    ENVIRONMENT: EnvironmentType = "development"

    # API Keys
    ANTHROPIC_API_KEY: str | None = None
    HELICONE_API_KEY: str | None = None
    HEVY_API_KEY: str | None = None

    # Language model
    ANTHROPIC_MODEL: str = "claude-3-haiku-20240307"
    ANTHROPIC_MAX_TOKENS: int = 1000
    LLM_MAX_ATTEMPTS: int = 3

    # Hevy API
    HEVY_BASE_URL: str = "https://api.hevyapp.com/v1"
    HEVY_PAGE_SIZE: int = 10
    HEVY_PAGE_DELAY_SECONDS: float = 0.1

    HTTP_TIMEOUT_SECONDS: float = 30.0

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"

        # Feature flags
        self.HELICONE_ENABLED = _env_bool("HELICONE_ENABLED")
        self.FALLBACK_PROPAGATE_CAPTURES = _env_bool("FALLBACK_PROPAGATE_CAPTURES")

        # API Keys
        self.ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
        self.HELICONE_API_KEY = os.getenv("HELICONE_API_KEY")
        self.HEVY_API_KEY = os.getenv("HEVY_API_KEY")

        # Language model
        self.ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", self.ANTHROPIC_MODEL)
        self.ANTHROPIC_MAX_TOKENS = int(os.getenv("ANTHROPIC_MAX_TOKENS", str(self.ANTHROPIC_MAX_TOKENS)))
        self.LLM_MAX_ATTEMPTS = int(os.getenv("LLM_MAX_ATTEMPTS", str(self.LLM_MAX_ATTEMPTS)))

        # Hevy API
        self.HEVY_BASE_URL = os.getenv("HEVY_BASE_URL", self.HEVY_BASE_URL).rstrip("/")
        self.HEVY_PAGE_SIZE = int(os.getenv("HEVY_PAGE_SIZE", str(self.HEVY_PAGE_SIZE)))
        self.HEVY_PAGE_DELAY_SECONDS = float(
            os.getenv("HEVY_PAGE_DELAY_SECONDS", str(self.HEVY_PAGE_DELAY_SECONDS))
        )

        self.HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", str(self.HTTP_TIMEOUT_SECONDS)))


settings = Settings()
