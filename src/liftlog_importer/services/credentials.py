"""API key storage and validation."""
import logging
import re
from enum import Enum
from typing import Dict, Optional, Protocol

from liftlog_importer.config import Settings

logger = logging.getLogger(__name__)

HEVY_KEY_PATTERN = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$',
    re.IGNORECASE,
)
ANTHROPIC_KEY_PREFIX = "sk-ant-"


class SecretKey(str, Enum):
    HEVY_API_KEY = "com.liftlog.hevy-api-key"
    ANTHROPIC_API_KEY = "com.liftlog.anthropic-api-key"


class SecretStore(Protocol):
    def get(self, key: SecretKey) -> Optional[str]:
        ...

    def set(self, key: SecretKey, value: str) -> None:
        ...

    def delete(self, key: SecretKey) -> None:
        ...


class InMemorySecretStore:
    def __init__(self, initial: Optional[Dict[SecretKey, str]] = None):
        self._values: Dict[SecretKey, str] = dict(initial or {})

    def get(self, key: SecretKey) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: SecretKey, value: str) -> None:
        self._values[key] = value

    def delete(self, key: SecretKey) -> None:
        self._values.pop(key, None)


def is_valid_hevy_key(key: str) -> bool:
    """Hevy keys are UUIDs."""
    return bool(HEVY_KEY_PATTERN.match(key.strip()))


def is_valid_anthropic_key(key: str) -> bool:
    return key.startswith(ANTHROPIC_KEY_PREFIX) and len(key) > 20


def _resolve(secret_store: Optional[SecretStore], key: SecretKey, fallback: Optional[str]) -> Optional[str]:
    if secret_store is not None:
        stored = secret_store.get(key)
        if stored:
            return stored
    if fallback:
        logger.debug(f"Using {key.name} from environment")
    return fallback or None


def resolve_anthropic_key(settings: Settings, secret_store: Optional[SecretStore] = None) -> Optional[str]:
    """Stored key first, then ANTHROPIC_API_KEY from the environment."""
    return _resolve(secret_store, SecretKey.ANTHROPIC_API_KEY, settings.ANTHROPIC_API_KEY)


def resolve_hevy_key(settings: Settings, secret_store: Optional[SecretStore] = None) -> Optional[str]:
    return _resolve(secret_store, SecretKey.HEVY_API_KEY, settings.HEVY_API_KEY)
