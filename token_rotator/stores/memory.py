"""In-memory store for tests and dry runs."""

import logging

from token_rotator.exceptions import ConfigKeyMissingError

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Dictionary-backed stack store.

    Nothing is persisted. Useful for rehearsing a rotation
    (``--backend memory``) and as a deterministic fake in tests.

    Example:
        >>> store = InMemoryStore({"github-token-id": "1234"})
        >>> store.set("github-token", "ghp_abc123", secret=True)
        >>> store.is_secret("github-token")
        True
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})
        self._secret_keys: set[str] = set()

    @property
    def name(self) -> str:
        return "memory"

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def require_secret(self, key: str) -> str:
        value = self._values.get(key)
        if value is None:
            raise ConfigKeyMissingError("Missing required configuration", key=key)
        return value

    def set(self, key: str, value: str, secret: bool = False) -> None:
        self._values[key] = value
        if secret:
            self._secret_keys.add(key)
        else:
            self._secret_keys.discard(key)
        logger.debug(f"Set {'secret' if secret else 'plain'} value in memory: {key}")

    def is_secret(self, key: str) -> bool:
        """Whether the value stored under ``key`` was marked secret."""
        return key in self._secret_keys

    def keys(self) -> list[str]:
        return sorted(self._values)
