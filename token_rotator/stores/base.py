"""Abstract store protocol for stack configuration and secrets."""

from typing import Protocol


class SecretStore(Protocol):
    """Protocol defining the interface for stack configuration stores.

    A store is bound to one stack (and working directory) when it is
    created. Keys are flat strings such as ``npm-token`` or
    ``github-token-expires-at``; every entry carries a secret flag.
    """

    @property
    def name(self) -> str:
        """Backend identifier (e.g., 'pulumi', 'stack-file')."""
        ...

    def get(self, key: str) -> str | None:
        """Read a configuration value.

        Args:
            key: Configuration key

        Returns:
            Stored value (decrypted if secret) or None if not set

        Raises:
            StoreError: If the backend cannot be read
        """
        ...

    def require_secret(self, key: str) -> str:
        """Read a value that must be present.

        Works for both secret and plain entries.

        Args:
            key: Configuration key

        Returns:
            Stored value

        Raises:
            ConfigKeyMissingError: If the key is not set
            StoreError: If the backend cannot be read
        """
        ...

    def set(self, key: str, value: str, secret: bool = False) -> None:
        """Write a configuration value.

        Args:
            key: Configuration key
            value: Value to store
            secret: Whether the value must be stored encrypted

        Raises:
            StoreError: If the backend cannot be written
        """
        ...
