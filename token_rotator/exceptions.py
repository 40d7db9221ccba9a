"""Custom exception hierarchy for token-rotator.

Exception Hierarchy:
    TokenRotatorError (base)
    ├── ConfigurationError
    ├── CredentialError
    │   ├── MissingTokenError
    │   ├── MissingExpiryError
    │   ├── InvalidExpiryFormatError
    │   └── TokenExpiringError
    └── StoreError
        ├── ConfigKeyMissingError
        └── EncryptionError

Errors raised by the store backends are passed through the rotation
workflow and the expiry guard untouched. Nothing in this package retries.

Example Usage:
    >>> from token_rotator.exceptions import TokenExpiringError
    >>> try:
    ...     token = guard.get_token(config)
    ... except TokenExpiringError as e:
    ...     print(f"Rotate first: {e.message}")
"""

from datetime import datetime

from token_rotator.enums import TokenFamily


class TokenRotatorError(Exception):
    """Base exception for all token-rotator errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(TokenRotatorError):
    """Configuration-related errors.

    Examples:
        - Settings file not found
        - Invalid YAML syntax
        - Invalid setting values (e.g. non-positive rotation days)
    """

    pass


# =============================================================================
# Credential Errors
# =============================================================================


class CredentialError(TokenRotatorError):
    """Credential lifecycle errors.

    Base class for failures of the rotation workflow and the expiry guard.

    Attributes:
        message: Human-readable error description
        key: The store key involved (e.g., "npm-token-expires-at")
        suggestion: Optional suggestion for resolution
    """

    def __init__(
        self,
        message: str,
        key: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            key: The store key involved
            suggestion: Optional suggestion for resolution
        """
        self.key = key
        self.suggestion = suggestion

        full_message = message
        if key:
            full_message = f"{message} (key: {key})"
        if suggestion:
            full_message = f"{full_message}\nSuggestion: {suggestion}"

        super().__init__(full_message)
        # Preserve original message (super sets self.message to full_message)
        self.message = message


class MissingTokenError(CredentialError):
    """The operator entered an empty token during rotation."""

    pass


class MissingExpiryError(CredentialError):
    """No expiry timestamp is recorded for the credential."""

    pass


class InvalidExpiryFormatError(CredentialError):
    """The recorded expiry timestamp cannot be parsed."""

    pass


class TokenExpiringError(CredentialError):
    """The credential is past the freshness cutoff and must be rotated.

    Attributes:
        expires_at: Recorded expiry instant
        family: Token family the guard was asked for
    """

    def __init__(
        self,
        expires_at: datetime,
        family: TokenFamily,
        key: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        self.expires_at = expires_at
        self.family = family
        super().__init__(
            f"Token for {family.value} expires on {expires_at.isoformat()}. Rotation is required",
            key=key,
            suggestion=suggestion,
        )


# =============================================================================
# Store Errors
# =============================================================================


class StoreError(TokenRotatorError):
    """Secret store failures.

    Raised by store backends when reading or writing fails (CLI not found,
    non-zero exit, unreadable stack file, ...).

    Attributes:
        message: Human-readable error description
        key: The store key involved (if applicable)
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message
            key: The store key involved
        """
        self.key = key

        full_message = message
        if key:
            full_message = f"{message} (key: {key})"

        super().__init__(full_message)
        self.message = message


class ConfigKeyMissingError(StoreError):
    """A required key is not present in the store."""

    pass


class EncryptionError(StoreError):
    """Encryption or decryption of a secret value failed."""

    pass
