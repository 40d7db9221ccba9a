"""Expiry-gated retrieval of stored tokens.

Consumers call the guard instead of reading the token directly. The guard
looks at ``<token>-expires-at`` and refuses to return the token once the
recorded expiry falls before ``now - expiry_threshold_days``.

Note:
    The cutoff is measured backwards from now: a token is still handed
    out for up to ``expiry_threshold_days`` after its recorded expiry.
"""

from datetime import UTC, datetime, timedelta

import structlog

from token_rotator.config.settings import GuardConfig
from token_rotator.credentials.record import CredentialKeys, parse_timestamp
from token_rotator.credentials.rotation import Clock, utc_now
from token_rotator.enums import TokenFamily
from token_rotator.exceptions import (
    ConfigKeyMissingError,
    InvalidExpiryFormatError,
    MissingExpiryError,
    TokenExpiringError,
)
from token_rotator.stores.base import SecretStore

log = structlog.get_logger(__name__)


class ExpiryGuard:
    """Hands out stored tokens only while they are fresh enough."""

    def __init__(self, store: SecretStore, clock: Clock = utc_now) -> None:
        self.store = store
        self.clock = clock

    def get_token(self, config: GuardConfig) -> str:
        """Return the stored token if it passes the expiry check.

        Args:
            config: Token family, key and threshold

        Returns:
            The token value

        Raises:
            MissingExpiryError: If no expiry is recorded
            InvalidExpiryFormatError: If the recorded expiry is not ISO-8601
            TokenExpiringError: If the expiry is before the cutoff
            StoreError: If the store fails or the token itself is missing
        """
        keys = CredentialKeys(config.resolved_config_key)
        rotate_hint = f"Run 'rotate-token {config.family.value}' to store a new token"

        try:
            raw_expiry = self.store.require_secret(keys.expires_at)
        except ConfigKeyMissingError as e:
            raise MissingExpiryError(
                "No expiry date recorded for token",
                key=keys.expires_at,
                suggestion=rotate_hint,
            ) from e

        try:
            expires_at = parse_timestamp(raw_expiry)
        except ValueError as e:
            raise InvalidExpiryFormatError(
                f"Cannot parse expiry date {raw_expiry!r}",
                key=keys.expires_at,
                suggestion=rotate_hint,
            ) from e

        try:
            cutoff = self.clock() - timedelta(days=config.expiry_threshold_days)
        except OverflowError:
            cutoff = datetime.min.replace(tzinfo=UTC)

        if expires_at < cutoff:
            log.warning(
                "token_expiring",
                family=str(config.family),
                config_key=keys.value,
                expires_at=expires_at.isoformat(),
            )
            raise TokenExpiringError(expires_at, config.family, key=keys.value, suggestion=rotate_hint)

        log.debug("token_fresh", family=str(config.family), config_key=keys.value)
        return self.store.require_secret(keys.value)


def get_token(
    store: SecretStore,
    family: TokenFamily,
    config_token_name: str | None = None,
    expiry_threshold_days: int = 10,
) -> str:
    """Read a token through the expiry guard.

    Example:
        >>> token = get_token(store, TokenFamily.NPM)
    """
    config = GuardConfig(
        family=family,
        config_token_name=config_token_name,
        expiry_threshold_days=expiry_threshold_days,
    )
    return ExpiryGuard(store).get_token(config)
