"""Credential records and the store key naming they rely on.

A credential is persisted as two store entries:

    <config_key>             the token itself (secret)
    <config_key>-expires-at  ISO-8601 expiry instant (plain)

GitHub credentials may additionally carry ``<config_key>-id``, the id of
the token on github.com, used only to open the right settings page.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from token_rotator.enums import CredentialKind

EXPIRES_AT_SUFFIX = "-expires-at"
TOKEN_ID_SUFFIX = "-id"


@dataclass(frozen=True)
class CredentialKeys:
    """Store keys derived from one config key."""

    config_key: str

    @property
    def value(self) -> str:
        return self.config_key

    @property
    def expires_at(self) -> str:
        return f"{self.config_key}{EXPIRES_AT_SUFFIX}"

    @property
    def token_id(self) -> str:
        return f"{self.config_key}{TOKEN_ID_SUFFIX}"


@dataclass(frozen=True)
class CredentialRecord:
    """A token together with its expiry, as written by one rotation."""

    kind: CredentialKind
    config_key: str
    value: str
    expires_at: datetime

    @property
    def keys(self) -> CredentialKeys:
        return CredentialKeys(self.config_key)

    @classmethod
    def issue(
        cls,
        kind: CredentialKind,
        config_key: str,
        value: str,
        now: datetime,
        rotation_days: int,
    ) -> "CredentialRecord":
        """Create a record whose expiry is ``rotation_days`` calendar days after ``now``."""
        return cls(
            kind=kind,
            config_key=config_key,
            value=value,
            expires_at=now + timedelta(days=rotation_days),
        )


def format_timestamp(moment: datetime) -> str:
    """Format an instant as UTC ISO-8601 with milliseconds, e.g. ``2024-01-31T00:00:00.000Z``.

    Naive datetimes are taken to be UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 instant or date into an aware UTC datetime.

    Raises:
        ValueError: If ``raw`` is not ISO-8601
    """
    parsed = datetime.fromisoformat(raw.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
