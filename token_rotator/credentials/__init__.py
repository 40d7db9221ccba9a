"""Credential rotation and expiry-gated retrieval."""

from token_rotator.credentials.guard import ExpiryGuard, get_token
from token_rotator.credentials.record import (
    CredentialKeys,
    CredentialRecord,
    format_timestamp,
    parse_timestamp,
)
from token_rotator.credentials.rotation import RotationWorkflow

__all__ = [
    "CredentialKeys",
    "CredentialRecord",
    "ExpiryGuard",
    "RotationWorkflow",
    "format_timestamp",
    "get_token",
    "parse_timestamp",
]
