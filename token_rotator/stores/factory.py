"""Factory for building the configured secret store."""

from typing import assert_never

from token_rotator.config.settings import RotatorSettings
from token_rotator.enums import StoreBackend
from token_rotator.stores.base import SecretStore
from token_rotator.stores.memory import InMemoryStore
from token_rotator.stores.pulumi_cli import PulumiCliStore
from token_rotator.stores.stack_file import StackFileStore


def create_store(settings: RotatorSettings) -> SecretStore:
    """Create the store backend named in settings.

    Args:
        settings: Rotator settings (stack, work dir, backend)

    Returns:
        Store bound to the configured stack
    """
    match settings.backend:
        case StoreBackend.PULUMI:
            return PulumiCliStore(settings.work_dir, settings.stack, binary=settings.pulumi_binary)
        case StoreBackend.STACK_FILE:
            passphrase = settings.passphrase.get_secret_value() if settings.passphrase else None
            return StackFileStore(settings.work_dir, settings.stack, passphrase=passphrase)
        case StoreBackend.MEMORY:
            return InMemoryStore()
        case _:
            assert_never(settings.backend)
