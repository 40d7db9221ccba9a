"""Secret store backends.

All backends satisfy the :class:`SecretStore` protocol:
    - pulumi: delegates to the ``pulumi config`` CLI
    - stack-file: local YAML stack file with encrypted secrets
    - memory: in-process dictionary (tests and dry runs)
"""

from token_rotator.stores.base import SecretStore
from token_rotator.stores.factory import create_store
from token_rotator.stores.memory import InMemoryStore
from token_rotator.stores.pulumi_cli import PulumiCliStore
from token_rotator.stores.stack_file import StackFileStore

__all__ = [
    "SecretStore",
    "InMemoryStore",
    "PulumiCliStore",
    "StackFileStore",
    "create_store",
]
