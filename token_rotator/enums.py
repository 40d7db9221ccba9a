"""Enumerations for token-rotator credential kinds and backends."""

from enum import Enum
from typing import assert_never


class TokenFamily(str, Enum):
    """Token families that share one retrieval policy.

    Both GitHub token flavors are read back the same way, so the expiry
    guard only distinguishes the registry (npm) from the source host (github).
    """

    NPM = "npm"
    GITHUB = "github"

    def __str__(self) -> str:
        return self.value

    @property
    def default_config_key(self) -> str:
        """Store key used when the caller does not name one."""
        match self:
            case TokenFamily.NPM:
                return "npm-token"
            case TokenFamily.GITHUB:
                return "github-token"
            case _:
                assert_never(self)


class CredentialKind(str, Enum):
    """Kinds of credentials that can be rotated.

    Supported kinds:
    - npm: npm registry access token
    - github-fine-grained: GitHub fine-grained personal access token
    - github-classic: GitHub classic personal access token
    """

    NPM = "npm"
    GITHUB_FINE_GRAINED = "github-fine-grained"
    GITHUB_CLASSIC = "github-classic"

    def __str__(self) -> str:
        return self.value

    @property
    def family(self) -> TokenFamily:
        """Retrieval family this kind belongs to."""
        match self:
            case CredentialKind.NPM:
                return TokenFamily.NPM
            case CredentialKind.GITHUB_FINE_GRAINED | CredentialKind.GITHUB_CLASSIC:
                return TokenFamily.GITHUB
            case _:
                assert_never(self)

    @property
    def default_config_key(self) -> str:
        return self.family.default_config_key


class StoreBackend(str, Enum):
    """Secret store backends the CLI can bind to."""

    PULUMI = "pulumi"
    STACK_FILE = "stack-file"
    MEMORY = "memory"

    def __str__(self) -> str:
        return self.value
