"""
Configuration system using Pydantic for type-safe settings management.

This module provides the settings that bind token-rotator to a secret
store, plus the per-invocation configuration models for the rotation
workflow and the expiry guard.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from token_rotator.enums import CredentialKind, StoreBackend, TokenFamily
from token_rotator.exceptions import ConfigurationError


# Upper bound on day counts; keeps datetime arithmetic inside datetime.max
MAX_DAYS = 36500

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class RotationConfig(BaseModel):
    """Parameters of a single token rotation."""

    kind: CredentialKind = Field(..., description="Kind of credential being rotated")
    config_key: str | None = Field(
        default=None, description="Store key for the token (defaults to npm-token / github-token)"
    )
    rotation_days: int = Field(default=90, ge=1, le=MAX_DAYS, description="Days until the new token expires")
    username: str | None = Field(default=None, description="npm username, used to open the tokens page")
    token_id: str | None = Field(default=None, description="GitHub token id, used to open the token page")

    @property
    def resolved_config_key(self) -> str:
        return self.config_key or self.kind.default_config_key


class GuardConfig(BaseModel):
    """Parameters of an expiry-gated token lookup."""

    family: TokenFamily = Field(..., description="Token family being read")
    config_token_name: str | None = Field(
        default=None, description="Store key for the token (defaults to npm-token / github-token)"
    )
    expiry_threshold_days: int = Field(default=10, ge=0, le=MAX_DAYS, description="Freshness threshold in days")

    @property
    def resolved_config_key(self) -> str:
        return self.config_token_name or self.family.default_config_key


class RotatorSettings(BaseSettings):
    """Settings binding the CLI to a secret store.

    Values come from (highest precedence first) CLI flags, a YAML settings
    file, and ``TOKEN_ROTATOR_*`` environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="TOKEN_ROTATOR_",
        case_sensitive=False,
    )

    stack: str = Field(default="prod", description="Stack name the tokens are stored in")
    work_dir: Path = Field(default=Path("."), description="Project directory of the stack")
    backend: StoreBackend = Field(default=StoreBackend.PULUMI, description="Secret store backend")
    passphrase: SecretStr | None = Field(default=None, description="Passphrase for the stack-file backend")
    pulumi_binary: str = Field(default="pulumi", description="Pulumi executable")
    log_level: LogLevel = Field(default="WARNING", description="Minimum log level")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value

    @classmethod
    def from_yaml(cls, config_path: str) -> RotatorSettings:
        """Load settings from YAML file with environment variable interpolation.

        Supports ${VAR_NAME} syntax for environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            RotatorSettings instance

        Raises:
            ConfigurationError: If config file is invalid or contains invalid fields
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file) as f:
                yaml_content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {config_path}") from e

        try:
            yaml_content = cls._interpolate_env_vars(yaml_content)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment variable reference in config: {e}") from e

        try:
            config_dict = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a YAML object, not a list or scalar")

        try:
            return cls(**config_dict)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

    @staticmethod
    def _interpolate_env_vars(content: str) -> str:
        """Interpolate ${VAR_NAME} placeholders with environment variables.

        Supports two syntaxes:
        - ${VAR_NAME} - Required environment variable (raises if not set)
        - ${VAR_NAME:-default} - Optional with default value

        YAML comment lines are left untouched.

        Raises:
            ValueError: If a required environment variable is not set
        """
        pattern = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default_value = match.group(2)
            value = os.getenv(var_name)

            if value is not None:
                return value
            elif default_value is not None:
                return default_value
            else:
                raise ValueError(f"Environment variable {var_name} is not set")

        def process_line(line: str) -> str:
            if line.lstrip().startswith("#"):
                return line
            return pattern.sub(replace_var, line)

        return "\n".join(process_line(line) for line in content.split("\n"))
