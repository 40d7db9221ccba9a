"""Settings and per-invocation configuration models."""

from token_rotator.config.settings import GuardConfig, RotationConfig, RotatorSettings

__all__ = ["GuardConfig", "RotationConfig", "RotatorSettings"]
