"""token-rotator: rotate short-lived registry tokens stored in a stack config."""

__version__ = "0.1.0"
