"""Shared error reporting for CLI commands."""

import sys
from collections.abc import Iterator
from contextlib import contextmanager

import click
import structlog

from token_rotator.exceptions import CredentialError, TokenRotatorError

log = structlog.get_logger(__name__)


@contextmanager
def exit_on_error(event: str) -> Iterator[None]:
    """Turn token-rotator errors into a message on stderr and a non-zero exit.

    Args:
        event: Log event name prefix for the failing command
    """
    try:
        yield
    except CredentialError as e:
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        if e.suggestion:
            click.echo(click.style(f"Suggestion: {e.suggestion}", fg="yellow"), err=True)
        log.debug(f"{event}_error", exc_info=True)
        sys.exit(1)
    except TokenRotatorError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        log.debug(f"{event}_error", exc_info=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)
    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        log.error(f"{event}_unexpected", exc_info=True)
        sys.exit(1)
