"""CLI entry point for token-rotator."""

import sys
from pathlib import Path

import click
import structlog

from token_rotator.cli.check import check_command
from token_rotator.cli.rotate import github_command, npm_command
from token_rotator.config.settings import RotatorSettings
from token_rotator.enums import StoreBackend
from token_rotator.exceptions import ConfigurationError
from token_rotator.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


def load_settings(config: str | None, overrides: dict[str, object]) -> RotatorSettings:
    """Build settings from an optional YAML file, the environment and CLI flags.

    Flags left unset (None) do not override file or environment values.

    Raises:
        ConfigurationError: If the settings file or a flag value is invalid
    """
    given = {key: value for key, value in overrides.items() if value is not None}
    try:
        settings = RotatorSettings.from_yaml(config) if config else RotatorSettings()
        if not given:
            return settings
        return RotatorSettings.model_validate({**settings.model_dump(), **given})
    except ValueError as e:
        raise ConfigurationError(f"Invalid option: {e}") from e


@click.group()
@click.option("--stack", envvar="TOKEN_ROTATOR_STACK", help="Stack name (default: prod)")
@click.option(
    "--work-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Stack working directory (defaults to ./)",
)
@click.option(
    "--backend",
    type=click.Choice([b.value for b in StoreBackend]),
    help="Secret store backend (default: pulumi)",
)
@click.option("--config", help="Path to YAML settings file")
@click.option("--log-level", help="Logging level (default: WARNING)")
@click.pass_context
def cli(
    ctx: click.Context,
    stack: str | None,
    work_dir: Path | None,
    backend: str | None,
    config: str | None,
    log_level: str | None,
) -> None:
    """Rotate tokens stored in a stack config."""
    try:
        settings = load_settings(
            config,
            {"stack": stack, "work_dir": work_dir, "backend": backend, "log_level": log_level},
        )
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    configure_logging(settings.log_level)
    log.debug("settings_loaded", stack=settings.stack, backend=str(settings.backend))
    ctx.obj = {"settings": settings}


cli.add_command(npm_command)
cli.add_command(github_command)
cli.add_command(check_command)


if __name__ == "__main__":
    cli()
