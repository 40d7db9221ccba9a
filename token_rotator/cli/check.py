"""CLI command that reads a token through the expiry guard."""

import click

from token_rotator.cli.errors import exit_on_error
from token_rotator.config.settings import MAX_DAYS, GuardConfig
from token_rotator.credentials.guard import ExpiryGuard
from token_rotator.enums import TokenFamily
from token_rotator.stores.factory import create_store


def mask(value: str) -> str:
    """Mask all but the first and last four characters of a token."""
    if len(value) > 8:
        return value[:4] + "*" * (len(value) - 8) + value[-4:]
    return "*" * len(value)


@click.command(name="check")
@click.argument("family", type=click.Choice([f.value for f in TokenFamily]))
@click.option("--config-name", help="Config name of the token (defaults to npm-token / github-token)")
@click.option(
    "--expiry-days",
    type=click.IntRange(min=0, max=MAX_DAYS),
    default=10,
    show_default=True,
    help="Expiry threshold in days",
)
@click.option("--show-value", is_flag=True, help="Show full token value (default: masked)")
@click.pass_context
def check_command(
    ctx: click.Context,
    family: str,
    config_name: str | None,
    expiry_days: int,
    show_value: bool,
) -> None:
    """Check that a stored token is still fresh enough to use.

    Exits non-zero when the expiry date is missing, unreadable, or past
    the threshold.

    Examples:

        rotate-token check npm

        rotate-token check github --config-name small-github-token --expiry-days 5
    """
    with exit_on_error("check"):
        config = GuardConfig(
            family=TokenFamily(family),
            config_token_name=config_name,
            expiry_threshold_days=expiry_days,
        )
        token = ExpiryGuard(create_store(ctx.obj["settings"])).get_token(config)

        click.echo(f"Value: {token if show_value else mask(token)}")
        click.echo(click.style("Token is valid", fg="green"))
