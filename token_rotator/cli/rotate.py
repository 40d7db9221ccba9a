"""CLI commands that rotate stored tokens.

Commands:
    - npm: rotate an npm registry token
    - github: rotate a GitHub personal access token

Both commands print instructions, open the token settings page when they
know where it is, prompt for the new token and store it with its expiry.

Example:
    Rotate tokens in the ``prod`` stack::

        $ rotate-token --stack prod npm --username my-username
        $ rotate-token --stack prod github --type github-classic --token-id 1234567890
"""

import click

from token_rotator.cli.errors import exit_on_error
from token_rotator.config.settings import MAX_DAYS, RotationConfig
from token_rotator.credentials.rotation import RotationWorkflow
from token_rotator.enums import CredentialKind
from token_rotator.stores.factory import create_store
from token_rotator.utils.prompt import StreamPrompt


def _rotate(ctx: click.Context, config: RotationConfig) -> None:
    store = create_store(ctx.obj["settings"])
    RotationWorkflow(store, prompt=StreamPrompt()).rotate(config)


@click.command(name="npm")
@click.option(
    "--rotation-days",
    type=click.IntRange(min=1, max=MAX_DAYS),
    default=90,
    show_default=True,
    help="Rotation interval in days",
)
@click.option("--config-name", help='Config name, used as key in the stack config. Defaults to "npm-token".')
@click.option("--username", help="NPM username; opens the tokens page when set")
@click.pass_context
def npm_command(ctx: click.Context, rotation_days: int, config_name: str | None, username: str | None) -> None:
    """Change an NPM token.

    Opens the local browser first, only if --username is set. Then prompts
    for the new token and stores it in the stack config as a secret.

    Examples:

        rotate-token npm

        rotate-token npm --config-name npm --username my-username

        rotate-token npm --rotation-days 30
    """
    with exit_on_error("rotate_npm"):
        config = RotationConfig(
            kind=CredentialKind.NPM,
            config_key=config_name,
            rotation_days=rotation_days,
            username=username,
        )
        _rotate(ctx, config)


@click.command(name="github")
@click.option(
    "--rotation-days",
    type=click.IntRange(min=1, max=MAX_DAYS),
    default=90,
    show_default=True,
    help="Rotation interval in days",
)
@click.option("--config-name", help='Config name, used as key in the stack config. Defaults to "github-token".')
@click.option(
    "--type",
    "token_type",
    type=click.Choice([CredentialKind.GITHUB_FINE_GRAINED.value, CredentialKind.GITHUB_CLASSIC.value]),
    default=CredentialKind.GITHUB_FINE_GRAINED.value,
    show_default=True,
    help="Type of GitHub token",
)
@click.option(
    "--token-id",
    help="The ID from the GitHub token URL, e.g. https://github.com/settings/personal-access-tokens/<token-id>",
)
@click.pass_context
def github_command(
    ctx: click.Context,
    rotation_days: int,
    config_name: str | None,
    token_type: str,
    token_id: str | None,
) -> None:
    """Change a GitHub token.

    Opens the token page in the local browser. The token id is taken from
    the stack config (<config name>-id, e.g. github-token-id) or from
    --token-id; without either the token creation page is opened. Then
    prompts for the new token and stores it in the stack config as a secret.

    Examples:

        rotate-token github

        rotate-token github --config-name small-github-token --token-id 1234567890

        rotate-token github --rotation-days 30
    """
    with exit_on_error("rotate_github"):
        config = RotationConfig(
            kind=CredentialKind(token_type),
            config_key=config_name,
            rotation_days=rotation_days,
            token_id=token_id,
        )
        _rotate(ctx, config)
