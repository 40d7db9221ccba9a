"""Interactive rotation of stored tokens.

The workflow tells the operator what to do, opens the page where the new
token can be generated, reads the token from the prompt, and stores it
together with its expiry timestamp.

Example:
    >>> workflow = RotationWorkflow(store)
    >>> record = workflow.rotate(RotationConfig(kind=CredentialKind.NPM, username="octocat"))
    >>> record.keys.expires_at
    'npm-token-expires-at'
"""

from collections.abc import Callable
from datetime import UTC, datetime
from textwrap import dedent
from typing import assert_never

import structlog

from token_rotator.config.settings import RotationConfig
from token_rotator.credentials.record import CredentialKeys, CredentialRecord, format_timestamp
from token_rotator.enums import CredentialKind
from token_rotator.exceptions import MissingTokenError
from token_rotator.stores.base import SecretStore
from token_rotator.utils.browser import BrowserOpener, SystemBrowser, open_hint
from token_rotator.utils.prompt import LinePrompt, StreamPrompt

log = structlog.get_logger(__name__)

Clock = Callable[[], datetime]

NPM_TOKENS_URL = "https://www.npmjs.com/settings/{username}/tokens/"
GITHUB_FINE_GRAINED_URL = "https://github.com/settings/personal-access-tokens/{token_id}"
GITHUB_CLASSIC_URL = "https://github.com/settings/tokens/{token_id}"
GITHUB_NEW_TOKEN_URL = "https://github.com/settings/tokens?type=beta"

TOKEN_QUESTION = "Enter your token: "


def utc_now() -> datetime:
    return datetime.now(UTC)


def _instructions(destination: str | None, rotation_days: int) -> str:
    if destination:
        opening = f"The browser will open to {destination}, where you can generate a new token."
    else:
        opening = "You now need to generate a new token."

    return dedent(
        f"""


        Hello 👋

        {opening}
        Remember to choose {rotation_days} days expiration time. We will assume that you
        do, so the system will not ask you again for a while.

        """
    )


class RotationWorkflow:
    """Replaces a stored token and resets its expiry clock.

    Attributes:
        store: Stack store the token is written to
        prompt: Channel used to talk to the operator
        browser: Used to open the token settings page
        clock: Returns the current UTC time
    """

    def __init__(
        self,
        store: SecretStore,
        prompt: LinePrompt | None = None,
        browser: BrowserOpener | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.store = store
        self.prompt = prompt or StreamPrompt()
        self.browser = browser or SystemBrowser()
        self.clock = clock

    def hint_url(self, config: RotationConfig) -> str | None:
        """Work out which page to open for generating the new token.

        A GitHub token id recorded in the store wins over the one passed
        by the caller.

        Returns:
            URL to open, or None if there is nothing useful to show
        """
        keys = CredentialKeys(config.resolved_config_key)

        match config.kind:
            case CredentialKind.NPM:
                if config.username:
                    return NPM_TOKENS_URL.format(username=config.username)
                return None
            case CredentialKind.GITHUB_FINE_GRAINED:
                token_id = self.store.get(keys.token_id) or config.token_id
                if token_id:
                    return GITHUB_FINE_GRAINED_URL.format(token_id=token_id)
                return GITHUB_NEW_TOKEN_URL
            case CredentialKind.GITHUB_CLASSIC:
                token_id = self.store.get(keys.token_id) or config.token_id
                if token_id:
                    return GITHUB_CLASSIC_URL.format(token_id=token_id)
                return GITHUB_NEW_TOKEN_URL
            case _:
                assert_never(config.kind)

    @staticmethod
    def destination(kind: CredentialKind, url: str | None) -> str | None:
        """Name of the site the browser is about to open, for the instructions."""
        if url is None:
            return None

        match kind:
            case CredentialKind.NPM:
                return "NPM"
            case CredentialKind.GITHUB_FINE_GRAINED | CredentialKind.GITHUB_CLASSIC:
                return "GitHub"
            case _:
                assert_never(kind)

    def rotate(self, config: RotationConfig) -> CredentialRecord:
        """Run one rotation.

        Args:
            config: What to rotate and for how long the new token lives

        Returns:
            The record that was written

        Raises:
            MissingTokenError: If the operator entered nothing. Nothing is written.
            StoreError: If the store cannot be read or written
        """
        config_key = config.resolved_config_key
        keys = CredentialKeys(config_key)
        log.info("rotation_started", kind=str(config.kind), config_key=config_key, store=self.store.name)

        url = self.hint_url(config)
        self.prompt.write(_instructions(self.destination(config.kind, url), config.rotation_days))
        if url:
            open_hint(self.browser, url)

        token = self.prompt.ask(TOKEN_QUESTION)
        if not token.strip():
            raise MissingTokenError(
                "Token is required",
                key=config_key,
                suggestion="Paste the newly generated token when prompted",
            )

        record = CredentialRecord.issue(config.kind, config_key, token, self.clock(), config.rotation_days)

        self.store.set(keys.value, record.value, secret=True)
        self.store.set(keys.expires_at, format_timestamp(record.expires_at), secret=False)

        log.info(
            "token_rotated",
            kind=str(config.kind),
            config_key=config_key,
            expires_at=format_timestamp(record.expires_at),
        )
        self.prompt.write(f"Token {config_key} updated!\n")
        return record
