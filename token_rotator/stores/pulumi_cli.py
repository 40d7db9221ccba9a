"""Store backend that delegates to the ``pulumi config`` CLI.

Secret values are written through stdin so they never appear in the
process listing. Reads use ``pulumi config get``, which prints secret
values decrypted.
"""

import logging
import subprocess  # nosec B404 # Required for pulumi config operations with controlled input
from pathlib import Path

from token_rotator.exceptions import ConfigKeyMissingError, StoreError

logger = logging.getLogger(__name__)

# Printed by ``pulumi config get`` when the key is not set
MISSING_KEY_MARKER = "not found"


class PulumiCliStore:
    """Stack configuration managed by Pulumi.

    Example:
        >>> store = PulumiCliStore(Path("./infra"), "prod")
        >>> store.set("npm-token", "npm_abc123", secret=True)
        >>> store.get("npm-token-expires-at")
        '2024-01-31T00:00:00.000Z'
    """

    def __init__(
        self,
        work_dir: Path,
        stack: str,
        binary: str = "pulumi",
        timeout: float = 60.0,
    ) -> None:
        """Initialize Pulumi CLI store.

        Args:
            work_dir: Pulumi project directory
            stack: Stack name
            binary: Pulumi executable
            timeout: Seconds to wait for each CLI call
        """
        self.work_dir = work_dir
        self.stack = stack
        self.binary = binary
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "pulumi"

    def _run(self, args: list[str], key: str, stdin: str | None = None) -> subprocess.CompletedProcess[str]:
        cmd = [
            self.binary,
            "config",
            *args,
            "--stack",
            self.stack,
            "--cwd",
            str(self.work_dir),
        ]

        try:
            return subprocess.run(  # nosec B603 # Pulumi command with controlled input
                cmd,
                input=stdin,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise StoreError(f"Pulumi CLI not found: {self.binary}", key=key) from e
        except subprocess.TimeoutExpired as e:
            raise StoreError(f"Pulumi CLI timed out after {self.timeout} seconds", key=key) from e

    def get(self, key: str) -> str | None:
        result = self._run(["get", key], key=key)

        if result.returncode != 0:
            if MISSING_KEY_MARKER in result.stderr:
                return None
            raise StoreError(f"pulumi config get failed: {result.stderr.strip()}", key=key)

        logger.debug(f"Read configuration from stack {self.stack}: {key}")
        return result.stdout.rstrip("\n")

    def require_secret(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise ConfigKeyMissingError(f"Missing required configuration in stack '{self.stack}'", key=key)
        return value

    def set(self, key: str, value: str, secret: bool = False) -> None:
        flag = "--secret" if secret else "--plaintext"
        result = self._run(["set", key, flag], key=key, stdin=value)

        if result.returncode != 0:
            raise StoreError(f"pulumi config set failed: {result.stderr.strip()}", key=key)

        logger.info(f"Stored {'secret' if secret else 'plain'} value in stack {self.stack}: {key}")
