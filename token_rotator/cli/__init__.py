"""CLI commands for token-rotator.

Commands:
    npm (token_rotator.cli.rotate):
        Rotate an npm registry token.

    github (token_rotator.cli.rotate):
        Rotate a GitHub fine-grained or classic token.

    check (token_rotator.cli.check):
        Read a token through the expiry guard.
"""

from token_rotator.cli.check import check_command
from token_rotator.cli.rotate import github_command, npm_command

__all__ = ["check_command", "github_command", "npm_command"]
