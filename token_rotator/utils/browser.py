"""Best-effort opening of URLs in the operator's browser."""

import webbrowser
from typing import Protocol

import structlog

log = structlog.get_logger(__name__)


class BrowserOpener(Protocol):
    def open(self, url: str) -> bool:
        """Open ``url``; return False if no browser could be launched."""
        ...


class SystemBrowser:
    """Opens URLs with the platform's default browser."""

    def open(self, url: str) -> bool:
        return webbrowser.open(url, new=2)


def open_hint(browser: BrowserOpener, url: str) -> bool:
    """Open a hint URL without ever raising.

    Args:
        browser: Browser capability
        url: Page to open

    Returns:
        True if the browser reported success
    """
    try:
        opened = browser.open(url)
    except Exception as e:
        log.warning("browser_open_failed", url=url, error=str(e))
        return False

    if not opened:
        log.warning("browser_open_failed", url=url, error="no runnable browser")
        return False

    log.debug("browser_opened", url=url)
    return True
