"""Pytest configuration and shared fixtures."""

import io
from datetime import UTC, datetime

import pytest
import structlog

from token_rotator.stores.memory import InMemoryStore
from token_rotator.utils.prompt import StreamPrompt

NOW = datetime(2024, 1, 1, tzinfo=UTC)


class RecordingBrowser:
    """Browser fake that remembers which URLs it was asked to open."""

    def __init__(self, result: bool = True, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.opened: list[str] = []

    def open(self, url: str) -> bool:
        self.opened.append(url)
        if self.error is not None:
            raise self.error
        return self.result


class FixedClock:
    """Clock returning a settable instant."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def scripted_prompt(*lines: str) -> StreamPrompt:
    """StreamPrompt reading the given answer lines and writing to a StringIO."""
    return StreamPrompt(input=io.StringIO("".join(f"{line}\n" for line in lines)), output=io.StringIO())


@pytest.fixture
def store() -> InMemoryStore:
    """Empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def clock() -> FixedClock:
    """Clock fixed at 2024-01-01T00:00:00Z."""
    return FixedClock()


@pytest.fixture
def browser() -> RecordingBrowser:
    """Browser fake that always succeeds."""
    return RecordingBrowser()


@pytest.fixture
def make_prompt():
    """Factory for prompts that answer with scripted lines."""
    return scripted_prompt


@pytest.fixture
def make_browser():
    """Factory for browser fakes with a chosen result or error."""
    return RecordingBrowser


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by CLI invocations."""
    yield
    structlog.reset_defaults()
