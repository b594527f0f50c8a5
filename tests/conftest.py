"""Shared fixtures for Splitguard tests."""

import os

import pytest

from splitguard.config import ValidationSettings, get_settings
from splitguard.validation import EntryValidator, build_default_registry


class RecordingLogger:
    """Stand-in for a structlog logger that keeps every call."""

    def __init__(self, fail: bool = False):
        self.calls = []
        self._fail = fail

    def _record(self, level, event, **kwargs):
        if self._fail:
            raise RuntimeError("log sink unavailable")
        self.calls.append((level, event, kwargs))

    def debug(self, event, **kwargs):
        self._record("debug", event, **kwargs)

    def info(self, event, **kwargs):
        self._record("info", event, **kwargs)

    def warning(self, event, **kwargs):
        self._record("warning", event, **kwargs)

    def error(self, event, **kwargs):
        self._record("error", event, **kwargs)

    def events(self, level=None):
        return [event for lvl, event, _ in self.calls if level is None or lvl == level]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep SPLITGUARD_* variables from the host out of the tests."""
    for key in list(os.environ):
        if key.startswith("SPLITGUARD_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    return ValidationSettings(_env_file=None)


@pytest.fixture
def registry(settings):
    return build_default_registry(settings)


@pytest.fixture
def validator(registry):
    return EntryValidator(registry=registry)


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def failing_logger():
    return RecordingLogger(fail=True)
