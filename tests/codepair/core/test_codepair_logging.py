import logging

import pytest

from codepair.core.logging import resolve_log_level, setup_logging


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("error", logging.ERROR),
        (" Warn ", logging.WARNING),
        ("10", logging.DEBUG),
        (25, 25),
        ("chatty", logging.INFO),
        ("", logging.INFO),
        (None, logging.INFO),
    ],
)
def test_resolve_log_level(raw, expected):
    assert resolve_log_level(raw) == expected


def test_setup_logging_sets_root_level_and_handler():
    assert setup_logging("ERROR") == logging.ERROR
    root = logging.getLogger()
    assert root.getEffectiveLevel() == logging.ERROR
    assert root.handlers


def test_explicit_level_beats_env(monkeypatch):
    monkeypatch.setenv("CODEPAIR_LOG_LEVEL", "DEBUG")
    setup_logging("ERROR")
    assert logging.getLogger().getEffectiveLevel() == logging.ERROR


def test_codepair_env_beats_generic_env(monkeypatch):
    monkeypatch.setenv("CODEPAIR_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    setup_logging(None)
    assert logging.getLogger().getEffectiveLevel() == logging.WARNING


def test_generic_env_is_the_fallback(monkeypatch):
    monkeypatch.delenv("CODEPAIR_LOG_LEVEL", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    setup_logging(None)
    assert logging.getLogger().getEffectiveLevel() == logging.ERROR


def test_transport_loggers_follow_debug_mode():
    setup_logging("INFO")
    assert logging.getLogger("engineio").level == logging.WARNING
    assert logging.getLogger("socketio.server").level == logging.WARNING

    setup_logging("DEBUG")
    assert logging.getLogger("engineio").level == logging.NOTSET
    assert logging.getLogger("socketio").getEffectiveLevel() == logging.DEBUG
