from datetime import datetime

import pytest

from codepair.core.exceptions import DuplicateSessionError
from codepair.schemas.session import CursorPosition, Participant
from codepair.services.session_registry import DEFAULT_CODE, DEFAULT_LANGUAGE, SessionRegistry


def _alice() -> Participant:
    return Participant(id="user-1", name="Alice")


def _bob() -> Participant:
    return Participant(id="user-2", name="Bob")


def test_create_session_uses_defaults():
    registry = SessionRegistry()
    session = registry.create_session("test-id")

    assert session.id == "test-id"
    assert session.code == DEFAULT_CODE == "// Start coding here...\n"
    assert session.language == DEFAULT_LANGUAGE == "javascript"
    assert isinstance(session.created_at, datetime)
    assert session.created_at.tzinfo is not None
    assert session.participants == {}
    assert registry.get_session("test-id") is session


def test_create_session_honours_configured_defaults():
    registry = SessionRegistry(default_code="# hi\n", default_language="python")
    session = registry.create_session("s")
    assert (session.code, session.language) == ("# hi\n", "python")


def test_create_session_rejects_duplicate_id():
    registry = SessionRegistry()
    registry.create_session("dup")

    with pytest.raises(DuplicateSessionError) as exc_info:
        registry.create_session("dup")

    assert exc_info.value.session_id == "dup"
    assert exc_info.value.code == "duplicate_session_id"


def test_open_session_seats_first_participant():
    registry = SessionRegistry()
    session = registry.open_session("s1", _alice())

    assert list(session.participants) == ["user-1"]
    assert "s1" in registry
    assert len(registry) == registry.session_count() == 1


def test_get_session_absent_returns_none():
    assert SessionRegistry().get_session("non-existent") is None


def test_delete_session():
    registry = SessionRegistry()
    registry.create_session("test-id")

    assert registry.delete_session("test-id") is True
    assert registry.get_session("test-id") is None
    assert registry.delete_session("test-id") is False


def test_add_participant_and_overwrite():
    registry = SessionRegistry()
    registry.create_session("test-id")

    assert registry.add_participant("test-id", _alice()) is True
    assert registry.get_participant("test-id", "user-1").name == "Alice"

    # Same id replaces the record rather than duplicating it.
    assert registry.add_participant("test-id", Participant(id="user-1", name="Alicia")) is True
    state = registry.get_session_state("test-id")
    assert [p.name for p in state.participants] == ["Alicia"]


def test_add_participant_absent_session():
    registry = SessionRegistry()
    assert registry.add_participant("non-existent", _alice()) is False
    assert registry.session_count() == 0


def test_remove_participant_keeps_session_while_others_remain():
    registry = SessionRegistry()
    registry.open_session("test-id", _alice())
    registry.add_participant("test-id", _bob())

    assert registry.remove_participant("test-id", "user-1") is True
    assert registry.get_participant("test-id", "user-1") is None
    assert registry.get_participant("test-id", "user-2") is not None


def test_remove_last_participant_deletes_session():
    registry = SessionRegistry()
    registry.open_session("test-id", _alice())

    assert registry.remove_participant("test-id", "user-1") is True
    assert registry.get_session("test-id") is None
    assert "test-id" not in registry


def test_remove_unknown_participant_reports_false():
    registry = SessionRegistry()
    registry.open_session("test-id", _alice())

    assert registry.remove_participant("test-id", "ghost") is False
    assert registry.remove_participant("non-existent", "user-1") is False
    assert registry.get_session("test-id") is not None


def test_remove_from_empty_session_reclaims_it():
    registry = SessionRegistry()
    registry.create_session("empty")

    assert registry.remove_participant("empty", "anyone") is False
    assert registry.get_session("empty") is None


def test_update_code_and_language():
    registry = SessionRegistry()
    registry.open_session("test-id", _alice())

    assert registry.update_code("test-id", 'console.log("Hello");') is True
    assert registry.update_language("test-id", "python") is True
    session = registry.get_session("test-id")
    assert session.code == 'console.log("Hello");'
    assert session.language == "python"

    assert registry.update_code("non-existent", "code") is False
    assert registry.update_language("non-existent", "python") is False


def test_update_language_accepts_any_string():
    registry = SessionRegistry()
    registry.open_session("s", _alice())
    assert registry.update_language("s", "brainfuck") is True
    assert registry.get_session("s").language == "brainfuck"


def test_get_session_state_projection():
    registry = SessionRegistry()
    registry.open_session("test-id", _alice())
    registry.add_participant("test-id", _bob())
    registry.update_code("test-id", "test code")
    registry.update_language("test-id", "python")

    state = registry.get_session_state("test-id")

    assert state.id == "test-id"
    assert state.code == "test code"
    assert state.language == "python"
    assert sorted(p.name for p in state.participants) == ["Alice", "Bob"]
    assert registry.get_session_state("non-existent") is None


def test_get_session_state_is_a_copy():
    registry = SessionRegistry()
    registry.open_session("s", _alice())

    state = registry.get_session_state("s")
    state.participants[0].name = "Mallory"
    state.participants[0].cursor_position = CursorPosition(line_number=1, column=1)
    state.participants.append(_bob())

    fresh = registry.get_session_state("s")
    assert [p.name for p in fresh.participants] == ["Alice"]
    assert fresh.participants[0].cursor_position is None


def test_get_participant_lookups():
    registry = SessionRegistry()
    registry.open_session("test-id", _alice())

    assert registry.get_participant("non-existent", "user-1") is None
    assert registry.get_participant("test-id", "non-existent") is None
    assert registry.get_participant("test-id", "user-1").name == "Alice"
