import pytest

from codepair.core.utils import SESSION_ID_ALPHABET, generate_session_id, utcnow


def test_session_id_alphabet_is_url_safe():
    assert len(SESSION_ID_ALPHABET) == 64
    assert set(SESSION_ID_ALPHABET).isdisjoint(set("/?#&=+% "))


def test_generate_session_id_shape():
    ids = {generate_session_id() for _ in range(200)}
    assert len(ids) == 200
    for session_id in ids:
        assert len(session_id) == 10
        assert set(session_id) <= set(SESSION_ID_ALPHABET)


def test_generate_session_id_custom_length():
    assert len(generate_session_id(21)) == 21
    with pytest.raises(ValueError):
        generate_session_id(0)


def test_utcnow_is_timezone_aware():
    assert utcnow().utcoffset() is not None
