"""Tests for the in-memory session store"""

import pytest

from core.errors import CodeSpaceExhausted, SessionNotFound
from core.state import DEFAULT_ALPHABET, SessionStore, make_code


def fixed_codes(*codes):
    remaining = iter(codes)
    return lambda: next(remaining)


class TestMakeCode:

    def test_length_and_alphabet(self):
        for _ in range(50):
            code = make_code()
            assert len(code) == 6
            assert all(ch in DEFAULT_ALPHABET for ch in code)

    def test_alphabet_has_no_ambiguous_characters(self):
        for ch in "0O1I":
            assert ch not in DEFAULT_ALPHABET

    def test_custom_length(self):
        assert len(make_code(length=8)) == 8


class TestSessionStore:

    def test_create_starts_empty(self):
        store = SessionStore()
        session = store.create("host-1")

        assert session.host == "host-1"
        assert session.queue == []
        assert session.active_candidate is None
        assert store.get(session.code) is session
        assert len(store) == 1

    def test_codes_unique_among_live_sessions(self):
        store = SessionStore()
        codes = {store.create(f"host-{i}").code for i in range(100)}
        assert len(codes) == 100

    def test_retries_on_collision(self):
        store = SessionStore(code_factory=fixed_codes("AAAAAA", "AAAAAA", "BBBBBB"))
        first = store.create("h1")
        second = store.create("h2")

        assert first.code == "AAAAAA"
        assert second.code == "BBBBBB"

    def test_code_space_exhausted(self):
        store = SessionStore(max_attempts=3, code_factory=lambda: "AAAAAA")
        store.create("h1")

        with pytest.raises(CodeSpaceExhausted):
            store.create("h2")

    def test_get_unknown_code(self):
        with pytest.raises(SessionNotFound):
            SessionStore().get("NOPE22")

    def test_delete(self):
        store = SessionStore()
        code = store.create("h1").code

        assert store.delete(code).host == "h1"
        assert code not in store
        assert store.delete(code) is None

    def test_code_reusable_after_delete(self):
        store = SessionStore(code_factory=lambda: "AAAAAA")
        store.delete(store.create("h1").code)

        assert store.create("h2").code == "AAAAAA"

    def test_find_by_host(self):
        store = SessionStore()
        store.create("h1")
        second = store.create("h2")

        assert store.find_by_host("h2") is second
        assert store.find_by_host("nobody") is None
