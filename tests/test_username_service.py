"""
tests/test_username_service.py -- Username allocation from email local-parts.
"""

from __future__ import annotations

from blogauth.services.username_service import (
    USERNAME_SUFFIX_ALPHABET,
    USERNAME_SUFFIX_LENGTH,
    generate_username,
    random_suffix,
    username_exists,
)


def test_free_local_part_used_as_is(run_db) -> None:
    username = run_db(lambda session: generate_username(session, "alice@x.com"))
    assert username == "alice"


def test_taken_local_part_gets_suffix(run_db, add_user) -> None:
    """An existing "alice" forces "alice" + 5 characters from the URL-safe alphabet."""
    add_user(username="alice", email="alice@y.com")

    username = run_db(lambda session: generate_username(session, "alice@x.com"))

    assert username != "alice"
    assert username.startswith("alice")
    suffix = username[len("alice"):]
    assert len(suffix) == USERNAME_SUFFIX_LENGTH
    assert all(ch in USERNAME_SUFFIX_ALPHABET for ch in suffix)


def test_only_text_before_first_at_is_used(run_db) -> None:
    username = run_db(lambda session: generate_username(session, "bob@mail@x.com"))
    assert username == "bob"


def test_username_exists(run_db, add_user) -> None:
    add_user(username="carol", email="carol@x.com")
    assert run_db(lambda session: username_exists(session, "carol"))
    assert not run_db(lambda session: username_exists(session, "Carol"))


def test_random_suffix_alphabet() -> None:
    for _ in range(50):
        suffix = random_suffix()
        assert len(suffix) == 5
        assert set(suffix) <= set(USERNAME_SUFFIX_ALPHABET)
