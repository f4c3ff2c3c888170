import pytest

from hirelog.core.access import (
    can_delete,
    can_edit_note,
    can_view,
    ensure_can_delete,
    ensure_can_edit_note,
    ensure_can_view,
)
from hirelog.core.errors import AccessDenied
from hirelog.models import Candidate, CandidateAssignment, Note, User

ALICE = User(uid="alice", name="Alice", email="alice@example.com")
BOB = User(uid="bob", name="Bob", email="bob@example.com")
CAROL = User(uid="carol", name="Carol", email="carol@example.com")


@pytest.fixture
def candidate():
    return Candidate(
        name="Jordan",
        email="jordan@example.com",
        created_by="alice",
        assignments=[CandidateAssignment(user_uid="alice"), CandidateAssignment(user_uid="bob")],
    )


def test_assigned_users_can_view(candidate):
    assert can_view(ALICE, candidate)
    assert can_view(BOB, candidate)
    assert not can_view(CAROL, candidate)


def test_only_creator_can_delete(candidate):
    assert can_delete(ALICE, candidate)
    assert not can_delete(BOB, candidate)


def test_only_author_can_edit_note():
    note = Note(text="hi", author_id="bob", author_name="Bob")
    assert can_edit_note(BOB, note)
    assert not can_edit_note(ALICE, note)


def test_ensure_helpers_raise_access_denied(candidate):
    ensure_can_view(BOB, candidate)
    with pytest.raises(AccessDenied):
        ensure_can_view(CAROL, candidate)
    with pytest.raises(AccessDenied):
        ensure_can_delete(BOB, candidate)
    with pytest.raises(AccessDenied):
        ensure_can_edit_note(ALICE, Note(text="hi", author_id="bob", author_name="Bob"))
