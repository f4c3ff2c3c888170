import pytest

from hirelog.core.errors import AccessDenied, NotFound, ValidationFailed
from hirelog.models import Note, Notification
from hirelog.services.history import list_history
from hirelog.services.notes import (
    delete_note,
    edit_note,
    list_notes,
    list_notes_page,
    post_note,
    subscribe_notes,
)
from hirelog.services.notifications import list_notifications


@pytest.fixture
def team(make_user, make_candidate):
    alice, bob, carol = make_user("Alice"), make_user("Bob"), make_user("Carol")
    candidate = make_candidate(bob, assigned_users=[alice.uid])
    return alice, bob, carol, candidate


def test_mention_notifies_mentioned_user_once(db, team):
    alice, bob, _, candidate = team

    note = post_note(db, bob, candidate.id, "@Alice please review, thanks @Alice")

    assert note.mentions == [alice.uid]
    notifications = list_notifications(db, alice.uid)
    assert len(notifications) == 1
    assert notifications[0].is_read is False
    assert notifications[0].note_id == note.id
    assert notifications[0].candidate_id == candidate.id
    assert notifications[0].candidate_name == "Jordan"
    assert list_notifications(db, bob.uid) == []


def test_author_mentioning_themselves_gets_no_notification(db, team):
    _, bob, _, candidate = team

    note = post_note(db, bob, candidate.id, "Reminder for @Bob")

    assert note.mentions == [bob.uid]
    assert db.query(Notification).count() == 0


def test_unassigned_user_can_still_be_mentioned(db, team):
    _, bob, carol, candidate = team

    post_note(db, bob, candidate.id, "@Carol do you know this person?")

    assert len(list_notifications(db, carol.uid)) == 1


def test_preview_is_cut_to_one_hundred_characters(db, team):
    alice, bob, _, candidate = team
    text = "@Alice " + "x" * 150

    post_note(db, bob, candidate.id, text)

    preview = list_notifications(db, alice.uid)[0].message_preview
    assert len(preview) == 100
    assert preview.endswith("...")
    assert preview.startswith("@Alice xxx")


def test_note_text_is_sanitized_and_required(db, team):
    _, bob, _, candidate = team

    note = post_note(db, bob, candidate.id, " <script>alert(1)</script> Great fit ")
    assert note.text == "Great fit"
    assert note.author_name == "Bob"

    with pytest.raises(ValidationFailed):
        post_note(db, bob, candidate.id, "<script>alert(1)</script>")


def test_notes_are_listed_oldest_first(db, team):
    alice, bob, _, candidate = team
    for text in ("one", "two", "three"):
        post_note(db, alice if text == "two" else bob, candidate.id, text)

    assert [n.text for n in list_notes(db, alice, candidate.id)] == ["one", "two", "three"]


def test_unassigned_user_gets_no_note_data(db, team):
    _, bob, carol, candidate = team
    post_note(db, bob, candidate.id, "internal feedback")
    received = []

    with pytest.raises(AccessDenied):
        list_notes(db, carol, candidate.id)
    with pytest.raises(AccessDenied):
        subscribe_notes(db, carol, candidate.id, received.append)
    with pytest.raises(AccessDenied):
        post_note(db, carol, candidate.id, "let me in")

    assert received == []
    assert db.query(Note).count() == 1


def test_live_view_follows_post_edit_and_delete(db, team):
    alice, bob, _, candidate = team
    snapshots = []
    subscription = subscribe_notes(db, alice, candidate.id, snapshots.append)

    note = post_note(db, bob, candidate.id, "draft")
    edit_note(db, bob, candidate.id, note.id, "final")
    delete_note(db, bob, candidate.id, note.id)

    assert [[n.text for n in snapshot] for snapshot in snapshots] == [[], ["draft"], ["final"], []]
    subscription.cancel()


def test_only_author_can_edit_or_delete(db, team):
    alice, bob, _, candidate = team
    note = post_note(db, bob, candidate.id, "original")

    with pytest.raises(AccessDenied):
        edit_note(db, alice, candidate.id, note.id, "changed")
    with pytest.raises(AccessDenied):
        delete_note(db, alice, candidate.id, note.id)

    db.expire_all()
    assert db.get(Note, note.id).text == "original"
    assert len(list_history(db, bob, candidate.id)) == 1


def test_edit_keeps_mentions_and_records_history(db, team):
    alice, bob, carol, candidate = team
    note = post_note(db, bob, candidate.id, "@Alice take a look")

    edited = edit_note(db, bob, candidate.id, note.id, "@Carol take a look <script>x</script>")

    assert edited.text == "@Carol take a look"
    assert edited.mentions == [alice.uid]
    assert list_notifications(db, carol.uid) == []
    events = list_history(db, bob, candidate.id)
    assert events[0].action == "Note Edited"
    assert events[0].details == "A note was edited"


def test_delete_keeps_notifications_and_records_history(db, team):
    alice, bob, _, candidate = team
    note = post_note(db, bob, candidate.id, "@Alice see notes")

    delete_note(db, bob, candidate.id, note.id)

    assert db.query(Note).count() == 0
    assert len(list_notifications(db, alice.uid)) == 1
    assert list_history(db, alice, candidate.id)[0].action == "Note Deleted"


def test_note_must_belong_to_candidate(db, team, make_candidate):
    _, bob, _, candidate = team
    other = make_candidate(bob, name="Sam", email="sam@example.com")
    note = post_note(db, bob, candidate.id, "hello")

    with pytest.raises(NotFound):
        edit_note(db, bob, other.id, note.id, "moved")


def test_pages_run_newest_first_with_cursor(db, team):
    _, bob, _, candidate = team
    for i in range(1, 6):
        post_note(db, bob, candidate.id, f"note {i}")

    page, cursor = list_notes_page(db, bob, candidate.id, page_size=2)
    assert [n.text for n in page] == ["note 5", "note 4"]

    page, cursor = list_notes_page(db, bob, candidate.id, page_size=2, after=cursor)
    assert [n.text for n in page] == ["note 3", "note 2"]

    page, cursor = list_notes_page(db, bob, candidate.id, page_size=2, after=cursor)
    assert [n.text for n in page] == ["note 1"]

    page, cursor = list_notes_page(db, bob, candidate.id, page_size=2, after=cursor)
    assert page == []
    assert cursor is None


def test_nameless_author_gets_the_same_placeholder_on_notes_and_history(db, make_user, make_candidate):
    author = make_user("ghost")
    author.name = ""
    db.commit()
    candidate = make_candidate(author)

    note = post_note(db, author, candidate.id, "hello")
    edit_note(db, author, candidate.id, note.id, "hello again")

    assert note.author_name == "Unnamed User"
    assert {event.author_name for event in list_history(db, author, candidate.id)} == {"Unnamed User"}
