"""
Note threads with @-mentions.

Notes are shown oldest first. Posting a note that mentions other users
queues one notification per mentioned user in the same transaction; edits
and deletes are recorded in the candidate history.
"""

import logging
import re
from typing import Callable, Iterable, Optional

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hirelog.core.access import ensure_can_edit_note, load_viewable_candidate
from hirelog.core.errors import NotFound, StoreError, ValidationFailed
from hirelog.models import Note, User
from hirelog.schemas import NoteRead
from hirelog.services.directory import UNNAMED_USER, get_users
from hirelog.services.history import NOTE_DELETED, NOTE_EDITED, append_history
from hirelog.services.live import Subscription, live_hub, notes_key, notifications_key
from hirelog.services.notifications import build_preview, enqueue_notification
from hirelog.services.sanitize import sanitize_text

logger = logging.getLogger("notes")

# "@" at the start of the text or after a non-word character
MENTION_START = re.compile(r"(?<!\w)@")

# Partial mention being typed right before the cursor
MENTION_QUERY = re.compile(r"(?:^|\s)@(\w*)\Z")
TRAILING_MENTION = re.compile(r"@(\w*)\Z")


# ============== Mentions ==============


def _is_word_char(text: str, index: int) -> bool:
    return index < len(text) and (text[index].isalnum() or text[index] == "_")


def detect_mentions(text: str, users: Iterable[User]) -> list[str]:
    """
    Return the uids of users mentioned in ``text``, in order of appearance.

    A mention is ``@`` followed by a user's exact name, ending at a word
    boundary. When several names fit at the same position the longest one
    wins, so ``@Ann Lee`` does not also mention ``Ann``.
    """
    uids_by_name: dict[str, list[str]] = {}
    for user in users:
        if user.name:
            uids_by_name.setdefault(user.name, []).append(user.uid)
    names = sorted(uids_by_name, key=len, reverse=True)

    mentioned: list[str] = []
    for match in MENTION_START.finditer(text):
        start = match.end()
        for name in names:
            if text.startswith(name, start) and not _is_word_char(text, start + len(name)):
                for uid in uids_by_name[name]:
                    if uid not in mentioned:
                        mentioned.append(uid)
                break
    return mentioned


def mention_query(text: str, cursor: Optional[int] = None) -> Optional[str]:
    """The partial name typed after ``@`` up to the cursor, or None."""
    before = text if cursor is None else text[:cursor]
    match = MENTION_QUERY.search(before)
    return match.group(1) if match else None


def suggest_mentions(users: Iterable[User], query: str) -> list[User]:
    needle = query.lower()
    return [user for user in users if user.name and needle in user.name.lower()]


def insert_mention(text: str, cursor: Optional[int], name: str) -> tuple[str, int]:
    """
    Replace the partial mention before the cursor with ``@name ``.

    Returns the new text and the cursor position after the inserted name.
    Text without a partial mention at the cursor is returned unchanged.
    """
    if cursor is None:
        cursor = len(text)
    before, after = text[:cursor], text[cursor:]
    if mention_query(before) is None:
        return text, cursor

    before = TRAILING_MENTION.sub(lambda _: f"@{name} ", before)
    return before + after, len(before)


# ============== Reads ==============


def load_notes(db: Session, candidate_id: int) -> list[NoteRead]:
    notes = (
        db.query(Note)
        .filter(Note.candidate_id == candidate_id)
        .order_by(Note.created_at.asc(), Note.id.asc())
        .all()
    )
    return [NoteRead.model_validate(note) for note in notes]


def list_notes(db: Session, actor: User, candidate_id: int) -> list[NoteRead]:
    load_viewable_candidate(db, actor, candidate_id)
    return load_notes(db, candidate_id)


def list_notes_page(
    db: Session,
    actor: User,
    candidate_id: int,
    page_size: int,
    after: Optional[int] = None,
) -> tuple[list[NoteRead], Optional[int]]:
    """
    Newest-first page of notes.

    ``after`` is the id of the last note of the previous page. Returns the
    page and the cursor for the next one (None when the page is empty).
    """
    if page_size < 1:
        raise ValidationFailed("page_size must be at least 1")

    load_viewable_candidate(db, actor, candidate_id)
    query = db.query(Note).filter(Note.candidate_id == candidate_id)

    if after is not None:
        last = _get_note(db, candidate_id, after)
        query = query.filter(
            or_(
                Note.created_at < last.created_at,
                and_(Note.created_at == last.created_at, Note.id < last.id),
            )
        )

    notes = query.order_by(Note.created_at.desc(), Note.id.desc()).limit(page_size).all()
    cursor = notes[-1].id if notes else None
    return [NoteRead.model_validate(note) for note in notes], cursor


def subscribe_notes(
    db: Session,
    actor: User,
    candidate_id: int,
    callback: Callable[[list[NoteRead]], None],
) -> Subscription:
    load_viewable_candidate(db, actor, candidate_id)
    return live_hub.subscribe(
        db,
        notes_key(candidate_id),
        lambda session: load_notes(session, candidate_id),
        callback,
    )


# ============== Writes ==============


def _get_note(db: Session, candidate_id: int, note_id: int) -> Note:
    note = db.get(Note, note_id)
    if note is None or note.candidate_id != candidate_id:
        raise NotFound("Note not found")
    return note


def post_note(db: Session, actor: User, candidate_id: int, text: str) -> Note:
    candidate = load_viewable_candidate(db, actor, candidate_id)

    clean_text = sanitize_text(text)
    if not clean_text:
        raise ValidationFailed("Note text is required.")

    mentions = detect_mentions(clean_text, get_users(db))
    recipients = [uid for uid in mentions if uid != actor.uid]

    note = Note(
        candidate_id=candidate.id,
        text=clean_text,
        author_id=actor.uid,
        author_name=actor.name or UNNAMED_USER,
        mentions=mentions,
    )
    try:
        db.add(note)
        db.flush()  # assigns note.id for the notifications
        preview = build_preview(clean_text)
        for uid in recipients:
            enqueue_notification(
                db,
                uid,
                candidate_id=candidate.id,
                candidate_name=candidate.name,
                note_id=note.id,
                message_preview=preview,
                commit=False,
            )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error adding note to candidate {candidate_id}: {e}")
        raise StoreError("Failed to add note") from e

    db.refresh(note)
    logger.info(f"Note {note.id} posted on candidate {candidate_id}, {len(recipients)} notified")

    live_hub.publish(db, notes_key(candidate.id))
    for uid in recipients:
        live_hub.publish(db, notifications_key(uid))
    return note


def edit_note(db: Session, actor: User, candidate_id: int, note_id: int, text: str) -> Note:
    """Replace a note's text. Mentions and sent notifications are left as they were."""
    load_viewable_candidate(db, actor, candidate_id)
    note = _get_note(db, candidate_id, note_id)
    ensure_can_edit_note(actor, note)

    clean_text = sanitize_text(text)
    if not clean_text:
        raise ValidationFailed("Note text is required.")

    note.text = clean_text
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating note {note_id}: {e}")
        raise StoreError("Failed to update note") from e

    db.refresh(note)
    live_hub.publish(db, notes_key(candidate_id))
    append_history(db, candidate_id, actor, NOTE_EDITED, "A note was edited")
    return note


def delete_note(db: Session, actor: User, candidate_id: int, note_id: int) -> None:
    """Hard-delete a note. Notifications it triggered are kept."""
    load_viewable_candidate(db, actor, candidate_id)
    note = _get_note(db, candidate_id, note_id)
    ensure_can_edit_note(actor, note)

    try:
        db.delete(note)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting note {note_id}: {e}")
        raise StoreError("Failed to delete note") from e

    live_hub.publish(db, notes_key(candidate_id))
    append_history(db, candidate_id, actor, NOTE_DELETED, "A note was deleted")
