from hirelog.services.sanitize import sanitize_text
from hirelog.services.live import LiveQueryHub, Subscription, live_hub
from hirelog.services.candidates import (
    add_candidate,
    list_candidates,
    get_candidate,
    update_candidate_status,
    grant_access,
    delete_candidate,
)
from hirelog.services.history import append_history, list_history, subscribe_history
from hirelog.services.notifications import (
    enqueue_notification,
    list_notifications,
    subscribe_notifications,
    mark_read,
    resolve_notification,
)
from hirelog.services.notes import (
    detect_mentions,
    mention_query,
    suggest_mentions,
    insert_mention,
    list_notes,
    list_notes_page,
    subscribe_notes,
    post_note,
    edit_note,
    delete_note,
)
from hirelog.services.session import AuthSession, AuthState, authenticate, register_account, sign_out

__all__ = [
    "sanitize_text",
    "LiveQueryHub",
    "Subscription",
    "live_hub",
    "add_candidate",
    "list_candidates",
    "get_candidate",
    "update_candidate_status",
    "grant_access",
    "delete_candidate",
    "append_history",
    "list_history",
    "subscribe_history",
    "enqueue_notification",
    "list_notifications",
    "subscribe_notifications",
    "mark_read",
    "resolve_notification",
    "detect_mentions",
    "mention_query",
    "suggest_mentions",
    "insert_mention",
    "list_notes",
    "list_notes_page",
    "subscribe_notes",
    "post_note",
    "edit_note",
    "delete_note",
    "AuthSession",
    "AuthState",
    "authenticate",
    "register_account",
    "sign_out",
]
