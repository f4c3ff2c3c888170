"""
Live-query hub for real-time views.

Subscribers register a loader for a key (e.g. ``("notes", 12)``) and receive
the full ordered snapshot immediately and again every time a writer
publishes that key. Snapshots are full replacements, never deltas.
"""

import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Hashable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger("live")

Loader = Callable[[Session], list[Any]]
Callback = Callable[[list[Any]], None]


class Subscription:
    """Handle returned by ``LiveQueryHub.subscribe``."""

    def __init__(self, hub: "LiveQueryHub", key: Hashable, loader: Loader, callback: Callback):
        self._hub = hub
        self.key = key
        self.loader = loader
        self.callback = callback
        self.active = True

    def cancel(self) -> None:
        """Stop delivery. Safe to call more than once."""
        if not self.active:
            return
        self.active = False
        self._hub._remove(self)

    def deliver(self, snapshot: list[Any]) -> None:
        if not self.active:
            return
        try:
            self.callback(snapshot)
        except Exception:
            logger.exception(f"Live subscriber for {self.key!r} failed")


class LiveQueryHub:
    """Registry of live subscriptions keyed by view."""

    def __init__(self) -> None:
        self._subscriptions: dict[Hashable, list[Subscription]] = defaultdict(list)
        self._lock = threading.RLock()

    def subscribe(self, db: Session, key: Hashable, loader: Loader, callback: Callback) -> Subscription:
        """Register a subscriber and deliver the current snapshot to it."""
        snapshot = loader(db)
        subscription = Subscription(self, key, loader, callback)
        with self._lock:
            self._subscriptions[key].append(subscription)
        subscription.deliver(snapshot)
        return subscription

    def publish(self, db: Session, key: Hashable) -> None:
        """Reload the view for ``key`` and push it to every active subscriber."""
        with self._lock:
            subscriptions = [s for s in self._subscriptions.get(key, []) if s.active]
        if not subscriptions:
            return

        try:
            snapshot = subscriptions[0].loader(db)
        except SQLAlchemyError:
            # The write already succeeded; views catch up on the next publish
            logger.exception(f"Failed to load live snapshot for {key!r}")
            return

        for subscription in subscriptions:
            subscription.deliver(snapshot)

    def subscriber_count(self, key: Hashable) -> int:
        with self._lock:
            return len(self._subscriptions.get(key, []))

    def clear(self) -> None:
        with self._lock:
            for subscriptions in self._subscriptions.values():
                for subscription in subscriptions:
                    subscription.active = False
            self._subscriptions.clear()

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            subscriptions = self._subscriptions.get(subscription.key)
            if not subscriptions:
                return
            if subscription in subscriptions:
                subscriptions.remove(subscription)
            if not subscriptions:
                del self._subscriptions[subscription.key]


# Global hub used by the services and the WebSocket bridge
live_hub = LiveQueryHub()


def notes_key(candidate_id: int) -> tuple[str, int]:
    return ("notes", candidate_id)


def history_key(candidate_id: int) -> tuple[str, int]:
    return ("history", candidate_id)


def notifications_key(recipient_uid: str) -> tuple[str, str]:
    return ("notifications", recipient_uid)
