"""
Session/Auth manager.

The module-level functions are the building blocks used by the HTTP auth
router. ``AuthSession`` wraps them into an observable login state for
in-process clients (CLI tools, scripts, tests):

    UNAUTHENTICATED -> AUTHENTICATING -> AUTHENTICATED
    AUTHENTICATED   -> UNAUTHENTICATED  (logout)

Every identity change goes through ``ensure_directory_record`` before the
session reports AUTHENTICATED, which also repairs accounts whose
registration stopped after the identity was created.
"""

import logging
import threading
from enum import Enum
from typing import Callable, Optional

from sqlalchemy.orm import Session, sessionmaker

from hirelog.core.errors import AuthError, ValidationFailed
from hirelog.models import Identity, User
from hirelog.services import directory, identity as identity_provider

logger = logging.getLogger("session")

HOME_VIEW = "/home"
LOGIN_VIEW = "/login"


class AuthState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


# ============== Building blocks ==============


def authenticate(db: Session, identifier: str, password: str) -> Identity:
    """
    Verify a login made with a username or an email.

    A username without a directory match fails with NotFound before any
    credential check is attempted.
    """
    email = directory.resolve_login_email(db, identifier)
    identity = identity_provider.verify_credentials(db, email, password)
    if identity is None:
        raise AuthError("Incorrect email or password")
    return identity


def register_account(db: Session, name: str, email: str, password: str) -> tuple[Identity, User]:
    """
    Create identity, display name and directory record, in that order.

    The steps are separate commits. If the process dies after the identity
    exists, the directory record is created on the next authenticated
    request by ``ensure_directory_record``.
    """
    name = name.strip()
    if not name:
        raise ValidationFailed("Name is required.")
    if "@" in name:
        raise ValidationFailed("Username cannot contain '@'")
    if directory.get_user_by_username(db, name):
        raise ValidationFailed("Username already taken")

    identity = identity_provider.create_identity(db, email, password)
    identity_provider.set_display_name(db, identity, name)
    user = directory.add_user(db, uid=identity.uid, name=name, email=identity.email)
    logger.info(f"Registered account {identity.uid} ({name})")
    return identity, user


def sign_out(db: Session, identity: Identity) -> None:
    identity_provider.revoke_tokens(db, identity)
    logger.info(f"Signed out {identity.uid}")


# ============== Observable session ==============


class AuthSession:
    """Process-wide login state with observers."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self._observers: list[Callable[["AuthSession"], None]] = []
        self._lock = threading.RLock()

        self.state = AuthState.UNAUTHENTICATED
        self.loading = True
        self.current_user: Optional[User] = None
        self.token: Optional[str] = None

    # ---- lifecycle ----

    def start(self, token: Optional[str] = None) -> None:
        """Attach the identity stream and emit the initial observation."""
        identity = None
        if token:
            with self._session_factory() as db:
                identity = identity_provider.identity_from_token(db, token)
        self.token = token if identity else None
        self.handle_identity_change(identity)

    def stop(self) -> None:
        """Detach from the identity stream and drop every observer."""
        with self._lock:
            self._observers.clear()

    def observe(self, callback: Callable[["AuthSession"], None]) -> Callable[[], None]:
        """Register ``callback``; it is called now and on every change."""
        with self._lock:
            self._observers.append(callback)
        callback(self)

        def cancel() -> None:
            with self._lock:
                if callback in self._observers:
                    self._observers.remove(callback)

        return cancel

    def handle_identity_change(self, identity: Optional[Identity]) -> None:
        user = None
        if identity is not None:
            with self._session_factory() as db:
                user = directory.ensure_directory_record(db, identity)
                db.expunge(user)

        was_loading = self.loading
        self.loading = False
        self.current_user = user
        state = AuthState.AUTHENTICATED if user else AuthState.UNAUTHENTICATED
        if not self._set_state(state, notify=False) and not was_loading:
            return
        self._notify()

    # ---- actions ----

    def login(self, identifier: str, password: str) -> str:
        self._set_state(AuthState.AUTHENTICATING)
        try:
            with self._session_factory() as db:
                identity = authenticate(db, identifier, password)
                self.token = identity_provider.issue_token(identity)
                db.expunge(identity)
            self.handle_identity_change(identity)
        except Exception:
            self._abort_authentication()
            raise
        return HOME_VIEW

    def register(self, name: str, email: str, password: str) -> str:
        self._set_state(AuthState.AUTHENTICATING)
        try:
            with self._session_factory() as db:
                identity, _ = register_account(db, name, email, password)
                self.token = identity_provider.issue_token(identity)
                db.expunge(identity)
            self.handle_identity_change(identity)
        except Exception:
            self._abort_authentication()
            raise
        return HOME_VIEW

    def logout(self) -> str:
        if self.token:
            with self._session_factory() as db:
                identity = identity_provider.identity_from_token(db, self.token)
                if identity is not None:
                    sign_out(db, identity)
        self.token = None
        self.handle_identity_change(None)
        return LOGIN_VIEW

    # ---- internals ----

    def _abort_authentication(self) -> None:
        self.token = None
        self.current_user = None
        self._set_state(AuthState.UNAUTHENTICATED)

    def _set_state(self, state: AuthState, notify: bool = True) -> bool:
        if state == self.state:
            return False
        self.state = state
        if notify:
            self._notify()
        return True

    def _notify(self) -> None:
        with self._lock:
            observers = list(self._observers)
        for observer in observers:
            observer(self)
