"""
Live view WebSockets.

Each socket receives the full ordered snapshot as a JSON list on connect
and again after every change. Browsers cannot set headers on WebSockets,
so the bearer token travels in the ``token`` query parameter.

Close codes: 4401 bad token, 4000 + HTTP status for service errors
(4403 not assigned, 4404 unknown candidate).
"""

import asyncio
import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from hirelog.core.errors import HireLogError
from hirelog.db.session import get_db
from hirelog.models import User
from hirelog.services import directory
from hirelog.services.history import subscribe_history
from hirelog.services.identity import identity_from_token
from hirelog.services.live import Subscription
from hirelog.services.notes import subscribe_notes
from hirelog.services.notifications import subscribe_notifications

logger = logging.getLogger("live")

router = APIRouter()

SubscribeFn = Callable[[Callable[[list], None]], Subscription]


async def _authenticate(websocket: WebSocket, db: Session, token: str) -> Optional[User]:
    identity = identity_from_token(db, token) if token else None
    if identity is None:
        await websocket.close(code=4401, reason="Could not validate credentials")
        return None
    return directory.ensure_directory_record(db, identity)


async def _pump(websocket: WebSocket, queue: asyncio.Queue) -> None:
    while True:
        payload = await queue.get()
        await websocket.send_json(payload)


async def _finish_sender(sender: asyncio.Task) -> None:
    """Cancel the sender task and collect its outcome."""
    sender.cancel()
    try:
        await sender
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.exception("Live socket sender failed")


async def _stream(websocket: WebSocket, db: Session, subscribe: SubscribeFn) -> None:
    """Bridge hub callbacks into the socket until the client goes away."""
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def on_snapshot(snapshot: list) -> None:
        payload = [item.model_dump(mode="json") for item in snapshot]
        loop.call_soon_threadsafe(queue.put_nowait, payload)

    try:
        subscription = subscribe(on_snapshot)
    except HireLogError as e:
        await websocket.close(code=4000 + e.status_code, reason=e.detail)
        return
    finally:
        # Later snapshots are loaded by the writer's session, so the
        # connection goes back to the pool while the socket stays open
        db.close()

    sender = asyncio.create_task(_pump(websocket, queue))
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug(f"Live socket closed for {subscription.key!r}")
    finally:
        subscription.cancel()
        await _finish_sender(sender)


@router.websocket("/candidates/{candidate_id}/notes")
async def live_notes(
    websocket: WebSocket,
    candidate_id: int,
    token: str = "",
    db: Session = Depends(get_db),
):
    await websocket.accept()
    user = await _authenticate(websocket, db, token)
    if user is None:
        return
    await _stream(websocket, db, lambda cb: subscribe_notes(db, user, candidate_id, cb))


@router.websocket("/candidates/{candidate_id}/history")
async def live_history(
    websocket: WebSocket,
    candidate_id: int,
    token: str = "",
    db: Session = Depends(get_db),
):
    await websocket.accept()
    user = await _authenticate(websocket, db, token)
    if user is None:
        return
    await _stream(websocket, db, lambda cb: subscribe_history(db, user, candidate_id, cb))


@router.websocket("/notifications")
async def live_notifications(
    websocket: WebSocket,
    token: str = "",
    db: Session = Depends(get_db),
):
    await websocket.accept()
    user = await _authenticate(websocket, db, token)
    if user is None:
        return
    await _stream(websocket, db, lambda cb: subscribe_notifications(db, user.uid, cb))
