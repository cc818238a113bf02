"""Push channel: owners receive decisions on their applications, staff receive new submissions."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from app.api.v1.auth import resolve_token
from app.core.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def notifications_ws(
    websocket: WebSocket,
    db: Annotated[Session, Depends(get_db)],
    token: Annotated[str, Query()] = "",
) -> None:
    """
    Authenticate with ?token=<jwt> and receive {"event", "data"} frames.

    Invalid or missing tokens close the socket with policy violation (1008).
    The session is released once the token is resolved; an open socket holds no connection.
    """
    try:
        user = resolve_token(db, token) if token else None
    except HTTPException:
        user = None
    finally:
        db.close()
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    notifier = websocket.app.state.notifier
    await websocket.accept()
    channel = notifier.connect(websocket, user.role, user.id)
    logger.info("Notification socket opened", extra={"user_id": user.id, "channel": channel})
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        notifier.disconnect(websocket)
        logger.info("Notification socket closed", extra={"user_id": user.id, "channel": channel})
