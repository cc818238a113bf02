"""Notification dispatcher: best-effort push of lifecycle events to connected WebSocket clients.

Clients subscribe to one channel at connect time: owners to ``user_<id>``, staff and
admins to the shared staff channel. Events published to a channel with no subscribers
are dropped; there is no queue, persistence, or redelivery on reconnect. Clients are
expected to re-fetch state from the REST API after receiving an event.
"""

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Protocol

from fastapi import WebSocketDisconnect

from app.models.user import ROLE_OWNER, STAFF_ROLES

logger = logging.getLogger(__name__)

OWNER_EVENT = "ownerNotification"
STAFF_EVENT = "adminNotification"
STAFF_CHANNEL = "staff"
SEND_TIMEOUT_SEC = 5.0


class Subscriber(Protocol):
    """Anything that can receive a JSON frame (a Starlette WebSocket in production)."""

    async def send_json(self, data: Any) -> None: ...


@dataclass(frozen=True)
class Notification:
    """Small structured lifecycle event. Not a source of truth."""

    message: str
    application_id: int | None = None
    status: str | None = None
    fee: float | None = None
    remarks: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Wire shape: camelCase applicationId, optional fields omitted when unset."""
        payload: dict[str, Any] = {"message": self.message}
        if self.application_id is not None:
            payload["applicationId"] = self.application_id
        if self.status is not None:
            payload["status"] = self.status
        if self.fee is not None:
            payload["fee"] = self.fee
        if self.remarks is not None:
            payload["remarks"] = self.remarks
        return payload


def owner_channel(owner_id: int) -> str:
    return f"user_{owner_id}"


def channel_for(role: str, user_id: int | None) -> str | None:
    """Return the channel a client with this role subscribes to, or None if it has none."""
    if role in STAFF_ROLES:
        return STAFF_CHANNEL
    if role == ROLE_OWNER and user_id is not None:
        return owner_channel(user_id)
    return None


class NotificationDispatcher:
    """In-process registry of subscribers per channel. One instance per application."""

    def __init__(self, send_timeout: float = SEND_TIMEOUT_SEC) -> None:
        self._channels: dict[str, set[Subscriber]] = defaultdict(set)
        self._send_timeout = send_timeout

    def subscribe(self, channel: str, subscriber: Subscriber) -> None:
        self._channels[channel].add(subscriber)
        logger.info("Subscriber joined channel", extra={"channel": channel})

    def connect(self, subscriber: Subscriber, role: str, user_id: int | None) -> str | None:
        """Register an authenticated client on its channel. Returns the channel name."""
        channel = channel_for(role, user_id)
        if channel is not None:
            self.subscribe(channel, subscriber)
        return channel

    def disconnect(self, subscriber: Subscriber) -> None:
        for channel in list(self._channels):
            members = self._channels[channel]
            members.discard(subscriber)
            if not members:
                del self._channels[channel]

    def subscriber_count(self, channel: str) -> int:
        return len(self._channels.get(channel, ()))

    async def publish(self, channel: str, event: str, notification: Notification) -> int:
        """
        Send one event to every subscriber of a channel. Returns the number of deliveries.

        A subscriber whose send fails or exceeds the send timeout is removed; the event is
        not retried.
        """
        members = list(self._channels.get(channel, ()))
        if not members:
            logger.debug(
                "Notification dropped: no subscribers",
                extra={"channel": channel, "event": event},
            )
            return 0
        frame = {"event": event, "data": notification.to_payload()}
        delivered = 0
        for subscriber in members:
            try:
                await asyncio.wait_for(subscriber.send_json(frame), self._send_timeout)
                delivered += 1
            except (WebSocketDisconnect, RuntimeError, OSError, asyncio.TimeoutError) as e:
                logger.warning(
                    "Dropping unresponsive subscriber",
                    extra={"channel": channel, "event": event, "reason": str(e)[:200]},
                )
                self.disconnect(subscriber)
        logger.info(
            "Notification published",
            extra={"channel": channel, "event": event, "delivered": delivered},
        )
        return delivered

    async def notify_owner(self, owner_id: int, notification: Notification) -> int:
        return await self.publish(owner_channel(owner_id), OWNER_EVENT, notification)

    async def notify_staff(self, notification: Notification) -> int:
        return await self.publish(STAFF_CHANNEL, STAFF_EVENT, notification)
