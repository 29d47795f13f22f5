# app/services/notification_service.py
"""
Push notifications to dashboard clients over WebSocket.

Channels:
  director        broadcast to every director dashboard
  guard           broadcast to every guard dashboard
  faculty:<id>    room for one faculty member

Broadcast channels carry `directorNotification` / `guardNotification`
events with {message, severity, timestamp}. Faculty rooms carry named
events (newVisitor, visitorExited, ...) with {message, record}.

Delivery is best-effort: nobody listening is not an error, dead or stalled
sockets are dropped, nothing is queued for clients that connect later.
"""

import asyncio
import re
from datetime import datetime
from typing import Dict, Optional, Protocol, Set
from fastapi import WebSocket
from app.config import settings
from app.services.errors import NotificationDeliveryFailure
from app.utils.logger import get_logger

logger = get_logger(__name__)

DIRECTOR = "director"
GUARD = "guard"
BROADCAST_EVENTS = {DIRECTOR: "directorNotification", GUARD: "guardNotification"}

_FACULTY_RE = re.compile(r"^faculty:\d+$")


def faculty_channel(faculty_id: int) -> str:
    return f"faculty:{faculty_id}"


def is_valid_channel(channel: str) -> bool:
    return channel in BROADCAST_EVENTS or bool(_FACULTY_RE.match(channel or ""))


class NotificationDispatcher(Protocol):
    async def notify(self, channel: str, message: str, severity: str = "info",
                     event: Optional[str] = None, record: Optional[dict] = None) -> None:
        ...


def build_envelope(channel: str, message: str, severity: str = "info",
                   event: Optional[str] = None, record: Optional[dict] = None) -> dict:
    """Wire frame sent to clients: {"event": <name>, "data": <payload>}."""
    if channel in BROADCAST_EVENTS:
        return {
            "event": event or BROADCAST_EVENTS[channel],
            "data": {"message": message, "severity": severity,
                     "timestamp": datetime.utcnow().isoformat()},
        }
    return {"event": event or "notification", "data": {"message": message, "record": record}}


class ConnectionManager:
    """Tracks connected dashboards by channel and fans events out to them."""

    def __init__(self, send_timeout: Optional[float] = None):
        self._rooms: Dict[str, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()
        self.send_timeout = send_timeout if send_timeout is not None else settings.WS_SEND_TIMEOUT

    async def connect(self, websocket: WebSocket, channel: str):
        await websocket.accept()
        await self.join(websocket, channel)

    async def join(self, websocket: WebSocket, channel: str):
        if not is_valid_channel(channel):
            raise ValueError(f"Invalid channel '{channel}'")
        async with self._lock:
            self._rooms.setdefault(channel, set()).add(websocket)
        logger.info(f"[WS] client joined {channel} ({self.listener_count(channel)} listening)")

    async def disconnect(self, websocket: WebSocket):
        async with self._lock:
            for channel in list(self._rooms):
                self._rooms[channel].discard(websocket)
                if not self._rooms[channel]:
                    del self._rooms[channel]

    def listener_count(self, channel: str) -> int:
        return len(self._rooms.get(channel, ()))

    async def _send(self, ws: WebSocket, channel: str, envelope: dict) -> bool:
        try:
            await asyncio.wait_for(ws.send_json(envelope), timeout=self.send_timeout)
            return True
        except asyncio.TimeoutError:
            logger.warning(f"[WS] send to {channel} timed out after {self.send_timeout}s")
        except Exception as e:
            logger.warning(f"[WS] send to {channel} failed: {e}")
        return False

    async def notify(self, channel: str, message: str, severity: str = "info",
                     event: Optional[str] = None, record: Optional[dict] = None) -> None:
        envelope = build_envelope(channel, message, severity, event, record)
        listeners = list(self._rooms.get(channel, ()))
        if not listeners:
            logger.debug(f"[WS] no listeners on {channel}; dropped: {message}")
            return

        results = await asyncio.gather(*(self._send(ws, channel, envelope) for ws in listeners))
        dead = [ws for ws, ok in zip(listeners, results) if not ok]
        for ws in dead:
            await self.disconnect(ws)
        logger.info(f"[WS] {envelope['event']} → {channel} ({len(listeners) - len(dead)} delivered)")


async def dispatch_safely(dispatcher: Optional[NotificationDispatcher], channel: str, message: str,
                          severity: str = "info", event: Optional[str] = None,
                          record: Optional[dict] = None) -> bool:
    """
    Deliver one notification without letting a failure escape.
    Returns False when the dispatcher raised (the failure is logged).
    """
    if dispatcher is None:
        return False
    try:
        await dispatcher.notify(channel, message, severity=severity, event=event, record=record)
        return True
    except Exception as e:
        failure = NotificationDeliveryFailure(channel, e)
        logger.warning(f"[NOTIFY] {failure}")
        return False


notification_manager = ConnectionManager()
