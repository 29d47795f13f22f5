# app/routers/notifications.py
"""
WebSocket endpoint for dashboard notifications.

Connect: WS /api/v1/ws/notifications?channel=director|guard|faculty:<id>
Client messages:
  {"action": "join", "channel": "faculty:7"}   join another room
  {"action": "ping"}                           → {"event": "pong"}
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query, status
from app.services.notification_service import is_valid_channel, notification_manager
from app.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.websocket("/ws/notifications")
async def notifications_socket(websocket: WebSocket, channel: str = Query(...)):
    if not is_valid_channel(channel):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await notification_manager.connect(websocket, channel)
    try:
        while True:
            message = await websocket.receive_json()
            action = message.get("action") if isinstance(message, dict) else None
            if action == "join":
                room = message.get("channel", "")
                if not is_valid_channel(room):
                    await websocket.send_json({"event": "error", "data": {"message": f"Invalid room name: {room}"}})
                    continue
                await notification_manager.join(websocket, room)
                await websocket.send_json({"event": "joined", "data": {"channel": room}})
            elif action == "ping":
                await websocket.send_json({"event": "pong"})
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.warning(f"[WS] connection on {channel} closed with error: {e}")
    finally:
        await notification_manager.disconnect(websocket)
