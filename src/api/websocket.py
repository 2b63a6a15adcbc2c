"""WebSocket endpoint for real-time yard updates."""

import asyncio
import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from src.api.dependencies import get_user_from_token
from src.database import SessionLocal
from src.services.realtime import RealtimeService, yard_channel

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/ws", tags=["websocket"])

PING_INTERVAL_SECONDS = 30


@router.websocket("/yard")
async def websocket_yard_sync(
    websocket: WebSocket,
    token: str = Query(...),
) -> None:
    """WebSocket endpoint for a user's yard events.

    Authentication via token query parameter (WebSocket doesn't support headers).
    Relays cat visits, placements and balance changes published for the user.
    """
    # Manual DB session for WebSocket (can't use Depends normally)
    db = SessionLocal()
    realtime_service = RealtimeService()
    user_id: int | None = None

    try:
        user = get_user_from_token(db, token)
        if user is None:
            await websocket.close(code=4001, reason="Invalid token")
            return
        user_id = user.id
        # The session is only needed for authentication
        db.close()

        await websocket.accept()
        logger.info(f"Yard WebSocket connected: user={user_id}")

        async def handle_messages() -> None:
            """Receive messages from Redis and forward to WebSocket."""
            async for message in realtime_service.subscribe(yard_channel(user_id)):
                try:
                    await websocket.send_json(message)
                except WebSocketDisconnect:
                    break
                except Exception as e:
                    logger.error(f"Error sending WebSocket message: {e}")
                    break

        async def handle_ping() -> None:
            """Send periodic pings to keep connection alive."""
            while True:
                try:
                    await asyncio.sleep(PING_INTERVAL_SECONDS)
                    await websocket.send_json({"type": "ping"})
                except Exception:
                    break

        async def handle_client() -> None:
            """Handle incoming messages from client (pong responses)."""
            while True:
                try:
                    data = await websocket.receive_json()
                    if data.get("type") == "pong":
                        continue
                except WebSocketDisconnect:
                    break
                except Exception:
                    break

        # Stop everything once any side finishes (usually the client leaving)
        tasks = [
            asyncio.create_task(handle_messages()),
            asyncio.create_task(handle_ping()),
            asyncio.create_task(handle_client()),
        ]
        _, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    except WebSocketDisconnect:
        logger.info(f"Yard WebSocket disconnected: user={user_id}")
    except Exception as e:
        logger.error(f"Yard WebSocket error: {e}", exc_info=True)
    finally:
        db.close()
        await realtime_service.cleanup()
