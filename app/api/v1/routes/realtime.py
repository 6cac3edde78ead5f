from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from infrastructure.logging import get_module_logger
from infrastructure.services import ConnectionRegistryDep, SettingsDep

logger = get_module_logger()

router = APIRouter(tags=["Realtime"])


@router.websocket("/ws/notifications")
async def notifications_socket(
    websocket: WebSocket,
    registry: ConnectionRegistryDep,
    settings: SettingsDep,
):
    """Hold a socket open so the websocket channel can push to it.

    The user comes from the same trusted identity header as the HTTP routes.
    """
    user_id = websocket.headers.get(settings.server.USER_ID_HEADER, "").strip()
    if not user_id:
        logger.warning("websocket_rejected_missing_identity")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    await registry.register(user_id, websocket)
    try:
        while True:
            # Clients only send keepalives
            message = await websocket.receive_text()
            if message == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        logger.debug("websocket_client_disconnected", user_id=user_id)
    finally:
        await registry.unregister(user_id, websocket)
