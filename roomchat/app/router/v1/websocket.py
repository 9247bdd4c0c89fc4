import asyncio
import json
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PydanticValidationError

from roomchat.app.common.data.client import DataClient
from roomchat.app.common.exceptions import ChatError, ValidationError
from roomchat.app.common.utils.dependency import get_ws_data_client
from roomchat.app.v1.room.schema.room_request import MessageSendRequest
from roomchat.app.v1.room.service.room_session import RoomSession

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Websocket"])


def _error_frame(error: ChatError) -> dict:
    return {"kind": "error", "status": error.status_code, "detail": error.detail}


def _parse_content(text: str | None) -> str:
    """수신 프레임에서 메시지 본문을 꺼냅니다. JSON이 아니면 텍스트 그대로 사용."""
    if text is None:
        raise ValidationError("Text frames only")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return text
    # "5", "true" 처럼 JSON 스칼라로도 읽히는 평문
    if payload is None or isinstance(payload, (bool, int, float)):
        return text

    try:
        return MessageSendRequest.model_validate(payload).content
    except PydanticValidationError:
        raise ValidationError('Message frames must look like {"content": "..."}')


async def _forward_events(websocket: WebSocket, session: RoomSession):
    async for event in session.events():
        await websocket.send_json(event.model_dump(mode="json"))


# Room Session Websocket
@router.websocket("/ws/rooms/{room_code}")
async def room_websocket(
    websocket: WebSocket,
    room_code: str,
    client: DataClient = Depends(get_ws_data_client),
):
    await websocket.accept()

    session = RoomSession(client)
    try:
        await session.open(room_code)
    except ChatError as e:
        logger.error(f"Room session for {room_code!r} failed to open: {e.detail}")
        await websocket.send_json(_error_frame(e))
        # 4401, 4404 ... 형태로 close code 전달
        await websocket.close(code=4000 + e.status_code)
        return

    await websocket.send_json(session.snapshot().model_dump(mode="json"))
    forward = asyncio.create_task(_forward_events(websocket, session))

    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(frame.get("code", 1000))

            try:
                content = _parse_content(frame.get("text"))
                await session.send_message(content)
            except ChatError as e:
                logger.error(f"Failed to send message in {room_code!r}: {e.detail}")
                await websocket.send_json(_error_frame(e))
    except WebSocketDisconnect:
        logger.info(f"WebSocket for room {room_code!r} disconnected")
    finally:
        await session.close()
        forward.cancel()
        try:
            await forward
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.warning(f"Event forwarding for {room_code!r} ended with error: {e}")
