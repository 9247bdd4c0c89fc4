from fastapi import APIRouter, Depends, Request, status

from roomchat.app.common.factory import get_room_directory
from roomchat.app.v1.room.schema.room_request import RoomCreateRequest, RoomJoinRequest
from roomchat.app.v1.room.schema.room_response import RoomJoinResponse, RoomListResponse, RoomRead
from roomchat.app.v1.room.service.room_directory import RoomDirectory

router = APIRouter(tags=["Rooms"])


# Active Rooms
@router.get("/rooms", response_model=list[RoomListResponse])
async def list_rooms(room_directory: RoomDirectory = Depends(get_room_directory)):
    return await room_directory.list_active_rooms()


# Create Room
@router.post("/rooms", response_model=RoomRead, status_code=status.HTTP_201_CREATED)
async def create_room(
    request: RoomCreateRequest,
    room_directory: RoomDirectory = Depends(get_room_directory),
):
    return await room_directory.create_room(
        name=request.name,
        description=request.description,
        password=request.password,
        max_participants=request.max_participants,
    )


# Join Room (입장 가능 여부 확인)
@router.post("/rooms/join", response_model=RoomJoinResponse)
async def join_room(
    request: RoomJoinRequest,
    http_request: Request,
    room_directory: RoomDirectory = Depends(get_room_directory),
):
    room = await room_directory.resolve_join(request.room_code, request.password)
    return RoomJoinResponse(room=room, link=room_directory.room_link(str(http_request.base_url), room.room_code))
