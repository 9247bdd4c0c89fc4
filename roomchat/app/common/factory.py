from fastapi import Depends

from roomchat.app.common.data.client import DataClient
from roomchat.app.common.utils.dependency import get_data_client
from roomchat.app.v1.admin.service.admin_monitor import AdminMonitor
from roomchat.app.v1.auth.service.auth_service import AuthService
from roomchat.app.v1.room.service.room_directory import RoomDirectory


def get_room_directory(client: DataClient = Depends(get_data_client)) -> RoomDirectory:
    return RoomDirectory(client)


def get_admin_monitor(client: DataClient = Depends(get_data_client)) -> AdminMonitor:
    return AdminMonitor(client)


def get_auth_service(client: DataClient = Depends(get_data_client)) -> AuthService:
    return AuthService(client)
