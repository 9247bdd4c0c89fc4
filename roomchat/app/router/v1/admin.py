from fastapi import APIRouter, Depends

from roomchat.app.common.factory import get_admin_monitor
from roomchat.app.v1.admin.schema.capture_response import CaptureDataResponse
from roomchat.app.v1.admin.service.admin_monitor import AdminMonitor
from roomchat.app.v1.user.schema.profile import AdminUserResponse

router = APIRouter(prefix="/admin", tags=["Admin"])


# Users
@router.get("/users", response_model=list[AdminUserResponse])
async def list_users(admin_monitor: AdminMonitor = Depends(get_admin_monitor)):
    return await admin_monitor.list_users()


# Capture Records
@router.get("/users/{user_id}/captures", response_model=CaptureDataResponse)
async def get_capture_data(user_id: str, admin_monitor: AdminMonitor = Depends(get_admin_monitor)):
    return await admin_monitor.load_capture_data(user_id)
