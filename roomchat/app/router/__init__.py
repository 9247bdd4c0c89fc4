from roomchat.app.router.v1.admin import router as admin_router
from roomchat.app.router.v1.auth import router as auth_router
from roomchat.app.router.v1.room import router as room_router
from roomchat.app.router.v1.websocket import router as websocket_router

__all__ = ["admin_router", "auth_router", "room_router", "websocket_router"]
