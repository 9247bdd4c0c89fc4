import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roomchat.app.router import admin_router, auth_router, room_router, websocket_router
from roomchat.config.database import engine
from roomchat.config.database.redis import redis_cache, room_redis

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

load_dotenv()

CORS_ORIGINS = [origin.strip() for origin in os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("roomchat starting")
    yield

    # Ensure clean shutdown
    await room_redis.aclose()
    await redis_cache.aclose()
    await engine.dispose()
    logger.info("roomchat stopped")


main_router = APIRouter(prefix="/api/v1")


# 각 라우터를 메인 라우터에 포함
main_router.include_router(auth_router)
main_router.include_router(room_router)
main_router.include_router(admin_router)
main_router.include_router(websocket_router)


app = FastAPI(title="roomchat", lifespan=lifespan)
app.include_router(main_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600,
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("roomchat.main:app", host="0.0.0.0", port=8000)
