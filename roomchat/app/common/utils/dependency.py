from fastapi import Depends, Query
from fastapi.security import OAuth2PasswordBearer

from roomchat.app.common.data.client import DataClient
from roomchat.app.common.data.sql_client import SqlDataClient
from roomchat.app.common.utils.storage import StorageService

# OAuth2 스키마 정의 (토큰이 없어도 DataClient 는 만들 수 있어야 하므로 auto_error=False)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

_storage: StorageService | None = None


def get_storage() -> StorageService:
    global _storage
    if _storage is None:
        _storage = StorageService()
    return _storage


# 요청마다 호출자 토큰에 묶인 DataClient 생성
async def get_data_client(token: str | None = Depends(oauth2_scheme)) -> DataClient:
    return SqlDataClient(storage=get_storage(), access_token=token)


# 브라우저 WebSocket 은 헤더를 못 보내므로 쿼리 파라미터로 토큰을 받음
async def get_ws_data_client(token: str | None = Query(None)) -> DataClient:
    return SqlDataClient(storage=get_storage(), access_token=token)
