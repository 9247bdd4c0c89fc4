from fastapi import HTTPException, status


class ChatError(HTTPException):
    """채팅 도메인 오류의 기반 클래스.

    HTTPException을 상속하므로 라우터에서 별도 변환 없이 그대로 전파됩니다.
    """

    http_status: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request failed"

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.http_status, detail=detail or self.default_detail)


class UnauthenticatedError(ChatError):
    http_status = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"


class PermissionDeniedError(ChatError):
    http_status = status.HTTP_403_FORBIDDEN
    default_detail = "You don't have the required privileges"


class NotFoundError(ChatError):
    http_status = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class PasswordRequiredError(ChatError):
    http_status = status.HTTP_403_FORBIDDEN
    default_detail = "This room requires a password"


class PasswordMismatchError(ChatError):
    http_status = status.HTTP_403_FORBIDDEN
    default_detail = "Incorrect room password"


class RoomFullError(ChatError):
    http_status = status.HTTP_409_CONFLICT
    default_detail = "This room has reached its maximum capacity"


class ValidationError(ChatError):
    # 422 상수 이름이 Starlette 버전마다 달라 숫자로 고정
    http_status = 422
    default_detail = "Invalid request"


class BackendError(ChatError):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Data service error"
