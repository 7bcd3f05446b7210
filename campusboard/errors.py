"""콘텐츠 도메인 오류 분류와 표준 오류 응답 핸들러입니다.

서비스 레이어는 아래 예외를 그대로 raise 하고, API 계층은 ``handle_content_error`` 로
``{"message", "code", ...}`` 형태의 응답을 만든다. 모든 예외가 ``HTTPException`` 을
상속하므로 핸들러가 등록되지 않은 환경에서도 상태 코드는 유지된다.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ContentError(HTTPException):
    status_code = 400
    code = "ERROR"

    def __init__(self, message: str, *, code: Optional[str] = None, **extra: Any):
        super().__init__(status_code=self.status_code, detail=message)
        self.message = message
        if code:
            self.code = code
        self.extra: Dict[str, Any] = extra


class ValidationError(ContentError):
    status_code = 400
    code = "VALIDATION_ERROR"


class NotFound(ContentError):
    status_code = 404
    code = "NOT_FOUND"


class Forbidden(ContentError):
    status_code = 403
    code = "FORBIDDEN"


class DuplicateContent(ContentError):
    status_code = 409
    code = "DUPLICATE_UPLOAD"

    def __init__(self, existing_id: int):
        super().__init__(
            "Duplicate upload detected (same title for same division and semester)",
            existing_id=existing_id,
        )
        self.existing_id = existing_id


class InvalidFileType(ContentError):
    status_code = 400
    code = "INVALID_FILE_TYPE"


class FileTooLarge(ContentError):
    status_code = 400
    code = "FILE_TOO_LARGE"


class MaintenanceMode(ContentError):
    status_code = 503
    code = "MAINTENANCE_MODE"


class InvalidOperation(ContentError):
    status_code = 400
    code = "INVALID_OPERATION"


class PinConflict(ContentError):
    status_code = 409
    code = "PIN_CONFLICT"


class InternalError(ContentError):
    status_code = 500
    code = "INTERNAL_ERROR"


def handle_content_error(request: Request, exc: ContentError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("[api] %s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "code": exc.code, **exc.extra},
    )
