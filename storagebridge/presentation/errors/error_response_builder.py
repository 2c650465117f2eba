"""Build RFC 9457 responses from domain errors.

Status mapping is by ErrorCode so every error class that shares a code
shares a status. Unmapped codes are 500.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from storagebridge.core.config import get_settings
from storagebridge.core.enums import ErrorCode
from storagebridge.core.errors import DomainError
from storagebridge.presentation.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)

_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.OAUTH_STATE_NOT_FOUND: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PROVIDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INTEGRATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.STORAGE_FILE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.STORAGE_REAUTH_REQUIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.PROVIDER_AUTHENTICATION_FAILED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.PROVIDER_TOKEN_REFRESH_FAILED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.PROVIDER_REFRESH_TOKEN_MISSING: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.PROVIDER_RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.PROVIDER_UNAVAILABLE: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.PROVIDER_CREDENTIAL_INVALID: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.STORAGE_CAPABILITY_NOT_SUPPORTED: status.HTTP_501_NOT_IMPLEMENTED,
    ErrorCode.STORAGE_EXPORT_NOT_SUPPORTED: status.HTTP_501_NOT_IMPLEMENTED,
    ErrorCode.PROVIDER_NOT_CONFIGURED: status.HTTP_503_SERVICE_UNAVAILABLE,
}

_TITLE_BY_STATUS: dict[int, str] = {
    400: "Bad Request",
    401: "Authentication Required",
    404: "Resource Not Found",
    429: "Too Many Requests",
    500: "Internal Server Error",
    501: "Not Implemented",
    502: "Bad Gateway",
    503: "Service Unavailable",
}


class ErrorResponseBuilder:
    """Convert DomainError values into RFC 9457 JSON responses.

    Example:
        >>> match await handler.handle(query):
        ...     case Failure(error=error):
        ...         return ErrorResponseBuilder.from_domain_error(error, request)
    """

    @staticmethod
    def status_for(code: ErrorCode) -> int:
        return _STATUS_BY_CODE.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    @staticmethod
    def from_domain_error(error: DomainError, request: Request) -> JSONResponse:
        """Convert a DomainError to a Problem Details response.

        Rate-limit and unavailable errors that carry ``retry_after`` set the
        ``Retry-After`` header.
        """
        status_code = ErrorResponseBuilder.status_for(error.code)
        problem = ProblemDetails(
            type=f"{get_settings().backend_url}/errors/{error.code.value}",
            title=_TITLE_BY_STATUS.get(status_code, "Error"),
            status=status_code,
            detail=error.message,
            instance=str(request.url.path),
            code=error.code.value,
        )

        field = getattr(error, "field", None)
        if field:
            problem.errors = [
                ErrorDetail(field=field, code=error.code.value, message=error.message)
            ]

        headers: dict[str, str] | None = None
        retry_after = getattr(error, "retry_after", None)
        if retry_after is not None:
            headers = {"Retry-After": str(retry_after)}

        return JSONResponse(
            status_code=status_code,
            content=problem.model_dump(exclude_none=True),
            headers=headers,
        )
