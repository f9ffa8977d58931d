"""HTTP error mapping

Use cases return ``libs.result.Error`` values; routes turn them into
ClientError, which the app renders as {"error": {"code", "message", "reason"}}.
"""

from typing import Dict, Optional
from fastapi import status
from config import ApplicationConfig
from libs.result import Error
from src.domain.errors import ErrorCode

ERROR_STATUS: Dict[str, int] = {
    ErrorCode.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.NO_TENANT_CONTEXT: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.TENANT_BOUNDARY_VIOLATION: status.HTTP_403_FORBIDDEN,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_FOUND_OR_FORBIDDEN: status.HTTP_404_NOT_FOUND,
    ErrorCode.BUDGET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.RATE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TENANT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ALREADY_RECORDED: status.HTTP_409_CONFLICT,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.OVER_ALLOCATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.LOCK_TIMEOUT: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class ClientError(Exception):
    def __init__(
        self,
        error: Error,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code
        self.headers = headers


def client_error_for(error: Error) -> ClientError:
    """Build the ClientError for a use case error; unknown codes are server errors"""
    status_code = ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    headers = None
    if error.code == ErrorCode.UNAUTHENTICATED:
        headers = {"WWW-Authenticate": "Bearer"}
    elif error.code == ErrorCode.LOCK_TIMEOUT:
        headers = {"Retry-After": str(ApplicationConfig.LOCK_TIMEOUT_RETRY_AFTER_SECONDS)}
    return ClientError(error, status_code=status_code, headers=headers)
