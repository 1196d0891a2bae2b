from __future__ import annotations

from typing import Any


class APIError(Exception):
    def __init__(
        self,
        code: str,
        message: str,
        status_code: int,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


def validation_error(location: str, field: str, message: str) -> APIError:
    return APIError(
        code="VALIDATION_ERROR",
        message="Request validation failed",
        status_code=400,
        details={"errors": [{"loc": [location, field], "msg": message}]},
    )
