from typing import Mapping, Optional

from fastapi import HTTPException
from fechou.constants.error_codes import ErrorCode


class AppException(HTTPException):
    """Domain error rendered as ``{success, message, error_code, details}``."""

    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: dict | list | None = None,
        headers: Optional[Mapping[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.error_code = error_code
        self.details = details
