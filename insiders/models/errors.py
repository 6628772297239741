from typing import Optional
from pydantic import BaseModel

class ErrorResponse(BaseModel):
    detail: str
    code: Optional[str] = None

class BackendError(Exception):
    """The remote backend could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

class NoDataFoundError(Exception):
    """An upload produced no rows after every fallback."""

    def __init__(self, message: str = "No data found in uploaded file"):
        super().__init__(message)
        self.message = message
