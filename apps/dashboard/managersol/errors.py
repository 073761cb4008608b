"""Application exception types."""

from managersol.schemas.error import ErrorResponse


class ApiError(Exception):
    """Structured API error that maps directly to contract error payloads."""

    def __init__(self, status_code: int, code: str, message: str, details: dict | None = None) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(code=code, message=message, details=details)
        super().__init__(message)


class RedirectRequired(Exception):
    """Raised by route guards; rendered as a 303 redirect before any handler runs."""

    def __init__(self, target: str, *, clear_session: bool = False) -> None:
        self.target = target
        self.clear_session = clear_session
        super().__init__(target)


__all__ = ["ApiError", "RedirectRequired"]
