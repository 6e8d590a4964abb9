from __future__ import annotations

from typing import Any


class ShortlinkError(RuntimeError):
    pass


class ApiError(ShortlinkError):
    def __init__(self, status_code: int, message: str, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload


class TokenRefreshError(ShortlinkError):
    pass


def error_message(error: BaseException) -> str:
    """Text suitable for showing to a user.

    Prefers the backend's ``message`` field and falls back to the error's own text.
    """
    payload = getattr(error, "payload", None)
    if isinstance(payload, dict):
        message = str(payload.get("message") or "").strip()
        if message:
            return message
    return str(error)
