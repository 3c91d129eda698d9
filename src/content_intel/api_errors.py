"""API errors rendered in the standard response envelope."""

from typing import Any, Dict

from fastapi import HTTPException


def error_envelope(message: str) -> Dict[str, Any]:
    return {"success": False, "message": message, "data": None}


class APIError(HTTPException):
    """Base for errors raised by route handlers and dependencies."""

    status = 500

    def __init__(self, message: str):
        super().__init__(status_code=self.status, detail=message)
        self.message = message

    def envelope(self) -> Dict[str, Any]:
        return error_envelope(self.message)


class ValidationError(APIError):
    """422 - request is well-formed but its values are unusable."""

    status = 422


class AuthenticationError(APIError):
    """403 - missing or wrong X-API-Key."""

    status = 403

    def __init__(self, message: str = "Invalid API key"):
        super().__init__(message)


class ServerError(APIError):
    """500 - the server is misconfigured."""
