"""API key check for FastAPI routes."""

import secrets
from typing import Optional

from fastapi import Request, Security
from fastapi.security import APIKeyHeader

from .api_errors import AuthenticationError, ServerError


api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(
    request: Request, api_key: Optional[str] = Security(api_key_header)
) -> str:
    """Verify the X-API-Key header against the running engine's config.

    Raises:
        AuthenticationError: 403 if API key is invalid or missing
        ServerError: 500 if no API key is configured
    """
    if not api_key:
        raise AuthenticationError("Missing API key. Please provide X-API-Key header")

    expected_key = request.app.state.engine.config.api_key
    if not expected_key:
        raise ServerError("API key not configured. Set [api] key in config.toml")

    if not secrets.compare_digest(api_key, expected_key):
        raise AuthenticationError("Invalid API key")

    return api_key
