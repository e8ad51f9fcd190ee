"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from teenlife.auth.jwt import verify_token
from teenlife.exceptions import AuthenticationError

# auto_error=False: a missing header is reported through AuthenticationError
# (401 + our error body) instead of FastAPI's bare 403.
_bearer = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
) -> str:
    """
    Resolve the caller's user id from the bearer token.

    Raises AuthenticationError (401) when the header is missing or the token
    does not verify.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No token provided")
    try:
        payload = verify_token(credentials.credentials)
    except jwt.InvalidTokenError as e:
        raise AuthenticationError(str(e) or "Invalid token") from e
    return str(payload["sub"])
