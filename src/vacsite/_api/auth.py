"""Password sign-in against the backend's auth service."""

from __future__ import annotations

import logging
from typing import Any

from vacsite._constants import AUTH_TOKEN_PATH
from vacsite._transport import Transport
from vacsite.exceptions import AuthenticationError
from vacsite.session import AdminSession

_logger = logging.getLogger(__name__)


def parse_token_response(data: Any) -> AdminSession:
    """Build an :class:`AdminSession` from the token grant reply."""
    if not isinstance(data, dict):
        raise AuthenticationError("Sign-in reply is not an object")
    access_token = data.get("access_token")
    user = data.get("user")
    if not isinstance(access_token, str) or not access_token or not isinstance(user, dict):
        raise AuthenticationError("Sign-in reply is missing access_token or user")
    expires_in = data.get("expires_in")
    return AdminSession(
        access_token=access_token,
        refresh_token=str(data.get("refresh_token") or ""),
        user_id=str(user.get("id") or ""),
        email=str(user.get("email") or ""),
        expires_in=float(expires_in) if isinstance(expires_in, (int, float)) else 3600.0,
    )


async def sign_in_with_password(transport: Transport, email: str, password: str) -> AdminSession:
    """Exchange admin credentials for an access token."""
    if not email.strip() or not password:
        raise AuthenticationError("Email and password are required")
    response = await transport.request(
        "POST",
        AUTH_TOKEN_PATH,
        params={"grant_type": "password"},
        json_body={"email": email.strip(), "password": password},
    )
    if not response.ok:
        data = response.data if isinstance(response.data, dict) else {}
        message = data.get("error_description") or data.get("msg") or data.get("message") or "sign-in rejected"
        _logger.debug("Sign-in rejected status=%s", response.status)
        raise AuthenticationError(f"Sign-in failed: {message}")
    return parse_token_response(response.data)
