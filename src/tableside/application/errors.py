from __future__ import annotations

import httpx

from tableside.application.ports.token_store import TokenStore

AUTH_REQUIRED_MESSAGE = "Authentication required"


class AuthenticationRequiredError(Exception):
    def __init__(self, message: str = AUTH_REQUIRED_MESSAGE) -> None:
        super().__init__(message)


def require_token(token_store: TokenStore) -> str:
    token = token_store.get_token()
    if not token:
        raise AuthenticationRequiredError()
    return token


def http_error_message(exc: httpx.HTTPError, fallback: str) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            body = exc.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
    return fallback
