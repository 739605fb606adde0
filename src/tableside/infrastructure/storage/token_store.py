from __future__ import annotations

import redis

from tableside.application.ports.token_store import TokenStore
from tableside.infrastructure.storage.redis_client import get_redis_client

DEFAULT_TOKEN_KEY = "auth_token"


class InMemoryTokenStore(TokenStore):
    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def get_token(self) -> str | None:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token

    def clear_token(self) -> None:
        self._token = None


class RedisTokenStore(TokenStore):
    def __init__(
        self,
        redis_url: str | None = None,
        key: str = DEFAULT_TOKEN_KEY,
        timeout_seconds: float = 1.0,
        client: redis.Redis | None = None,
    ) -> None:
        if client is None and not redis_url:
            raise RuntimeError("REDIS_URL is not set")
        self._redis_url = redis_url
        self._key = key
        self._timeout_seconds = timeout_seconds
        self._client = client

    def _redis(self) -> redis.Redis:
        if self._client is not None:
            return self._client
        return get_redis_client(str(self._redis_url), timeout_seconds=self._timeout_seconds)

    def get_token(self) -> str | None:
        value = self._redis().get(self._key)
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    def set_token(self, token: str) -> None:
        self._redis().set(name=self._key, value=token)

    def clear_token(self) -> None:
        self._redis().delete(self._key)
