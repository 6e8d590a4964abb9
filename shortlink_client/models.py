from __future__ import annotations

from dataclasses import dataclass
from typing import Any


ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str

    def to_payload(self) -> dict[str, str]:
        return {"email": self.email, "password": self.password}


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str

    @staticmethod
    def from_payload(payload: Any) -> "TokenPair | None":
        if not isinstance(payload, dict):
            return None
        access_token = payload.get(ACCESS_TOKEN_KEY)
        refresh_token = payload.get(REFRESH_TOKEN_KEY)
        if not access_token or not refresh_token:
            return None
        return TokenPair(access_token=str(access_token), refresh_token=str(refresh_token))

    def to_store_values(self) -> dict[str, str]:
        return {
            ACCESS_TOKEN_KEY: self.access_token,
            REFRESH_TOKEN_KEY: self.refresh_token,
        }


@dataclass(frozen=True)
class ShortUrl:
    id: Any
    url: str
    alias: str

    @staticmethod
    def from_payload(payload: dict[str, Any]) -> "ShortUrl":
        return ShortUrl(
            id=payload.get("id"),
            url=str(payload.get("url", "")),
            alias=str(payload.get("alias", "")),
        )


@dataclass(frozen=True)
class AuthState:
    is_signed_in: bool
