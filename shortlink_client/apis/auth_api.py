from __future__ import annotations

import logging
from typing import Any

from shortlink_client.http import AuthenticatedHttpClient
from shortlink_client.models import REFRESH_TOKEN_KEY, Credentials, TokenPair

logger = logging.getLogger(__name__)

AUTH_PATH = "/auth"
LOGIN_PATH = "/auth/login"
LOGOUT_PATH = "/auth/logout"


class AuthApi:
    def __init__(self, http_client: AuthenticatedHttpClient):
        self._http_client = http_client

    def login(self, email: str, password: str) -> TokenPair | None:
        """Sign in and keep the returned token pair in the token store."""
        credentials = Credentials(email=email, password=password)
        response = self._http_client.execute(
            LOGIN_PATH,
            method="POST",
            body=credentials.to_payload(),
        )
        if response is None:
            return None

        tokens = TokenPair.from_payload(response)
        if tokens is None:
            raise ValueError("Login response did not include an access and refresh token")

        self._http_client.token_store.replace(tokens.to_store_values())
        logger.info("Signed in")
        return tokens

    def register(self, email: str, password: str) -> Any:
        credentials = Credentials(email=email, password=password)
        return self._http_client.execute(
            AUTH_PATH,
            method="POST",
            body=credentials.to_payload(),
        )

    def logout(self, refresh_token: str) -> Any:
        return self._http_client.execute(
            LOGOUT_PATH,
            method="POST",
            body={REFRESH_TOKEN_KEY: refresh_token},
        )
