from __future__ import annotations

from typing import Any, Callable

from shortlink_client.apis import AuthApi, UrlApi
from shortlink_client.config import AppSettings
from shortlink_client.http import AuthenticatedHttpClient
from shortlink_client.logging_utils import configure_logging
from shortlink_client.models import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, AuthState, ShortUrl
from shortlink_client.token_store import PersistedTokenStore, TokenStore, build_session_terminator


class ShortlinkService:
    def __init__(
        self,
        http_client: AuthenticatedHttpClient,
        auth_api: AuthApi,
        url_api: UrlApi,
    ):
        self._token_store = http_client.token_store
        self._session_terminator = http_client.session_terminator
        self._auth_api = auth_api
        self._url_api = url_api

    def auth_state(self) -> AuthState:
        has_tokens = bool(
            self._token_store.get(ACCESS_TOKEN_KEY) and self._token_store.get(REFRESH_TOKEN_KEY)
        )
        return AuthState(is_signed_in=has_tokens)

    def sign_in(self, email: str, password: str) -> AuthState:
        self._auth_api.login(email, password)
        return self.auth_state()

    def register(self, email: str, password: str) -> Any:
        return self._auth_api.register(email, password)

    def sign_out(self) -> None:
        """End the session locally, telling the backend first when possible.

        Local tokens are cleared even if the backend call fails; the failure is
        still raised afterwards.
        """
        access_token = self._token_store.get(ACCESS_TOKEN_KEY)
        refresh_token = self._token_store.get(REFRESH_TOKEN_KEY)
        if not access_token or not refresh_token:
            self._session_terminator()
            return

        try:
            self._auth_api.logout(refresh_token)
        finally:
            self._session_terminator()

    def list_urls(self) -> list[ShortUrl]:
        return self._url_api.list_urls()

    def create_url(self, url: str, alias: str | None = None) -> ShortUrl | None:
        alias = (alias or "").strip() or None
        return self._url_api.create_url(url, alias)

    def update_url(self, url_id: Any, new_url: str) -> Any:
        return self._url_api.update_url(url_id, new_url)

    def delete_url(self, url_id: Any) -> Any:
        return self._url_api.delete_url(url_id)

    def resolve_alias(self, alias: str) -> str | None:
        return self._url_api.resolve_alias(alias)


def build_service(
    settings: AppSettings,
    on_logged_out: Callable[[], None] | None = None,
    token_store: TokenStore | None = None,
) -> ShortlinkService:
    configure_logging(settings.log_level)
    if token_store is None:
        token_store = PersistedTokenStore(settings.token_store_path)
    session_terminator = build_session_terminator(token_store, on_logged_out)
    http_client = AuthenticatedHttpClient(settings, token_store, session_terminator)
    return ShortlinkService(
        http_client=http_client,
        auth_api=AuthApi(http_client),
        url_api=UrlApi(http_client),
    )
