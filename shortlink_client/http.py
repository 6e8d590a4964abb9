from __future__ import annotations

from concurrent.futures import Future
import json
import logging
import threading
from typing import Any, Callable, Mapping

import requests

from shortlink_client.config import AppSettings
from shortlink_client.errors import ApiError, TokenRefreshError
from shortlink_client.models import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, TokenPair
from shortlink_client.token_store import TokenStore

logger = logging.getLogger(__name__)

UPDATE_TOKEN_PATH = "/auth/updateToken"


class AuthenticatedHttpClient:
    """Sends requests to the shortener backend on behalf of the signed-in user.

    A request rejected with 401 gets exactly one refresh-and-resend cycle. When the
    session cannot be recovered the injected ``session_terminator`` runs and the
    call returns ``None`` instead of raising.
    """

    def __init__(
        self,
        settings: AppSettings,
        token_store: TokenStore,
        session_terminator: Callable[[], None],
        session: requests.Session | None = None,
    ):
        self._settings = settings
        self._token_store = token_store
        self._session_terminator = session_terminator
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json"})

        self._refresh_lock = threading.Lock()
        self._pending_refresh: Future | None = None

    @property
    def token_store(self) -> TokenStore:
        return self._token_store

    @property
    def session_terminator(self) -> Callable[[], None]:
        return self._session_terminator

    def authorization_header(self) -> dict[str, str]:
        access_token = self._token_store.get(ACCESS_TOKEN_KEY) or ""
        return {"Authorization": f"Bearer {access_token}"}

    def execute(
        self,
        endpoint: str,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        response = self.request(endpoint, method=method, headers=headers, body=body)
        if response is None or not self._has_body(response):
            return None
        return response.json()

    def request(
        self,
        endpoint: str,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> requests.Response | None:
        """Like ``execute`` but hands back the successful response untouched.

        Returns ``None`` when the session was terminated.
        """
        method = method.upper()
        url = f"{self._settings.base_url}{endpoint}"
        request_headers = {"Content-Type": "application/json"}
        if headers:
            request_headers.update(headers)
        data = self._serialize_body(body)

        response = self._send(method, url, request_headers, data)
        logger.debug("%s %s -> %s", method, endpoint, response.status_code)
        if self._is_success(response, method):
            return response

        if response.status_code == 401:
            rejected_token = self._bearer_token(request_headers)
            access_token = self._recover_session(rejected_token)
            if access_token is None:
                return None

            # Final attempt: a second rejection is reported, not refreshed again.
            request_headers["Authorization"] = f"Bearer {access_token}"
            response = self._send(method, url, request_headers, data)
            logger.debug("%s %s -> %s (resent)", method, endpoint, response.status_code)
            if self._is_success(response, method):
                return response

        raise self._build_api_error(response)

    def refresh_access_token(self, refresh_token: str) -> TokenPair:
        response = self._session.request(
            "PATCH",
            f"{self._settings.base_url}{UPDATE_TOKEN_PATH}",
            headers={"Content-Type": "application/json"},
            data=json.dumps({REFRESH_TOKEN_KEY: refresh_token}),
            timeout=self._settings.timeout_seconds,
        )

        if not response.ok:
            raise TokenRefreshError(f"Failed to refresh token: HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise TokenRefreshError("Invalid token response") from exc

        tokens = TokenPair.from_payload(payload)
        if tokens is None:
            raise TokenRefreshError("Invalid token response")

        self._token_store.replace(tokens.to_store_values())
        logger.info("Access token refreshed")
        return tokens

    def _send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        data: str | bytes | None,
    ) -> requests.Response:
        return self._session.request(
            method,
            url,
            headers=headers,
            data=data,
            timeout=self._settings.timeout_seconds,
        )

    def _recover_session(self, rejected_token: str | None) -> str | None:
        """Return the access token to resend with, or ``None`` once the session is ended."""
        try:
            access_token = self._refresh_single_flight(rejected_token)
        except (TokenRefreshError, requests.RequestException) as exc:
            logger.warning("Token refresh failed (%s); ending session", exc)
            self._session_terminator()
            return None

        if access_token is None:
            logger.warning("Request unauthorized and no refresh token is stored; ending session")
            self._session_terminator()
        return access_token

    def _refresh_single_flight(self, rejected_token: str | None) -> str | None:
        # Tokens are read under the lock so a refresh that just finished is
        # never repeated with its already rotated refresh token.
        with self._refresh_lock:
            pending = self._pending_refresh
            is_owner = pending is None
            if is_owner:
                access_token = self._token_store.get(ACCESS_TOKEN_KEY)
                refresh_token = self._token_store.get(REFRESH_TOKEN_KEY)
                if rejected_token is not None and access_token and access_token != rejected_token:
                    logger.debug("Access token was renewed by another request; reusing it")
                    return access_token
                if not refresh_token:
                    return None
                pending = Future()
                self._pending_refresh = pending

        if not is_owner:
            logger.debug("Waiting for in-flight token refresh")
            return pending.result().access_token

        try:
            tokens = self.refresh_access_token(refresh_token)
        except BaseException as exc:
            pending.set_exception(exc)
            raise
        else:
            pending.set_result(tokens)
            return tokens.access_token
        finally:
            with self._refresh_lock:
                self._pending_refresh = None

    @staticmethod
    def _bearer_token(headers: Mapping[str, str]) -> str | None:
        for name, value in headers.items():
            if name.lower() == "authorization" and value.startswith("Bearer "):
                return value[len("Bearer "):]
        return None

    @staticmethod
    def _serialize_body(body: Any) -> str | bytes | None:
        if body is None or isinstance(body, (str, bytes)):
            return body
        return json.dumps(body)

    @staticmethod
    def _is_success(response: requests.Response, method: str) -> bool:
        return response.ok or (response.status_code == 204 and method == "DELETE")

    @staticmethod
    def _has_body(response: requests.Response) -> bool:
        content_length = (response.headers.get("Content-Length") or "").strip()
        return content_length not in ("", "0")

    @staticmethod
    def _build_api_error(response: requests.Response) -> ApiError:
        try:
            payload = response.json() if response.content else None
        except ValueError:
            payload = None

        return ApiError(
            status_code=response.status_code,
            message=f"HTTP {response.status_code}: {response.reason}",
            payload=payload,
        )
