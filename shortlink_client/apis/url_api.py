from __future__ import annotations

from typing import Any
from urllib.parse import quote

from shortlink_client.http import AuthenticatedHttpClient
from shortlink_client.models import ShortUrl

URL_PATH = "/url"
URL_LIST_PATH = "/url/urls"


class UrlApi:
    def __init__(self, http_client: AuthenticatedHttpClient):
        self._http_client = http_client

    def list_urls(self) -> list[ShortUrl]:
        response = self._http_client.execute(
            URL_LIST_PATH,
            headers=self._http_client.authorization_header(),
        )
        if not response:
            return []
        return [ShortUrl.from_payload(item) for item in response]

    def create_url(self, url: str, alias: str | None = None) -> ShortUrl | None:
        response = self._http_client.execute(
            URL_PATH,
            method="POST",
            headers=self._http_client.authorization_header(),
            body={"url": url, "alias": alias},
        )
        if response is None:
            return None
        return ShortUrl.from_payload(response)

    def update_url(self, url_id: Any, new_url: str) -> Any:
        return self._http_client.execute(
            URL_PATH,
            method="PATCH",
            headers=self._http_client.authorization_header(),
            body={"urlId": url_id, "newUrl": new_url},
        )

    def delete_url(self, url_id: Any) -> Any:
        return self._http_client.execute(
            URL_PATH,
            method="DELETE",
            headers=self._http_client.authorization_header(),
            body={"urlId": url_id},
        )

    def resolve_alias(self, alias: str) -> str | None:
        """Return the destination a short alias points to."""
        alias = alias.strip().lstrip("/")
        if not alias:
            raise ValueError("Alias is required")

        response = self._http_client.request(
            f"{URL_PATH}/{quote(alias, safe='')}",
            headers=self._http_client.authorization_header(),
        )
        if response is None:
            return None
        return response.headers.get("Location") or None
