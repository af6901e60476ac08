"""Store implementation for a hosted PostgREST-style database service.

Tables live under ``/rest/v1/<table>``; filters are query parameters
(``col=eq.value``, ``col=in.(a,b)``) and writes ask for the affected rows
back with ``Prefer: return=representation``.
"""
import logging
from typing import Any, Optional, Sequence

import httpx
from pydantic_core import to_jsonable_python

from event_admin.store.base import Filter, Store, StoreError

logger = logging.getLogger(__name__)

REST_BASE_PATH = "/rest/v1"
DEFAULT_TIMEOUT = 30.0  # seconds


def _format_value(value: Any) -> str:
    value = to_jsonable_python(value)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _quote_in_member(value: Any) -> str:
    text = _format_value(value)
    if any(ch in text for ch in ',()"\\'):
        return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return text


def build_params(filters: Sequence[Filter]) -> list[tuple[str, str]]:
    """Translate store filters into PostgREST query parameters."""
    params = []
    for f in filters:
        if f.op == "eq":
            if f.value is None:
                params.append((f.column, "is.null"))
            else:
                params.append((f.column, f"eq.{_format_value(f.value)}"))
        elif f.op == "in":
            members = ",".join(_quote_in_member(v) for v in f.value)
            params.append((f.column, f"in.({members})"))
        else:
            raise StoreError(f"Unsupported filter operator '{f.op}'")
    return params


class RestStore(Store):
    """
    HTTP client for a PostgREST endpoint.

    Attributes:
        base_url: Root URL of the hosted project (without ``/rest/v1``)
        api_key: Service key sent both as ``apikey`` and bearer token
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        if not base_url:
            raise ValueError("base_url is required")

        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = client or httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
        )
        if client is not None:
            self._client.headers.update(headers)

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, table: str, *, params=None, json=None, prefer=None) -> httpx.Response:
        headers = {"Prefer": prefer} if prefer else None
        try:
            response = self._client.request(
                method,
                f"{REST_BASE_PATH}/{table}",
                params=params,
                json=json,
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.warning("Store request %s %s failed: %s", method, table, e)
            raise StoreError(f"Failed to reach store: {e}", table=table) from e

        if response.is_error:
            try:
                body = response.json()
                message = body.get("message") or body.get("error") or response.text
            except ValueError:
                message = response.text or f"HTTP {response.status_code}"
            logger.warning("Store request %s %s returned %d: %s", method, table, response.status_code, message)
            raise StoreError(message, table=table)
        return response

    def select(self, table: str, filters: Sequence[Filter] = ()) -> list[dict[str, Any]]:
        params = [("select", "*")] + build_params(filters)
        return self._request("GET", table, params=params).json()

    def insert(self, table: str, rows: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        if not rows:
            return []
        response = self._request(
            "POST", table, json=to_jsonable_python(list(rows)), prefer="return=representation"
        )
        return response.json()

    def update(self, table: str, patch: dict[str, Any], filters: Sequence[Filter]) -> list[dict[str, Any]]:
        if not filters:
            raise StoreError("Refusing to update without filters", table=table)
        response = self._request(
            "PATCH", table, params=build_params(filters), json=to_jsonable_python(patch),
            prefer="return=representation",
        )
        return response.json()

    def delete(self, table: str, filters: Sequence[Filter]) -> int:
        if not filters:
            raise StoreError("Refusing to delete without filters", table=table)
        response = self._request(
            "DELETE", table, params=build_params(filters), prefer="return=representation"
        )
        return len(response.json())
