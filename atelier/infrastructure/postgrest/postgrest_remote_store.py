"""PostgREST remote store — implements the RemoteStore port over HTTP.

Talks to a PostgREST endpoint (for example Supabase's ``/rest/v1``) with
httpx. Upserts use ``Prefer: resolution=merge-duplicates``; deletions use
the ``eq.`` and ``in.(...)`` filter operators. Unless the remote schema is
declared to carry the extended columns, they are stripped from outgoing
rows so a base-shape table does not reject the write.
"""

import logging
from typing import Any

import httpx

from atelier.application.interfaces import RemoteStore, Row
from atelier.application.schemas.remote_rows import EXTENDED_COLUMNS
from atelier.domain.exceptions import RemoteStoreError

logger = logging.getLogger(__name__)


class PostgrestRemoteStore(RemoteStore):
    """Infrastructure adapter — one HTTP request per port call.

    An injected ``http_client`` is reused and left open; otherwise a
    short-lived client is created per call.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        *,
        extended_columns: bool = False,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._http_client = http_client
        self._timeout = timeout
        self._extended_columns = extended_columns

    @property
    def backend_name(self) -> str:
        return "postgrest"

    def _get_headers(self, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _outbound(self, table: str, rows: list[Row]) -> list[Row]:
        dropped = EXTENDED_COLUMNS.get(table)
        if self._extended_columns or not dropped:
            return rows
        return [{k: v for k, v in row.items() if k not in dropped} for row in rows]

    def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _request(
        self,
        method: str,
        table: str,
        operation: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> httpx.Response:
        url = f"{self._base_url}/{table}"
        client = self._get_client()
        should_close = self._http_client is None
        try:
            response = await client.request(
                method, url, params=params, json=json, headers=self._get_headers(prefer)
            )
        except httpx.HTTPError as exc:
            raise RemoteStoreError(
                self.backend_name, f"{operation} {table}", str(exc) or type(exc).__name__
            ) from exc
        finally:
            if should_close:
                await client.aclose()

        if response.status_code >= 400:
            self._raise_store_error(response, f"{operation} {table}")
        return response

    def _raise_store_error(self, response: httpx.Response, operation: str) -> None:
        """Raise RemoteStoreError from a failed PostgREST response."""
        try:
            data = response.json()
            message = data.get("message") or response.text
        except Exception:
            message = response.text
        raise RemoteStoreError(
            self.backend_name, operation, f"HTTP {response.status_code}: {message}"
        )

    async def fetch_rows(self, table: str) -> list[Row]:
        response = await self._request("GET", table, "fetch", params={"select": "*"})
        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteStoreError(self.backend_name, f"fetch {table}", "invalid JSON") from exc
        if not isinstance(data, list):
            raise RemoteStoreError(self.backend_name, f"fetch {table}", "expected a JSON array")
        return [row for row in data if isinstance(row, dict)]

    async def upsert_rows(self, table: str, rows: list[Row]) -> None:
        if not rows:
            return
        await self._request(
            "POST",
            table,
            "upsert",
            json=self._outbound(table, rows),
            prefer="resolution=merge-duplicates,return=minimal",
        )
        logger.debug("Upserted %d row(s) into %s", len(rows), table)

    async def replace_children(
        self, table: str, parent_column: str, parent_id: str, rows: list[Row]
    ) -> None:
        await self._request(
            "DELETE", table, "replace", params={parent_column: f"eq.{parent_id}"}
        )
        if rows:
            payload = [{**row, parent_column: parent_id} for row in self._outbound(table, rows)]
            await self._request("POST", table, "replace", json=payload, prefer="return=minimal")

    async def delete_rows(self, table: str, ids: list[str]) -> None:
        if not ids:
            return
        quoted = ",".join(f'"{i}"' for i in ids)
        await self._request("DELETE", table, "delete", params={"id": f"in.({quoted})"})
