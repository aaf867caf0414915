"""Remote storage on a hosted Postgres exposed through a PostgREST API.

Talks to the REST interface Supabase puts in front of its tables, so each
collection maps to a table of the same name.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..errors import OperationFailed
from ..models import FACTS, SUBMISSIONS
from .base import FactStorage, Record

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

# Server-side filter applied to every read of a collection
APPROVED_FILTER = {
    FACTS: "eq.true",
    SUBMISSIONS: "eq.false",
}


class RemoteFactStorage(FactStorage):
    """Fact collections stored as tables behind a PostgREST endpoint.

    Reads are filtered on ``approved`` server-side and ordered by
    ``createdAt`` descending. Every write is its own HTTP call, so
    ``transaction()`` cannot make a group of writes atomic.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize with the project URL and its anon key.

        Args:
            url: Base project URL, e.g. https://xyz.supabase.co.
            api_key: Key sent as both apikey and bearer token.
            timeout: Timeout in seconds for each request.
            client: Optional preconfigured client (used by tests).
        """
        if not url:
            raise ValueError("Remote storage requires a URL")

        self.base_url = url.rstrip("/") + "/rest/v1"
        self._client = client or httpx.Client(timeout=timeout)
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    def _table(self, collection: str) -> str:
        if collection not in APPROVED_FILTER:
            raise ValueError(f"Unknown collection: {collection}")
        return collection

    def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> list[Record]:
        """Send a request and return the decoded rows.

        Raises:
            OperationFailed: On transport errors and non-2xx responses.
        """
        try:
            response = self._client.request(
                method,
                f"{self.base_url}/{table}",
                params=params,
                json=json,
                headers={**self._headers, **(headers or {})},
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise OperationFailed(f"{method} {table} timed out") from e
        except httpx.HTTPStatusError as e:
            raise OperationFailed(
                f"{method} {table} failed: HTTP {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise OperationFailed(f"{method} {table} failed: {e}") from e

        if not response.content:
            return []
        try:
            data = response.json()
        except ValueError as e:
            raise OperationFailed(f"{method} {table} returned invalid JSON") from e
        if isinstance(data, dict):
            return [data]
        return data

    def _read(self, collection: str) -> list[Record]:
        table = self._table(collection)
        return self._request(
            "GET",
            table,
            params={
                "select": "*",
                "approved": APPROVED_FILTER[table],
                "order": "createdAt.desc",
            },
        )

    def get(self, collection: str, record_id: str) -> Record | None:
        table = self._table(collection)
        try:
            rows = self._request(
                "GET",
                table,
                params={
                    "select": "*",
                    "id": f"eq.{record_id}",
                    "approved": APPROVED_FILTER[table],
                },
            )
        except OperationFailed as e:
            logger.error("Failed to read %s/%s: %s", table, record_id, e)
            return None
        return rows[0] if rows else None

    def put(self, collection: str, records: list[Record]) -> None:
        """Replace the collection: upsert every record, delete the rest."""
        table = self._table(collection)
        if records:
            self._request(
                "POST",
                table,
                json=records,
                headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
            )

        params = {"approved": APPROVED_FILTER[table]}
        ids = [str(r["id"]) for r in records if "id" in r]
        if ids:
            params["id"] = f"not.in.({','.join(ids)})"
        self._request("DELETE", table, params=params)

    def insert(self, collection: str, record: Record) -> Record:
        table = self._table(collection)
        rows = self._request("POST", table, json=[record])
        return rows[0] if rows else record

    def update(self, collection: str, record_id: str, changes: Record) -> Record | None:
        table = self._table(collection)
        rows = self._request(
            "PATCH",
            table,
            params={"id": f"eq.{record_id}"},
            json=changes,
        )
        return rows[0] if rows else None

    def delete(self, collection: str, record_id: str) -> bool:
        table = self._table(collection)
        rows = self._request("DELETE", table, params={"id": f"eq.{record_id}"})
        return len(rows) > 0

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()
