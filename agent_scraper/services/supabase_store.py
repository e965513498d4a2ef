import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from agent_scraper.exceptions.custom import RateLimitError, StorageError
from agent_scraper.schemas.record import StoredRecord

logger = logging.getLogger(__name__)

TABLE = "scraped_agents"


class SupabaseStore:
    """PostgREST access to the scraped_agents table, keyed by source_url."""

    def __init__(self, client: httpx.AsyncClient, base_url: str, service_key: str):
        self._client = client
        self._table_url = f"{base_url.rstrip('/')}/rest/v1/{TABLE}"
        self._headers = {
            "apikey": service_key,
            "Authorization": f"Bearer {service_key}",
            "Content-Type": "application/json",
        }

    def _check(self, resp: httpx.Response) -> None:
        if resp.status_code == 429:
            raise RateLimitError("Supabase")
        if resp.status_code >= 400:
            raise StorageError(resp.text, status_code=resp.status_code)

    async def get_by_source_url(self, source_url: str) -> StoredRecord | None:
        resp = await self._client.get(
            self._table_url,
            params={"source_url": f"eq.{source_url}", "select": "*", "limit": "1"},
            headers=self._headers,
        )
        self._check(resp)

        rows = resp.json()
        if not rows:
            return None
        return StoredRecord(**rows[0])

    async def upsert(self, values: dict[str, Any]) -> str:
        """Insert or update in one statement; conflicts resolve on source_url."""
        row = {**values, "updated_at": datetime.now(timezone.utc).isoformat()}
        resp = await self._client.post(
            self._table_url,
            params={"on_conflict": "source_url", "select": "id"},
            json=row,
            headers={
                **self._headers,
                "Prefer": "resolution=merge-duplicates,return=representation",
            },
        )
        self._check(resp)

        rows = resp.json()
        if not rows:
            raise StorageError("Upsert returned no rows", status_code=resp.status_code)
        record_id = str(rows[0]["id"])
        logger.info("Saved profile %s (id=%s)", values.get("source_url"), record_id)
        return record_id

    async def list_recent(self, limit: int = 50) -> list[StoredRecord]:
        resp = await self._client.get(
            self._table_url,
            params={"select": "*", "order": "updated_at.desc", "limit": str(limit)},
            headers=self._headers,
        )
        self._check(resp)
        return [StoredRecord(**row) for row in resp.json()]

    async def delete(self, record_id: str) -> None:
        resp = await self._client.delete(
            self._table_url,
            params={"id": f"eq.{record_id}"},
            headers=self._headers,
        )
        self._check(resp)
        logger.info("Deleted record %s", record_id)
