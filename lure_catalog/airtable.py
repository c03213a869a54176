"""Airtable work queue: lure URL records and the maker table they link to."""
from __future__ import annotations
import time
from typing import Any, Dict, List, Optional

import requests

from .creds import require_secret
from .fetch import _log

API_BASE = "https://api.airtable.com/v0"

PENDING = "未処理"
PROCESSING = "処理中"
DONE = "登録完了"
ERROR = "エラー"

# lure URL table
F_NAME = "ルアー名"
F_URL = "URL"
F_MAKER = "メーカー"
F_STATUS = "ステータス"
F_NOTE = "備考"
# maker table
F_MAKER_NAME = "メーカー名"
F_MAKER_SLUG = "Slug"

NOTE_LIMIT = 500


class AirtableClient:
    def __init__(self, pat: str, base_id: str, lure_table: str, maker_table: str,
                 session: requests.Session | None = None, batch_size: int = 10,
                 batch_delay_ms: int = 250, page_delay_ms: int = 200, timeout: float = 30):
        self.base_id = base_id
        self.lure_table = lure_table
        self.maker_table = maker_table
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {pat}",
            "Content-Type": "application/json",
        })
        self.batch_size = min(int(batch_size), 10)
        self.batch_delay = batch_delay_ms / 1000.0
        self.page_delay = page_delay_ms / 1000.0
        self.timeout = timeout
        self._makers: Dict[str, Dict[str, Any]] = {}

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "AirtableClient":
        return cls(
            require_secret("AIRTABLE_PAT"),
            require_secret("AIRTABLE_BASE_ID"),
            require_secret("AIRTABLE_LURE_URL_TABLE_ID"),
            require_secret("AIRTABLE_MAKER_TABLE_ID"),
            batch_size=int(settings.get("airtable_batch_size", 10)),
            batch_delay_ms=int(settings.get("airtable_batch_delay_ms", 250)),
            page_delay_ms=int(settings.get("airtable_page_delay_ms", 200)),
        )

    def _url(self, table: str, record_id: str = "") -> str:
        url = f"{API_BASE}/{self.base_id}/{table}"
        return f"{url}/{record_id}" if record_id else url

    def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        resp.raise_for_status()
        return resp.json() if resp.content else {}

    def fetch_by_status(self, status: str) -> List[Dict[str, Any]]:
        """All lure records whose ステータス equals status, following offset pages."""
        out: List[Dict[str, Any]] = []
        offset: Optional[str] = None
        while True:
            params = {"filterByFormula": f"{{{F_STATUS}}}='{status}'"}
            if offset:
                params["offset"] = offset
            data = self._request("GET", self._url(self.lure_table), params=params)
            out.extend(data.get("records") or [])
            offset = data.get("offset")
            if not offset:
                break
            _log("airtable", f"fetched {len(out)} record(s) so far, loading next page")
            time.sleep(self.page_delay)
        return out

    def fetch_pending(self) -> List[Dict[str, Any]]:
        records = self.fetch_by_status(PENDING)
        _log("airtable", f"found {len(records)} pending record(s)")
        return records

    def get_maker(self, record_id: str) -> Dict[str, Any]:
        cached = self._makers.get(record_id)
        if cached is not None:
            return cached
        data = self._request("GET", self._url(self.maker_table, record_id))
        fields = data.get("fields") or {}
        _log("airtable", f"maker: {fields.get(F_MAKER_NAME, '')} (slug: {fields.get(F_MAKER_SLUG, '')})")
        self._makers[record_id] = data
        return data

    def update_status(self, record_id: str, status: str, note: str | None = None) -> None:
        _log("airtable", f"{record_id} -> {status}")
        fields = {F_STATUS: status}
        if note is not None:
            fields[F_NOTE] = note[:NOTE_LIMIT]
        self._request("PATCH", self._url(self.lure_table, record_id), json={"fields": fields})

    def _batched(self, method: str, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for start in range(0, len(records), self.batch_size):
            if start:
                time.sleep(self.batch_delay)
            chunk = records[start:start + self.batch_size]
            data = self._request(method, self._url(self.lure_table), json={"records": chunk})
            out.extend(data.get("records") or [])
        return out

    def update_records(self, updates: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """updates: [{"id": ..., "fields": {...}}], sent in batches of at most 10."""
        return self._batched("PATCH", updates)

    def create_records(self, fields_list: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return self._batched("POST", [{"fields": f} for f in fields_list])

    def close(self) -> None:
        self.session.close()
