"""Supabase `lures` table: one row per color x weight of a scraped product."""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional

from supabase import Client, create_client

from .creds import require_secret
from .fetch import _log
from .models import LureRecord

TABLE = "lures"


def rows_for(record: LureRecord, image_map: Dict[str, str] | None = None) -> List[Dict[str, Any]]:
    """The color x weight product; a record without weights gets one null-weight row per color."""
    image_map = image_map or {}
    weights: List[Optional[float]] = list(record.weights) or [None]
    rows = []
    for color in record.colors:
        image = image_map.get(color.name)
        for weight in weights:
            rows.append({
                "name": record.name,
                "name_kana": record.name_kana or record.name,
                "slug": record.slug,
                "manufacturer": record.manufacturer,
                "manufacturer_slug": record.manufacturer_slug,
                "type": record.type,
                "target_fish": list(record.target_fish),
                "price": record.price,
                "description": record.description or None,
                "images": [image] if image else None,
                "color_name": color.name,
                "weight": weight,
                "length": record.length,
                "source_url": record.source_url,
                "is_limited": False,
                "is_discontinued": False,
            })
    return rows


class LureStore:
    def __init__(self, client: Client, page_size: int = 1000):
        self.client = client
        self.page_size = page_size

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "LureStore":
        client = create_client(require_secret("SUPABASE_URL"), require_secret("SUPABASE_SERVICE_ROLE_KEY"))
        return cls(client, page_size=int(settings.get("supabase_page_size", 1000)))

    def exists(self, row: Dict[str, Any]) -> bool:
        q = (
            self.client.table(TABLE)
            .select("id")
            .eq("manufacturer_slug", row["manufacturer_slug"])
            .eq("slug", row["slug"])
            .eq("color_name", row["color_name"])
        )
        if row.get("weight") is None:
            q = q.is_("weight", "null")
        else:
            q = q.eq("weight", row["weight"])
        res = q.limit(1).execute()
        return bool(res.data)

    def insert(self, row: Dict[str, Any]) -> None:
        self.client.table(TABLE).insert(row).execute()

    def fetch_all(self, columns: str = "*", filters: Dict[str, Any] | None = None) -> List[Dict[str, Any]]:
        """Every matching row, paged until a short page comes back."""
        out: List[Dict[str, Any]] = []
        start = 0
        while True:
            q = self.client.table(TABLE).select(columns)
            for key, value in (filters or {}).items():
                q = q.eq(key, value)
            res = q.range(start, start + self.page_size - 1).execute()
            page = res.data or []
            out.extend(page)
            if len(page) < self.page_size:
                break
            start += self.page_size
        _log("supabase", f"fetched {len(out)} row(s) from {TABLE}")
        return out

    def insert_new(self, rows: Iterable[Dict[str, Any]]) -> tuple[int, List[str]]:
        """Insert rows not already present. Returns (inserted, errors)."""
        inserted = 0
        errors: List[str] = []
        for row in rows:
            label = f"{row['slug']} / {row['color_name']} / {row['weight'] if row['weight'] is not None else 'N/A'}"
            try:
                if self.exists(row):
                    _log("supabase", f"skipping existing: {label}")
                    continue
                self.insert(row)
            except Exception as exc:
                errors.append(f"{label}: {exc}")
                _log("supabase", f"[ERROR] insert failed: {label}: {exc}")
                continue
            inserted += 1
        return inserted, errors
