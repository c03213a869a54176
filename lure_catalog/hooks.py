from __future__ import annotations
from typing import Any, Dict, List, Tuple

from .datastore import LureStore, rows_for
from .images import ImageMirror
from .models import LureRecord


def persist_record(record: LureRecord, store: LureStore, mirror: ImageMirror | None = None,
                   ) -> Tuple[List[Dict[str, Any]], List[str], int]:
    """Mirror color images, then insert the color x weight rows not yet stored.

    Returns (rows, errors, inserted). Image failures leave the row without
    images; row failures are collected and the remaining rows still go in.
    """
    tag = record.manufacturer_slug
    print(f"[HOOK] {tag} persisting {record.slug} ({len(record.colors)} color(s))", flush=True)
    image_map = mirror.mirror_colors(record) if mirror is not None else {}
    rows = rows_for(record, image_map)
    inserted, errors = store.insert_new(rows)
    print(f"[HOOK] {tag} {record.slug}: {len(rows)} row(s), inserted {inserted}, errors={len(errors)}", flush=True)
    return rows, errors, inserted


def summary_note(record: LureRecord, inserted: int) -> str:
    weights = len(record.weights) or 1
    return f"{len(record.colors)}色 x {weights}ウェイト = {inserted}行挿入"
