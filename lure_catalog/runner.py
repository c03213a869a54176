from __future__ import annotations
import argparse
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests
from dotenv import load_dotenv

from . import airtable as at
from . import notify
from .airtable import AirtableClient
from .creds import get_secret
from .datastore import LureStore, rows_for
from .fetch import Fetcher, _log
from .hooks import persist_record, summary_note
from .images import ImageMirror
from .models import ScrapeError, Source, UnknownSourceError
from .scrapers import get_source, scrape_detail, source_for
from .settings import load_settings, source_overrides


@dataclass
class RecordResult:
    record_id: str
    lure_name: str
    status: str  # success / error / skipped
    message: str
    colors_processed: int = 0
    rows_inserted: int = 0


@dataclass
class RunSummary:
    results: List[RecordResult] = field(default_factory=list)
    elapsed: float = 0.0

    def _count(self, status: str) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def attempted(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return self._count("success")

    @property
    def errored(self) -> int:
        return self._count("error")

    @property
    def skipped(self) -> int:
        return self._count("skipped")

    @property
    def rows_inserted(self) -> int:
        return sum(r.rows_inserted for r in self.results)

    @property
    def colors_processed(self) -> int:
        return sum(r.colors_processed for r in self.results)

    def log(self) -> None:
        _log("pipeline", "=" * 40)
        _log("pipeline", f"records attempted: {self.attempted}")
        _log("pipeline", f"succeeded: {self.succeeded}")
        _log("pipeline", f"skipped: {self.skipped}")
        _log("pipeline", f"errors: {self.errored}")
        _log("pipeline", f"rows inserted: {self.rows_inserted}")
        _log("pipeline", f"colors processed: {self.colors_processed}")
        _log("pipeline", f"elapsed: {self.elapsed:.1f}s")
        _log("pipeline", "=" * 40)
        for r in self.results:
            icon = "OK" if r.status == "success" else "FAIL"
            _log("pipeline", f"  [{icon}] {r.lure_name}: {r.message}")


def resolve_maker(client: AirtableClient, record: Dict[str, Any]) -> tuple[str, str]:
    """(maker name, maker slug) from the linked maker record; ('', '') when unlinked."""
    ids = (record.get("fields") or {}).get(at.F_MAKER) or []
    if not ids:
        return "", ""
    fields = client.get_maker(ids[0]).get("fields") or {}
    return (str(fields.get(at.F_MAKER_NAME) or "").strip(),
            str(fields.get(at.F_MAKER_SLUG) or "").strip().lower())


def _safe_status(client: AirtableClient, record_id: str, status: str, note: str | None = None) -> None:
    try:
        client.update_status(record_id, status, note)
    except Exception as exc:
        _log("pipeline", f"[ERROR] failed to update status of {record_id}: {exc}")


def process_record(record: Dict[str, Any], client: AirtableClient, source: Source, maker_name: str,
                   fetcher: Fetcher, store: Optional[LureStore], mirror: Optional[ImageMirror],
                   dry_run: bool = False, overrides: Dict[str, Any] | None = None) -> RecordResult:
    record_id = record.get("id", "")
    fields = record.get("fields") or {}
    lure_name = fields.get(at.F_NAME) or "(unknown)"
    url = str(fields.get(at.F_URL) or "").strip()
    _log("pipeline", f"=== {lure_name} ({url}) ===")

    try:
        if not dry_run:
            client.update_status(record_id, at.PROCESSING)
        lure = scrape_detail(url, source.slug, fetcher, overrides)
        if maker_name:
            lure.manufacturer = maker_name
        if dry_run or store is None:
            rows = rows_for(lure)
            _log("pipeline", f"[dry-run] {lure.name}: {len(rows)} row(s) would be inserted")
            return RecordResult(record_id, lure_name, "success", f"{len(lure.colors)} colors, dry run",
                                colors_processed=len(lure.colors))
        _, errors, inserted = persist_record(lure, store, mirror)
        for err in errors[:3]:
            _log("pipeline", f"[HOOK ERROR] {err}")
        client.update_status(record_id, at.DONE, summary_note(lure, inserted))
        return RecordResult(record_id, lure_name, "success",
                            f"{len(lure.colors)} colors, {inserted} rows inserted",
                            colors_processed=len(lure.colors), rows_inserted=inserted)
    except Exception as exc:
        msg = str(exc)
        _log("pipeline", f"[ERROR] failed to process {lure_name}: {msg}")
        if not dry_run:
            _safe_status(client, record_id, at.ERROR, msg[:at.NOTE_LIMIT])
        return RecordResult(record_id, lure_name, "error", msg)


def run(client: AirtableClient, settings: Dict[str, Any], store: Optional[LureStore] = None,
        mirror: Optional[ImageMirror] = None, limit: int = 0, maker: str | None = None,
        dry_run: bool = False, sleep=time.sleep) -> RunSummary:
    summary = RunSummary()
    started = time.monotonic()
    pending = client.fetch_pending()
    delay = int(settings.get("page_load_delay_ms", 2000)) / 1000.0

    fetcher: Optional[Fetcher] = None
    fetcher_maker = ""
    try:
        for record in pending:
            if limit and summary.attempted >= limit:
                break
            record_id = record.get("id", "")
            fields = record.get("fields") or {}
            lure_name = fields.get(at.F_NAME) or "(unknown)"
            url = str(fields.get(at.F_URL) or "").strip()

            try:
                maker_name, maker_slug = resolve_maker(client, record)
            except requests.RequestException as exc:
                _log("pipeline", f"[ERROR] {lure_name}: maker lookup failed: {exc}")
                summary.results.append(RecordResult(record_id, lure_name, "error", f"maker lookup failed: {exc}"))
                continue
            if maker and maker_slug and maker_slug != maker.lower():
                continue
            if not url:
                msg = "no URL in record"
                _log("pipeline", f"[ERROR] {lure_name}: {msg}")
                if not dry_run:
                    _safe_status(client, record_id, at.ERROR, msg)
                summary.results.append(RecordResult(record_id, lure_name, "skipped", msg))
                continue
            try:
                source = get_source(maker_slug) if maker_slug else source_for(url)
            except UnknownSourceError as exc:
                _log("pipeline", f"[ERROR] {lure_name}: {exc}")
                if not dry_run:
                    _safe_status(client, record_id, at.ERROR, str(exc)[:at.NOTE_LIMIT])
                summary.results.append(RecordResult(record_id, lure_name, "skipped", str(exc)))
                continue
            if maker and source.slug != maker.lower():
                continue

            if fetcher is None or fetcher_maker != source.slug:
                if fetcher is not None:
                    fetcher.close()
                fetcher = Fetcher.from_settings(settings)
                fetcher_maker = source.slug

            if summary.attempted:
                _log("pipeline", f"waiting {delay * 1000:.0f}ms before next record")
                sleep(delay)
            _log("pipeline", f"--- record {summary.attempted + 1} of {min(len(pending), limit or len(pending))} ---")
            summary.results.append(process_record(record, client, source, maker_name, fetcher,
                                                  store, mirror, dry_run,
                                                  source_overrides(settings, source.slug)))
    finally:
        if fetcher is not None:
            fetcher.close()
        summary.elapsed = time.monotonic() - started
    return summary


def main(argv: List[str] | None = None) -> int:
    load_dotenv()
    ap = argparse.ArgumentParser(description="Scrape pending lure URLs from Airtable into Supabase")
    ap.add_argument("--limit", type=int, default=0, help="Process at most N records (0 = all)")
    ap.add_argument("--maker", default=None, help="Only process records of this maker slug")
    ap.add_argument("--dry-run", action="store_true", help="Scrape only; no status updates, uploads or inserts")
    args = ap.parse_args(argv)

    settings = load_settings()
    _log("pipeline", "lure pipeline starting")
    client = AirtableClient.from_settings(settings)
    store = mirror = None
    if not args.dry_run:
        store = LureStore.from_settings(settings)
        mirror = ImageMirror.from_settings(settings, store.client)
    try:
        summary = run(client, settings, store, mirror, limit=max(args.limit, 0),
                      maker=args.maker, dry_run=args.dry_run)
    except (ScrapeError, RuntimeError, OSError) as exc:
        _log("pipeline", f"[ERROR] pipeline failed: {exc}")
        return 1
    finally:
        client.close()
    summary.log()

    if summary.succeeded and not args.dry_run:
        notify.trigger_deploy(get_secret("VERCEL_DEPLOY_HOOK") or "")
    webhook = get_secret("DISCORD_WEBHOOK_URL")
    if webhook and summary.attempted:
        notify.send_discord_summary(webhook, summary)
    _log("pipeline", "pipeline complete")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
