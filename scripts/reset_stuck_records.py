from __future__ import annotations

import argparse
import sys

from dotenv import load_dotenv

from lure_catalog import airtable as at
from lure_catalog.airtable import AirtableClient
from lure_catalog.settings import load_settings


def main() -> int:
    load_dotenv()
    ap = argparse.ArgumentParser(description="Reset stuck (処理中) lure records back to 未処理")
    ap.add_argument("--include-errors", action="store_true", help="Also reset records in エラー")
    ap.add_argument("--dry-run", action="store_true", help="Only count the records")
    args = ap.parse_args()

    client = AirtableClient.from_settings(load_settings())
    try:
        records = client.fetch_by_status(at.PROCESSING)
        print(f"[reset] {len(records)} stuck record(s) with status {at.PROCESSING}")
        if args.include_errors:
            errors = client.fetch_by_status(at.ERROR)
            print(f"[reset] {len(errors)} record(s) with status {at.ERROR}")
            records += errors
        if not records:
            print("[reset] nothing to reset")
            return 0
        if args.dry_run:
            return 0
        updated = client.update_records(
            [{"id": r["id"], "fields": {at.F_STATUS: at.PENDING, at.F_NOTE: ""}} for r in records]
        )
        print(f"[reset] reset {len(updated)} record(s) to {at.PENDING}")
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
