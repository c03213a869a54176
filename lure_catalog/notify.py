from __future__ import annotations
import time
from typing import Any, Callable, List

import requests

from .fetch import _log

MAX_ITEM_LINES = 5


def trigger_deploy(hook_url: str, retries: int = 3, sleep: Callable[[float], None] = time.sleep) -> bool:
    """POST the site deploy hook. 429 waits attempt x 10 s, other failures 5 s."""
    if not hook_url:
        _log("notify", "no deploy hook configured; skipping deploy")
        return False
    for attempt in range(1, retries + 1):
        try:
            r = requests.post(hook_url, timeout=30)
            if r.ok:
                _log("notify", "deploy triggered")
                return True
            if r.status_code == 429:
                wait = attempt * 10
                _log("notify", f"deploy hook rate limited (429), retry {attempt}/{retries} in {wait}s")
                sleep(wait)
                continue
            _log("notify", f"[ERROR] deploy hook failed: {r.status_code} (attempt {attempt}/{retries})")
        except requests.RequestException as exc:
            _log("notify", f"[ERROR] deploy hook error: {exc} (attempt {attempt}/{retries})")
        if attempt < retries:
            sleep(5)
    _log("notify", "[ERROR] deploy hook failed after all retries; deploy manually if needed")
    return False


def send_discord_summary(webhook_url: str, summary: Any) -> None:
    """summary is a runner.RunSummary; only the counts and the first failures are posted."""
    if not webhook_url:
        return
    lines: List[str] = [
        "**lure pipeline**",
        f"OK: {summary.succeeded} / Error: {summary.errored} / Skipped: {summary.skipped}"
        f" / Rows: {summary.rows_inserted}",
    ]
    failed = [r for r in summary.results if r.status != "success"]
    for r in failed[:MAX_ITEM_LINES]:
        lines.append(f"- {r.lure_name}: {r.message[:160]}")
    if len(failed) > MAX_ITEM_LINES:
        lines.append(f"(showing {MAX_ITEM_LINES} of {len(failed)})")
    try:
        requests.post(webhook_url, json={"content": "\n".join(lines)}, timeout=20)
    except requests.RequestException as exc:
        _log("notify", f"[ERROR] Discord summary send failed: {exc}")
