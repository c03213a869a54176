from __future__ import annotations
import os
from typing import Any, Dict

import yaml

DEFAULT_PATH = os.path.join(os.path.dirname(__file__), "pipeline.yaml")

DEFAULTS: Dict[str, Any] = {
    "page_load_delay_ms": 2000,
    "image_width": 500,
    "image_quality": 80,
    "airtable_batch_size": 10,
    "airtable_batch_delay_ms": 250,
    "airtable_page_delay_ms": 200,
    "supabase_page_size": 1000,
    "fetch_timeout_s": 30,
    "fetch_retries": 3,
    "retry_backoff_s": 2,
    "sources": {},
}


def load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _coerce(value: str, like: Any) -> Any:
    if isinstance(like, bool):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(like, int):
        return int(float(value))
    if isinstance(like, float):
        return float(value)
    return value


def load_settings(path: str | None = None) -> Dict[str, Any]:
    """pipeline.yaml over DEFAULTS, then PAGE_LOAD_DELAY_MS-style env values over both."""
    path = path or os.environ.get("PIPELINE_YAML") or DEFAULT_PATH
    cfg = dict(DEFAULTS)
    if os.path.exists(path):
        cfg.update(load_yaml(path))
    for key, default in DEFAULTS.items():
        if isinstance(default, dict):
            continue
        env = os.environ.get(key.upper())
        if env:
            cfg[key] = _coerce(env, default)
    cfg["sources"] = dict(cfg.get("sources") or {})
    return cfg


def source_overrides(settings: Dict[str, Any], maker_slug: str) -> Dict[str, Any]:
    return dict((settings.get("sources") or {}).get(maker_slug) or {})
