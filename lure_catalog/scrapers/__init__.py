"""Per-manufacturer product page extractors and the dispatch over them."""
from __future__ import annotations
import dataclasses
from typing import Any, Dict
from urllib.parse import urlparse

from ..assembler import assemble
from ..fetch import Fetcher, _log
from ..models import LureRecord, Source, UnknownSourceError
from . import (
    apia, bassday, berkley, blueblue, breaden, coreman, daiwa, deps, duel, duo, evergreen, hots,
    ivy_line, jackall, jackson, luckycraft, majorcraft, megabass, nories, osp, rapala, shimano,
    smith, tacklehouse, zipbaits,
)

_MODULES = (
    blueblue, duo, berkley, rapala, megabass, apia, deps, jackall, shimano, daiwa, evergreen,
    coreman, bassday, breaden, ivy_line, hots, osp, nories, smith, zipbaits, tacklehouse,
    majorcraft, luckycraft, jackson, duel,
)

SOURCES: Dict[str, Source] = {m.SOURCE.slug: m.SOURCE for m in _MODULES}


def get_source(slug: str) -> Source:
    try:
        return SOURCES[(slug or '').strip().lower()]
    except KeyError:
        raise UnknownSourceError(f'no extractor registered for maker {slug!r}') from None


def source_for(url: str) -> Source:
    host = (urlparse(url).hostname or '').lower()
    for src in SOURCES.values():
        if any(host == h or host.endswith('.' + h) for h in src.hosts):
            return src
    raise UnknownSourceError('no extractor registered for host', url)


def with_overrides(src: Source, overrides: Dict[str, Any] | None) -> Source:
    """Apply a pipeline.yaml `sources:` entry (price_policy, needs_browser, ...)."""
    if not overrides:
        return src
    fields = {f.name for f in dataclasses.fields(Source)}
    return dataclasses.replace(src, **{k: v for k, v in overrides.items() if k in fields})


def scrape_detail(url: str, maker_slug: str | None = None, fetcher: Fetcher | None = None,
                  overrides: Dict[str, Any] | None = None) -> LureRecord:
    """Fetch one product page and return its normalized record.

    Raises ScrapeError (FetchError, UnknownSourceError) when the page cannot
    produce a record.
    """
    src = with_overrides(get_source(maker_slug) if maker_slug else source_for(url), overrides)
    own = fetcher is None
    f = fetcher or Fetcher()
    try:
        html = f.get(url, browser=src.needs_browser, visible=src.needs_visible_browser,
                     wait_selector=src.wait_selector)
        frag = src.parse(url, html)
        if src.enrich is not None:
            src.enrich(frag, f)
        record = assemble(url, frag, src)
    finally:
        if own:
            f.close()
    if not record.colors:
        _log(src.slug, f'no colors found: {url}')
    if not record.price:
        _log(src.slug, f'price unknown: {url}')
    _log(src.slug, f'{record.name} ({record.slug}) {len(record.colors)} colors, '
                   f'{len(record.weights)} weights, {record.price} yen')
    return record
