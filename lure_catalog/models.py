"""Canonical lure record and the error types raised by extractors."""
from __future__ import annotations
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

__all__ = ['Color', 'SpecVariant', 'LureRecord', 'Source', 'ScrapeError', 'FetchError', 'UnknownSourceError']


@dataclass
class Color:
    name: str
    image_url: str = ''


@dataclass
class SpecVariant:
    """One weight/length/price combination listed on a product page."""
    weights: List[float] = field(default_factory=list)
    length: Optional[int] = None
    price: int = 0
    label: str = ''


@dataclass
class LureRecord:
    """One product page, normalized.

    weights are grams, ascending and unique to 0.1 g. price is tax-included
    yen, 0 when unknown. length is mm or None. All image URLs are absolute.
    """

    name: str
    slug: str
    manufacturer: str
    manufacturer_slug: str
    source_url: str
    type: str = 'ルアー'
    name_kana: str = ''
    target_fish: List[str] = field(default_factory=list)
    description: str = ''
    price: int = 0
    colors: List[Color] = field(default_factory=list)
    weights: List[float] = field(default_factory=list)
    length: Optional[int] = None
    main_image: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ScrapeError(RuntimeError):
    """Fatal to one page: nothing is persisted for it."""

    def __init__(self, message: str, url: str = ''):
        self.url = url
        super().__init__(f'{message}: {url}' if url else message)


class FetchError(ScrapeError):
    """HTTP error status, or unreachable after the retry budget."""

    def __init__(self, message: str, url: str = '', status: int | None = None):
        self.status = status
        super().__init__(message, url)


class UnknownSourceError(ScrapeError):
    pass


@dataclass(frozen=True)
class Source:
    """How one manufacturer's product pages are fetched and read.

    parse(url, html) returns raw fragments for the assembler. enrich, when
    set, is called as enrich(fragments, fetcher) to pull secondary pages.
    """

    slug: str
    manufacturer: str
    hosts: tuple
    parse: Callable[[str, str], Dict[str, Any]]
    needs_browser: bool = False
    needs_visible_browser: bool = False
    price_policy: str = 'first_nonzero'
    default_type: str = 'ルアー'
    default_fish: tuple = ()
    type_rules: Optional[Sequence[Tuple[str, str]]] = None
    fish_map: Optional[Dict[str, List[str]]] = None
    single_finish: bool = False
    wait_selector: str = ''
    enrich: Optional[Callable[..., None]] = None
