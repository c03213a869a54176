from __future__ import annotations
import re
from typing import Any, Dict, List

from bs4 import BeautifulSoup

from ..fetch import _log
from ..models import FetchError, Source, SpecVariant
from ..scrape_utils import abs_url, g, img_src, parse_length, parse_price, parse_weights, slugify

TYPE_RULES = [
    (r'POPPER', 'ポッパー'),
    (r'PENCIL|SKITTER', 'ペンシルベイト'),
    (r'PROP', 'プロップベイト'),
    (r'RATTLIN|RIPPIN|CLACKIN', 'バイブレーション'),
    (r'CRANK|\bDT\b|DIVES[\s-]?TO|SCATTER', 'クランクベイト'),
    (r'SHAD', 'シャッド'),
    (r'MINNOW|HUSKY|X[\s-]?RAP|COUNTDOWN|ORIGINAL|ULTRA[\s-]?LIGHT|SHADOW[\s-]?RAP|RIPSTOP|FLAT[\s-]?RAP|MAGNUM|JOINTED|TAIL[\s-]?DANCER|MAX[\s-]?RAP', 'ミノー'),
    (r'SPINNER|VIBRAX|MORESILDA', 'スピナー'),
    (r'SPOON|SLIPPER|WOBBLER', 'スプーン'),
    (r'GLIDE|SWIM[\s-]?BAIT|STORM[\s-]?360', 'スイムベイト'),
    (r'JIG', 'メタルジグ'),
    (r'FROG', 'フロッグ'),
    (r'CHATTER', 'ブレードジグ'),
    (r'BUZZ', 'バズベイト'),
    (r'WORM|GRUB|SOFT|TUBE', 'ワーム'),
    (r'SQUID', 'エギ'),
    (r'BLADE', 'メタルバイブ'),
]

# catalog path -> sub brand sold under the Rapala Japan site
BRANDS = {'/cn9/': 'luhrjensen', '/cn10/': 'northcraft', '/cn7/': 'bluefox', '/cn6/': 'storm'}
BRAND_FISH = {
    'luhrjensen': ['トラウト', 'サーモン'],
    'bluefox': ['トラウト'],
    'storm': ['ブラックバス'],
    'northcraft': ['ブラックバス'],
    'rapala': ['シーバス', 'トラウト'],
}

FISH_RULES = [
    (r'TROUT|トラウト|MASU|マス|IWANA|イワナ|YAMAME|ヤマメ|ULTRA[\s-]?LIGHT', ['トラウト']),
    (r'SEA[\s-]?BASS|シーバス|SALTWATER|ソルト|SHORE|COASTAL|BISCAY', ['シーバス']),
    (r'BASS|バス|LARGEMOUTH|SMALLMOUTH', ['ブラックバス']),
    (r'SALMON|サーモン|STEELHEAD', ['トラウト', 'サーモン']),
]


def brand_of(url: str) -> str:
    for key, brand in BRANDS.items():
        if key in url:
            return brand
    return 'rapala'


def make_slug(url: str) -> str:
    m = re.search(r'/([^/]+)\.html$', url)
    return f'{brand_of(url)}-{m.group(1).lower()}' if m else ''


def target_fish(name: str, url: str) -> List[str]:
    for rx, fish in FISH_RULES:
        if re.search(rx, name, re.I):
            return list(fish)
    return list(BRAND_FISH[brand_of(url)])


def _spec_tables(block, url: str, eshop: List[str]) -> List[SpecVariant]:
    out: List[SpecVariant] = []
    for table in block.select('table'):
        rows = table.select('tr')
        if len(rows) < 2:
            continue
        head = [g(td.get_text()).upper() for td in rows[0].select('td, th')]
        lcol = next((i for i, h in enumerate(head) if 'BODY LENGTH' in h or 'SIZE' in h or h == 'LENGTH'), -1)
        wcol = next((i for i, h in enumerate(head) if 'WEIGHT' in h), -1)
        for tr in rows[1:]:
            cells = [g(td.get_text(' ')) for td in tr.select('td')]
            w = cells[wcol] if 0 <= wcol < len(cells) else ''
            ln = cells[lcol] if 0 <= lcol < len(cells) else ''
            out.append(SpecVariant(weights=parse_weights(w), length=parse_length(ln)))
            for a in tr.select('a[href*="rapala-e-shop.com"]'):
                href = abs_url(a.get('href'), url)
                if href not in eshop:
                    eshop.append(href)
    return out


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    title = re.sub(r'\s*\|\s*Rapala\s*HP\s*$', '', g(soup.title.get_text()) if soup.title else '', flags=re.I)
    m = re.match(r'^([A-Z0-9_\-]+)\s*\((.+)\)\s*$', title, re.I)
    name = m.group(2).strip() if m else title

    name_jp = type_hint = catchcopy = main_image = ''
    desc: List[str] = []
    variants: List[SpecVariant] = []
    eshop: List[str] = []
    for block in soup.select('div.b-plain.is-sp-hide'):
        col = block.select_one('.column.-column1, .column')
        if col is None:
            continue
        for child in col.find_all(recursive=False):
            cls = child.get('class') or []
            if child.name == 'h2' and not main_image:
                im = child.select_one('picture img, div.c-img img')
                src = img_src(im, url)
                if src and 'thumbnail' not in src:
                    main_image = src
            elif 'c-body' in cls and 'c-center' in cls:
                text = g(child.get_text(' '))
                if text and not name_jp:
                    name_jp = text
                elif text and not type_hint:
                    type_hint = text
            elif child.name == 'h4' and 'c-small_headline' in cls:
                catchcopy = g(child.get_text(' '))
            elif 'c-body' in cls and 'c-left' in cls:
                text = g(child.get_text(' '))
                if len(text) > 5:
                    desc.append(text)
        variants += _spec_tables(block, url, eshop)

    colors = []
    for block in soup.select('div.b-album, div.b-plain:not(.is-sp-hide):not(.is-pc-hide)'):
        for col in block.select('.column[class*="-column"]'):
            h4 = col.select_one('h4.c-small_headline')
            im = col.select_one('picture img, div.c-img img, div.c-photo img, a.js-zoomImage img')
            if h4 is None or im is None:
                continue
            webp = col.select_one('picture source[type="image/webp"]')
            src = abs_url(webp.get('srcset'), url) if webp is not None and webp.get('srcset') else img_src(im, url)
            if g(h4.get_text()) and src:
                colors.append((g(h4.get_text()), src))

    if not main_image:
        og = soup.select_one('meta[property="og:image"]')
        main_image = og.get('content', '') if og is not None and not colors else ''

    lengths = sorted(v.length for v in variants if v.length)
    return {
        'name': name,
        'name_kana': name_jp,
        'slug': make_slug(url) or slugify(name),
        'type_hint': type_hint,
        'description': '\n'.join([x for x in (catchcopy,) if x] + desc),
        'variants': [SpecVariant(weights=v.weights) for v in variants],
        'length': lengths[0] if lengths else None,
        'colors': colors,
        'main_image': main_image,
        'target_fish': target_fish(name, url),
        'eshop_urls': eshop,
    }


def eshop_price(html: str) -> int:
    """Price on a rapala-e-shop item page; lowest variation when there is no single price."""
    soup = BeautifulSoup(html, 'html.parser')
    el = soup.select_one('.item_price, [class*="item-price"]')
    if el is not None:
        p = parse_price(el.get_text(' '))
        if p:
            return p
    prices = [parse_price(x.get_text(' ')) for x in soup.select('[class*="result_item"] [class*="price"], .item_variation_price')]
    prices = [p for p in prices if p]
    return min(prices) if prices else 0


def enrich(frag: Dict[str, Any], fetcher) -> None:
    urls = frag.get('eshop_urls') or []
    if not urls:
        return
    try:
        # the e-shop rejects headless chromium
        html = fetcher.get(urls[0], visible=True, wait_selector='.item_price')
    except FetchError as exc:
        _log('rapala', f'e-shop price unavailable: {exc}')
        return
    frag['variants'] = list(frag.get('variants') or []) + [SpecVariant(price=eshop_price(html))]


SOURCE = Source(
    slug='rapala',
    manufacturer='Rapala',
    hosts=('rapala.co.jp',),
    parse=parse,
    needs_browser=True,
    price_policy='min',
    type_rules=TYPE_RULES,
    enrich=enrich,
)
