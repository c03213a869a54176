from __future__ import annotations
import json
import re
from typing import Any, Dict, List
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup

from ..classifiers import TYPE_RULES as SHARED_RULES
from ..models import Source, SpecVariant
from ..scrape_utils import g, img_src, parse_length, parse_price, parse_weights

# the header subtype label is authoritative; name keywords come after it
TYPE_RULES = [
    (r'トップウォーター|TOP\s?WATER|ポッパー|POPPER', 'トップウォーター'),
    (r'シンキングペンシル|SINKING\s?PENCIL|シンペン', 'シンキングペンシル'),
    (r'ミノー|MINNOW', 'ミノー'),
    (r'シャッド|SHAD', 'シャッド'),
    (r'メタルバイブ|METAL\s?VIB', 'メタルバイブ'),
    (r'バイブレーション|VIBRATION|VIB', 'バイブレーション'),
    (r'メタルジグ|METAL\s?JIG', 'メタルジグ'),
    (r'ルアーパーツ|LURE\s?PARTS', 'ルアーパーツ'),
] + SHARED_RULES

GENRE_FISH_MAP = {
    'SEABASS': ['シーバス'], 'SEA BASS': ['シーバス'], 'シーバス': ['シーバス'],
    'SURF': ['ヒラメ・マゴチ'], 'サーフ': ['ヒラメ・マゴチ'],
    'LIGHT GAME': ['アジ', 'メバル'], 'ライトゲーム': ['アジ', 'メバル'],
    'SHORE PLUGGING': ['青物'], 'ショアプラッギング': ['青物'],
    'JIGGING': ['青物'], 'ジギング': ['青物'],
    'ROCK FISH': ['ロックフィッシュ'], 'ロックフィッシュ': ['ロックフィッシュ'],
    'CHINU': ['クロダイ'], 'チヌ': ['クロダイ'],
    'OCEAN TROUT': ['トラウト'], 'オーシャントラウト': ['トラウト'],
}

_PAIR = re.compile(r'"title"\s*:\s*"([^"]+)"\s*,\s*"thumbnail"\s*:\s*\{\s*"url"\s*:\s*"([^"]+)"')


def make_slug(url: str) -> str:
    m = re.search(r'/product/lure/([^/?#]+)', url)
    if m:
        return m.group(1).lower()
    segs = [s for s in urlparse(url).path.split('/') if s]
    return segs[-1].lower() if segs else ''


def genre_fish(labels: List[str]) -> List[str]:
    out: List[str] = []
    for label in labels:
        up = label.upper()
        for key, fish in GENRE_FISH_MAP.items():
            if key.upper() in up:
                out += [f for f in fish if f not in out]
    return out


def variation_colors(soup: BeautifulSoup) -> List[tuple]:
    """Colors from the embedded page data ("variations": [{title, thumbnail: {url}}])."""
    for script in soup.select('script'):
        content = script.string or script.get_text()
        if '"variations"' not in content:
            continue
        found: List[tuple] = []
        m = re.search(r'"variations"\s*:\s*(\[.*?\])\s*\}', content, re.S)
        if m:
            try:
                for v in json.loads(m.group(1)):
                    url = (v.get('thumbnail') or {}).get('url')
                    if v.get('title') and url:
                        found.append((v['title'], url))
            except (ValueError, AttributeError):
                found = _PAIR.findall(content)
        if found:
            return found
    return []


def carousel_colors(soup: BeautifulSoup, base: str) -> List[tuple]:
    # file names carry the color: ".../apia_12ブルーイワシ.jpg"
    out: List[tuple] = []
    for im in soup.select('[class*="productVariationCarousel__item"] img'):
        src = im.get('src') or ''
        m = re.search(r'/[^/]+_\d+(.+)\.\w+(?:\?|$)', unquote(src))
        if src and m and m.group(1).strip():
            out.append((m.group(1).strip(), img_src(im, base)))
    return out


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    h1 = soup.select_one('h1')
    name = g(h1.get_text(' ')) if h1 else ''

    genres = [g(el.get_text()) for el in soup.select('[class*="GenreLabel_genreLabel"]') if g(el.get_text())]
    subtype = ''
    for el in soup.select('[class*="productSingleHeader__subtype"], [class*="productSingleHeader__lureTypes"] a'):
        subtype = g(el.get_text()).lstrip('#')
        if subtype:
            break

    price_el = soup.select_one('[class*="Price_price"]')
    spec = ''
    for el in soup.select('[class*="specContent"], [class*="articleContent"]'):
        t = g(el.get_text(' '))
        if 'mm' in t or '全長' in t or '重量' in t:
            spec = t
            break
    desc = ''
    for el in soup.select('[class*="articleContent"]'):
        t = g(el.get_text(' '))
        if len(t) > 50 and not t.startswith('全長') and not t.startswith('重量'):
            desc = t
            break
    if not desc:
        meta = soup.select_one('meta[name="description"]')
        desc = g(meta.get('content')) if meta is not None else ''

    main_img = soup.select_one('[class*="productSingleHeader__image"] img, [class*="ProductSingle"] picture img')
    if main_img is None:
        main_img = next((im for im in soup.select('img[src*="microcms-assets"]')
                         if 'logo' not in im['src'] and 'icon' not in im['src']), None)

    fish = genre_fish(genres)
    return {
        'name': name,
        'name_kana': name,
        'slug': make_slug(url),
        'type_hint': subtype,
        'description': desc,
        'variants': [SpecVariant(
            weights=parse_weights(spec),
            length=parse_length(spec),
            price=parse_price(g(price_el.get_text(' ')) if price_el else '', excluded=True),
        )],
        'colors': variation_colors(soup) or carousel_colors(soup, url),
        'main_image': img_src(main_img, url),
        'target_fish': fish or ['シーバス'],
    }


SOURCE = Source(
    slug='apia',
    manufacturer='APIA',
    hosts=('apiajapan.com',),
    parse=parse,
    needs_browser=True,
    type_rules=TYPE_RULES,
    default_fish=('シーバス',),
    wait_selector='h1',
)
