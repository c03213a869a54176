from __future__ import annotations
import re
from typing import Any, Dict, List
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup

from ..classifiers import first_match
from ..models import Source, SpecVariant
from ..scrape_utils import abs_url, g, meta_content, parse_length, parse_price, parse_weights

# product families by name; O.S.P names carry no type words
TYPE_RULES = [
    (r'blitz|crank|dunk|hpf|louder|highcut', 'クランクベイト'),
    (r'rudra|varuna|durga|asura|bent\s*minnow|i-?waver|over\s*real', 'ミノー'),
    (r'karen|yamato', 'ビッグベイト'),
    (r'romance|picro|duck\s*bill', 'トップウォーター'),
    (r'buzzn|co-?buzzn|daibuzzn|buzz\s*zero', 'バズベイト'),
    (r'pitcher|typhoon', 'スピナーベイト'),
    (r'jig\s*zero|hunts|tugger|slipper|synchro|weed\s*rider', 'ラバージグ'),
    (r'blade\s*jig|over\s*ride|metal\s*blade', 'メタルバイブ'),
    (r'dolive', 'ワーム'),
    (r'hp\s*(?:shadtail|minnow|bug|fish|3d)', 'ワーム'),
    (r'mmz|orikanemushi|ebi|mylar|action\s*trailer|erimaki|spinnuts|wispul|dice|flutter', 'ワーム'),
    (r'frog|drippy|skating|spintail|diving', 'フロッグ'),
    (r'bonneville|delgado|fakie|alici', 'メタルジグ'),
    (r'tsukiyomi|moses', 'ミノー'),
    (r'コト玉|kotodama', 'タイラバ'),
    (r'glidy', 'ジグヘッド'),
    (r'chestar|melo', 'ミノー'),
    (r'windy', 'ワーム'),
]

FISH_RULES = [
    (r'chestar', ['アユ']),
    (r'melo|durga\s*area', ['トラウト']),
    (r'bonneville|delgado|fakie|alici', ['青物']),
    (r'kotodama|コト玉', ['マダイ']),
    (r'tsukiyomi|moses|\bsw\b|glidy|windy|flutter\s*tube', ['シーバス']),
]

_SKIP_DESC = ('Length', 'Weight', '円(税込)', '円（税込）', 'Copyright', 'o-s-p.net', 'PRODUCTS',
              'FRESH WATER', 'SALT WATER', 'REPORT', 'MOVIE')
_SKIP_IMG = ('kakudai', 'weight', 'logo', 'icon')
_INCL = re.compile(r'([\d,]+)\s*円[（(]税込[）)]')


def make_slug(url: str) -> str:
    decoded = unquote(url)
    m = re.search(r'/products/([^/?#]+)', decoded)
    if m:
        return m.group(1).lower()
    segs = [s for s in urlparse(decoded).path.split('/') if s]
    return segs[-1].lower() if segs else ''


def _img_url(src: str, base: str) -> str:
    if src.startswith('../../'):
        return abs_url('/' + src[len('../../'):], base)
    if not src.startswith(('http', '/')):
        return abs_url('/img/products/' + src, base)
    return abs_url(src, base)


def _color_name(im, src: str) -> str:
    # unnamed swatches: "img_ayu01.jpg" -> "AYU01"
    return g(im.get('alt')) or re.sub(r'\.\w+$', '', re.sub(r'^.*img_', '', src)).upper()


def color_list(soup: BeautifulSoup, base: str) -> List[tuple]:
    out = []
    seen = set()
    for im in soup.select('ul.optionitem li img, .optionitem li img, .color_list li img, .color-list li img'):
        src = im.get('src') or ''
        if not src or src in seen or any(k in src for k in _SKIP_IMG):
            continue
        seen.add(src)
        out.append((_color_name(im, src), _img_url(src, base)))
    if out:
        return out
    for im in soup.select('img[src*="/img/products/"]'):
        src = im['src']
        if src in seen or 'main' in src or any(k in src for k in _SKIP_IMG):
            continue
        seen.add(src)
        out.append((_color_name(im, src), abs_url(src, base)))
    return out


def main_image(soup: BeautifulSoup, base: str) -> str:
    im = soup.select_one('img[src*="products_main"], img.freeimg')
    if im is not None and not any(k in im['src'] for k in ('kakudai', 'icon')):
        return abs_url(im['src'], base)
    uploads = [im['src'] for im in soup.select('img[src*="wp-content/uploads"]')
               if not any(k in im['src'] for k in ('kakudai', 'icon'))]
    src = next((s for s in uploads if re.search(r'products_main|img_products|main_', s)), '') or \
        next((s for s in uploads if 'logo' not in s), '')
    return abs_url(src, base)


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    h3 = soup.select_one('h3')
    name = g(h3.get_text(' ')) if h3 is not None else ''
    if not name and soup.title is not None:
        name = g(soup.title.get_text()).split('|')[0].strip()
    catch = soup.select_one('h4.h4_item')
    catch = g(catch.get_text(' ')) if catch is not None else ''
    name = name or catch

    desc = next((g(p.get_text(' ')) for p in soup.select('p')
                 if len(g(p.get_text())) > 50 and not any(k in p.get_text() for k in _SKIP_DESC)), '')
    desc = desc or catch or meta_content(soup, 'description')

    body = soup.get_text('\n')
    lm = re.search(r'\bLength[\t ]*\n?\s*([\s\S]+?)(?=\b(?:Weight|Type|Hook|Color|Price|発売|Ring|Count)\b)', body, re.I)
    wm = re.search(r'\bWeight[\t ]*\n?\s*([\s\S]+?)(?=\b(?:Type|Hook|Color|Price|発売|Ring)\b)', body, re.I)
    prices = [int(p.replace(',', '')) for p in _INCL.findall(body)]
    prices = [p for p in prices if 100 <= p < 1000000]
    if not prices:
        prices = [parse_price(m.group(0)) for m in re.finditer(r'[\d,]+\s*円', body)][:1]

    slug = make_slug(url)
    name = name or slug.replace('-', ' ').replace('_', ' ')
    return {
        'name': name,
        'name_kana': name,
        'slug': slug,
        'type': first_match(name, TYPE_RULES) or '',
        'target_fish': first_match(name, FISH_RULES) or ['ブラックバス'],
        'description': desc,
        # several sizes: the cheapest tax-included price represents the model
        'variants': [SpecVariant(
            weights=parse_weights(wm.group(1)) if wm else [],
            length=parse_length(lm.group(1)) if lm else None,
            price=min(prices) if prices else 0,
        )],
        'colors': color_list(soup, url),
        'main_image': main_image(soup, url),
    }


SOURCE = Source(
    slug='osp',
    manufacturer='O.S.P',
    hosts=('o-s-p.net',),
    parse=parse,
    needs_browser=True,
    default_fish=('ブラックバス',),
    wait_selector='h3',
)
