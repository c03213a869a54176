from __future__ import annotations
import re
from typing import Any, Dict, List

from bs4 import BeautifulSoup

from ..classifiers import first_match, lookup_category
from ..models import Source, SpecVariant
from ..scrape_utils import abs_url, g, img_src, parse_length, parse_price, parse_weights, spec_pairs

CATEGORY_TYPE_MAP = {
    'BIG BAIT': 'ビッグベイト', 'SURFACE BAIT': 'トップウォーター', 'CRANK BAIT': 'クランクベイト',
    'MINNOW': 'ミノー', 'PROP BAIT': 'プロップベイト', 'VIBRATION': 'バイブレーション',
    'SPIN TAIL': 'スピンテールジグ', 'FROG': 'フロッグ', 'BIG GAME': 'ビッグベイト',
    'TROUT': 'トラウトルアー', 'SPINNER BAIT': 'スピナーベイト', 'BUZZ BAIT': 'バズベイト',
    'WIRE BAIT': 'ワイヤーベイト', 'BLADE BAIT': 'ブレードベイト', 'SPOON': 'スプーン',
    'SWIM BAIT': 'スイムベイト', 'JIGHEAD/HOOK': 'ジグヘッド', 'JIG': 'ラバージグ',
    'SOFT BAIT': 'ワーム', 'SUPER BIG WORM SERIES': 'ワーム',
}

# name keywords beat the category heading
NAME_RULES = [
    (r'ジグヘッド|JIG\s*HEAD', 'ジグヘッド'),
    (r'ジグ|JIG', 'ラバージグ'),
    (r'スイムベイト|SWIM\s*BAIT', 'スイムベイト'),
    (r'ビッグベイト|BIG\s*BAIT', 'ビッグベイト'),
    (r'バズベイト|BUZZ\s*BAIT', 'バズベイト'),
    (r'スピナーベイト|SPINNER\s*BAIT', 'スピナーベイト'),
    (r'クランク|CRANK', 'クランクベイト'),
    (r'ミノー|MINNOW', 'ミノー'),
    (r'フロッグ|FROG', 'フロッグ'),
    (r'バイブレーション|VIBRATION', 'バイブレーション'),
    (r'スプーン|SPOON', 'スプーン'),
]


def detect_type(name: str, category: str) -> str:
    return first_match(name, NAME_RULES) or lookup_category(category, CATEGORY_TYPE_MAP) or ''


def make_slug(url: str) -> str:
    m = re.search(r'/product/([^/]+)/?$', url)
    return m.group(1).lower() if m else ''


def spec_variants(soup: BeautifulSoup) -> List[SpecVariant]:
    """One entry per sold size; weights of discontinued sizes only when nothing else is listed."""
    live: List[SpecVariant] = []
    dead: List[SpecVariant] = []
    for li in soup.select('ul.mod-spec-list > li'):
        dt = li.select_one('dl dt')
        lines = [g(dd.get_text(' ')) for dd in li.select('dl dd') if g(dd.get_text(' '))]
        specs = spec_pairs(lines)
        price = parse_price(specs.get('PRICE', ''))
        if not price:
            price = next((p for p in (parse_price(x) for x in lines if re.search(r'[¥￥]', x)) if p), 0)
        v = SpecVariant(
            weights=parse_weights(specs.get('WEIGHT', ''), assume_grams=True),
            length=parse_length(specs.get('LENGTH', ''), assume_mm=True),
            price=price,
            label=g(dt.get_text()) if dt else '',
        )
        (dead if any('生産終了' in x for x in lines) else live).append(v)
    if any(v.weights for v in live):
        return live + [SpecVariant(length=v.length, price=v.price, label=v.label) for v in dead]
    return live + dead


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    detail = soup.select_one('.p-section.p-detail')
    if detail is not None and 'お探しのページ' in detail.get_text():
        return {'name': ''}

    h3 = soup.select_one('h3.com-title')
    en = h3.select_one('span.ff-ns') if h3 is not None else None
    name = g(en.get_text()) if en is not None else ''
    category = g(h3.get_text(' ').replace(en.get_text(), '')) if en is not None else ''

    dt = soup.select_one('dl.dl-format01 dt')
    dd = soup.select_one('dl.dl-format01 dd')
    desc = '\n'.join(x for x in (g(dt.get_text()) if dt else '', g(dd.get_text(' ')) if dd else '') if x)

    colors = []
    for li in soup.select('ul.mod-color_list li'):
        cap = li.select_one('figcaption')
        a = li.select_one('figure a')
        if cap is not None and g(cap.get_text()):
            colors.append((g(cap.get_text()), abs_url(a.get('href'), url) if a is not None else ''))

    return {
        'name': name,
        'name_kana': name,
        'slug': make_slug(url),
        'type': detect_type(name, category),
        'category': category,
        'description': desc,
        'variants': spec_variants(soup),
        'colors': colors,
        'main_image': img_src(soup.select_one('.title_image img, .single-head_products img'), url),
    }


SOURCE = Source(
    slug='deps',
    manufacturer='deps',
    hosts=('depsweb.co.jp',),
    parse=parse,
    needs_browser=True,
    default_fish=('ブラックバス',),
    wait_selector='h3.com-title',
)
