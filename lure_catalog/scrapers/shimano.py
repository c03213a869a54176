from __future__ import annotations
import re
from typing import Any, Dict, List
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from ..models import FetchError, Source, SpecVariant
from ..scrape_utils import fold_width, g, img_src, parse_length, parse_price, parse_weights, slug_from_url, table_rows

# /lure/{genre}/{target}/{sub}/{product}.html
SUBCATEGORY_TYPE_MAP = {
    'minnow': 'ミノー', 'sinkingpencil': 'シンキングペンシル', 'topwater': 'トップウォーター',
    'vibration_blade': 'バイブレーション', 'bigbait_jointbait': 'ビッグベイト',
    'jig_spoon': 'メタルジグ', 'worm_jighead': 'ジグヘッド', 'float': 'フロート',
    'jig_vibration_blade': 'バイブレーション', 'jig': 'メタルジグ', 'blade': 'ブレードベイト',
    'egi': 'エギ', 'egi_dropper': 'エギ', 'sutte': 'スッテ', 'others': 'ルアー', 'tenya': 'テンヤ',
    'tairubber': 'タイラバ', 'parts': 'パーツ', 'minnow_shad': 'ミノー', 'i-motion': 'i字系',
    'crankbait': 'クランクベイト', 'vibration_spintail': 'バイブレーション',
    'spinnerbait_rubberjig': 'スピナーベイト', 'jigminnow_sinkingpencil': 'ジグミノー',
    'spoon': 'スプーン', 'jointbait': 'ジョイントベイト',
}

SKU_IMAGE = 'https://dassets2.shimano.com/content/dam/Shimano/JP/fishing/product/lure/SKU/SKU_{code}.jpg'


def subcategory(url: str) -> str:
    segs = [s for s in urlparse(url).path.split('/') if s]
    return segs[4] if len(segs) >= 6 else ''


def _header(headers: List[str], *patterns: str) -> int:
    for p in patterns:
        for i, h in enumerate(headers):
            if re.search(p, h, re.I):
                return i
    return -1


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    title = g(soup.title.get_text()) if soup.title else ''
    if 'Access Denied' in title:
        raise FetchError('blocked by the CDN (Access Denied)', url, status=403)
    h1 = soup.select_one('h1')
    name = g(h1.get_text(' ')) if h1 else ''

    parts = []
    for h3 in soup.select('h3'):
        t = g(h3.get_text(' '))
        if 10 < len(t) < 200 and 'SHIMANO' not in t:
            parts.append(t)
            break
    sec = soup.select_one('.product__description_section')
    if sec is not None and len(g(sec.get_text(' '))) > 20:
        parts.append(g(sec.get_text(' ')))

    price_el = soup.select_one('.product-main__price')
    head_price = parse_price(g(price_el.get_text(' ')) if price_el else '', excluded=True)

    rows = [[fold_width(c) for c in r] for r in table_rows(soup.select_one('.spec-table table') or soup.select_one('table'))]
    head, body = (rows[0], rows[1:]) if len(rows) >= 2 else ([], [])
    wi = _header(head, r'重量.*g', r'自重.*g', r'ウエイト|ウェイト|weight', r'重量')
    si = _header(head, r'全長.*mm', r'サイズ.*mm', r'全長|length')
    pi = _header(head, r'本体価格|価格|price')
    ci = next((i for i, h in enumerate(head) if h == 'カラー'), -1)
    ki = _header(head, r'品番')

    variants: List[SpecVariant] = []
    for r in body:
        cell = dict(enumerate(r))
        variants.append(SpecVariant(
            weights=parse_weights(cell.get(wi, ''), assume_grams=True),
            length=parse_length(cell.get(si, ''), assume_mm=True),
            price=parse_price(cell.get(pi, ''), excluded=True),
        ))
    if head_price:
        variants.insert(0, SpecVariant(price=head_price))

    colors = []
    for thumb in soup.select('.thumbnail--sku, [class*="thumbnail"]'):
        im = thumb.select_one('img')
        if im is not None and g(im.get('alt')) and img_src(im, url):
            colors.append((g(im.get('alt')), img_src(im, url)))
    # SKU rows: color names from the table, images from the SKU asset path
    sku = []
    for r in body:
        cell = dict(enumerate(r))
        code = cell.get(ki, '').strip()
        cname = cell.get(ci, '').strip() or code
        if cname:
            sku.append((cname, SKU_IMAGE.format(code=code) if code else ''))

    main = ''
    fallback = ''
    for im in soup.select('img[src]'):
        src = img_src(im, url)
        if not main and 'dam/' in src and ('Product' in src or 'PRD' in src):
            main = src
        if not fallback and 'dassets2.shimano.com' in src and 'Thumbnails' not in src and 'icon' not in src:
            fallback = src

    return {
        'name': name,
        'name_kana': name,
        'slug': slug_from_url(url),
        'type': SUBCATEGORY_TYPE_MAP.get(subcategory(url), ''),
        'type_hint': title,
        'description': '\n'.join(parts) or title,
        'variants': variants,
        'colors': colors,
        'extra_colors': [sku],
        'main_image': main or fallback,
    }


SOURCE = Source(
    slug='shimano',
    manufacturer='SHIMANO',
    hosts=('fish.shimano.com',),
    parse=parse,
    # Akamai rejects headless chromium
    needs_visible_browser=True,
    price_policy='min',
    wait_selector='h1',
)
