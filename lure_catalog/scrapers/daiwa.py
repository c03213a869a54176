from __future__ import annotations
import re
from typing import Any, Dict, List
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from ..models import Source, SpecVariant
from ..scrape_utils import fold_width, g, img_src, parse_length, parse_price, parse_weights, table_rows


def make_slug(url: str) -> str:
    segs = [s for s in urlparse(url).path.split('/') if s]
    if 'product' in segs:
        i = segs.index('product')
        if i + 1 < len(segs):
            return segs[i + 1].lower()
    return segs[-1].lower() if segs else ''


def _col(headers: List[str], *patterns: str) -> int:
    for p in patterns:
        for i, h in enumerate(headers):
            if re.search(p, h, re.I):
                return i
    return -1


def _price(text: str) -> int:
    # tax-excluded list price, "1,800~2,000" ranges start at the cheapest
    t = fold_width(text)
    m = re.search(r'(\d[\d,]*)\s*[~\-]\s*\d', t)
    return parse_price(m.group(1) if m else t, excluded=True)


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    title = g(soup.title.get_text()) if soup.title else ''
    h1 = soup.select_one('h1.product_name') or soup.select_one('.product_detail h1') or soup.select_one('h1')
    # h1 sometimes carries a subtitle on its second line
    name = g(h1.get_text('\n').strip().split('\n')[0]) if h1 else ''
    if not name:
        name = title.split('|')[0].strip()

    crumb = soup.select_one('.breadcrumb, nav[aria-label="breadcrumb"]')
    desc = [g(p.get_text(' ')) for p in soup.select('.product_detail p, section.mainParts_description p, .mainParts_point p')]
    desc = [d for d in desc if len(d) > 20]

    rows = [[fold_width(c) for c in r] for r in table_rows(soup.select_one('section.spec table, .spec table'))]
    head, body = (rows[0], rows[1:]) if len(rows) >= 2 else ([], [])
    wi = _col(head, r'自重.*g|ウエイト.*g|ウェイト.*g|weight.*g', r'^(?!.*oz).*(自重|ウエイト|ウェイト|weight)')
    si = _col(head, r'サイズ.*mm|全長.*mm|length.*mm', r'^(?!.*inch).*(サイズ|全長|length)')
    pi = _col(head, r'価格|プライス|price')
    ii = _col(head, r'アイテム|item|品名')

    variants = []
    for r in body:
        cell = dict(enumerate(r))
        variants.append(SpecVariant(
            weights=parse_weights(cell.get(wi, ''), assume_grams=True),
            length=parse_length(cell.get(si, ''), assume_mm=True),
            price=_price(cell.get(pi, '')),
        ))
    price_el = soup.select_one('.product_price, .price')
    fallback_price = _price(g(price_el.get_text(' '))) if price_el is not None else 0

    colors = []
    for slide in soup.select('.item_view .slick-slide:not(.slick-cloned)'):
        im = slide.select_one('img')
        cap = slide.select_one('.caption, p')
        text = g(cap.get_text(' ')) if cap is not None else ''
        if im is not None and text:
            colors.append((re.sub(r'\s*[(（][^)）]*[)）]\s*$', '', text), img_src(im, url)))
    # no gallery: the item column is "{name} {color}"
    item_colors = []
    if body:
        col = ii if ii >= 0 else 0
        for r in body:
            item = r[col] if col < len(r) else ''
            if name and name in item:
                item = item[item.index(name) + len(name):]
            if g(item):
                item_colors.append((g(item), ''))

    return {
        'name': name,
        'name_kana': name,
        'slug': make_slug(url),
        'type_hint': title,
        'breadcrumb': g(crumb.get_text(' ')) if crumb is not None else '',
        'description': '\n'.join(desc) or title,
        'variants': variants,
        'price': fallback_price,
        'colors': colors or item_colors,
        'main_image': img_src(soup.select_one('.product_detail img, .main_image img, .slider img'), url),
    }


SOURCE = Source(
    slug='daiwa',
    manufacturer='DAIWA',
    hosts=('daiwa.com',),
    parse=parse,
    needs_browser=True,
    price_policy='min',
    wait_selector='h1',
)
