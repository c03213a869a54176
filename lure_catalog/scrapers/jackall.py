from __future__ import annotations
import re
from typing import Any, Dict, List

from bs4 import BeautifulSoup

from ..classifiers import TYPE_RULES as SHARED_RULES
from ..models import Source, SpecVariant
from ..scrape_utils import (
    find_col, g, has_cjk, img_src, parse_length, parse_price, parse_weights, slug_from_url, table_rows,
)

# /products/lure/{sub}/... decides the type before any keyword
SUBCATEGORY_TYPE_MAP = {
    'crank-bait': 'クランクベイト', 'minnow-shad': 'ミノー', 'vibration': 'バイブレーション',
    'top-water': 'トップウォーター', 'joint-big-bait': 'ビッグベイト', 'swim-bait': 'スイムベイト',
    'spoon': 'スプーン', 'wire-bait': 'ワイヤーベイト', 'blade-bait': 'ブレードベイト',
    'metal-jig': 'メタルジグ', 'rubber-jig': 'ラバージグ', 'namazu': 'ナマズルアー',
    'sea-bass': 'シーバスルアー', 'blue-fish': 'ショアジギング', 'azi': 'アジング',
    'mebaru': 'メバリング', 'surf': 'サーフルアー', 'kurodai': 'チニング',
    'rock-fish': 'ロックフィッシュ', 'tatiuo': 'タチウオルアー', 'cian': 'ショアジギング',
    'tiprun': 'ティップラン', 'fugu': 'フグルアー', 'ikametal': 'イカメタル',
    'binbinswitch': 'タイラバ', 'tairaba-tairaba&taijig': 'タイラバ', 'hitotsu-tenya': 'ひとつテンヤ',
    'bluefish-jigging': 'ジギング', 'boat-casting': 'オフショアキャスティング',
    'tatchiuo': 'タチウオジギング', 'bachikon': 'バチコン', 'crank': 'クランクベイト',
    'minnow': 'ミノー', 'stream': 'トラウトルアー', 'cr': 'トラウトルアー', 'ayu': '鮎ルアー',
    'set': 'トラウトルアー',
}

TYPE_RULES = [
    (r'トップ|ポッパー|POPPER|ペンシル|PENCIL', 'トップウォーター'),
    (r'ビッグベイト|BIG\s?BAIT|ジョイント|JOINT', 'ビッグベイト'),
    (r'タイラバ|鯛ラバ|TAIRABA|ビンビン|BINBIN', 'タイラバ'),
    (r'テンヤ|TENYA', 'ひとつテンヤ'),
    (r'エギ|\bEGI\b|SQUID', 'エギ'),
] + SHARED_RULES


def subcategory(url: str) -> str:
    m = re.search(r'/products/lure/([^/]+)/', url)
    return m.group(1) if m else ''


def spec_variants(table) -> List[SpecVariant]:
    rows = table_rows(table)
    if len(rows) < 2:
        return []
    head, body = rows[0], rows[1:]
    wi = find_col(head, 'WEIGHT', '重')
    li = find_col(head, 'LENGTH', '長')
    pi = find_col(head, 'PRICE', '価格')
    excl = pi >= 0 and '本体' in head[pi]
    out: List[SpecVariant] = []
    for cells in body:
        cell = dict(enumerate(cells))
        weights = parse_weights(cell.get(wi, ''))
        if wi < 0:
            weights = [w for c in cells if re.search(r'\d\s*(?:g\b|oz)', c, re.I) for w in parse_weights(c)]
        price = parse_price(cell.get(pi, ''), excluded=excl)
        if not price:
            price = next((p for p in (parse_price(c) for c in cells if re.search(r'[¥￥円]', c)) if p), 0)
        out.append(SpecVariant(weights=weights, length=parse_length(cell.get(li, '')), price=price))
    return out


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    main_el = soup.select_one('h1.page-main__title .title-main')
    kana_el = soup.select_one('h1.page-main__title .title-kana')
    en = g(main_el.get_text()) if main_el else ''
    ja = g(kana_el.get_text()) if kana_el else ''
    # some pages put the Japanese name in title-main
    if has_cjk(en) and not has_cjk(ja):
        en, ja = ja, en
    slug = slug_from_url(url)

    desc_el = soup.select_one('.page-contents-main h2.title-main.black') or soup.select_one('.page-contents-main .products-section p')
    colors = []
    for item in soup.select('.product-color-list__item'):
        title = item.select_one('.caption .title')
        img = item.select_one('.lightbox-target-contents img') or item.select_one('.photo-ratio img')
        if title is not None and g(title.get_text()) and img is not None:
            colors.append((g(title.get_text()), img_src(img, url)))

    return {
        'name': ja or en or slug,
        'name_kana': ja,
        'slug': slug,
        'type': SUBCATEGORY_TYPE_MAP.get(subcategory(url), ''),
        'type_hint': en,
        'description': g(desc_el.get_text(' ')) if desc_el is not None else '',
        'variants': spec_variants(soup.select_one('.product-spec--pc table')),
        'colors': colors,
        'main_image': img_src(soup.select_one('.page-contents-main img[src*="uploads"]'), url),
    }


SOURCE = Source(
    slug='jackall',
    manufacturer='JACKALL',
    hosts=('jackall.co.jp',),
    parse=parse,
    needs_browser=True,
    type_rules=TYPE_RULES,
    wait_selector='h1.page-main__title',
)
