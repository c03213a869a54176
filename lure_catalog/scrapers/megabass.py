from __future__ import annotations
import re
from typing import Any, Dict, List
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from ..models import Source, SpecVariant
from ..scrape_utils import (
    clip_description, fold_width, g, img_src, abs_url, parse_length, parse_price,
    parse_weights, table_rows,
)

NAME_KANA_MAP = {
    'DOG-X': 'ドッグエックス', 'DOGMAX': 'ドッグマックス', 'POPX': 'ポップエックス',
    'BABY POPX': 'ベビーポップエックス', 'GIANT DOG-X': 'ジャイアントドッグエックス',
    'MEGADOG': 'メガドッグ', 'POPPING DUCK': 'ポッピングダック', 'KARASHI': 'カラシ',
    'ANTHRAX': 'アンスラックス', 'DYING FISH': 'ダイイングフィッシュ', 'SIGLETT': 'シグレット',
    'I-WING': 'アイウィング', 'WATER MONITOR': 'ウォーターモニター',
    'X-80': 'エックスハチマル', 'X-70': 'エックスナナマル', 'X-55': 'エックスゴーゴー',
    'X-80SW': 'エックスハチマルSW', 'X-120': 'エックスイチニーマル', 'X-140': 'エックスイチヨンマル',
    'VISION': 'ビジョン', 'ONETEN': 'ワンテン', 'ITO SHINER': 'イトウシャイナー',
    'ZONK': 'ゾンク', 'KANATA': 'カナタ', 'CUTTER': 'カッター', 'GENMA': 'ゲンマ',
    'MARGELINA': 'マージェリナ', 'VATISSA': 'バティッサ', 'KIRINJI': 'キリンジ',
    'HADARA': 'ハダラ', 'DEEP-X': 'ディープエックス', 'SR-X': 'エスアールエックス',
    'MR-X': 'エムアールエックス', 'GRIFFON': 'グリフォン', 'CYCLONE': 'サイクロン',
    'SUPER-Z': 'スーパーゼット', 'NOISY CAT': 'ノイジーキャット', 'BAIT-X': 'ベイトエックス',
    'ORBIT': 'オービット', 'FX': 'エフエックス', 'VIBRATION-X': 'バイブレーションエックス',
    'SLASH BEAT': 'スラッシュビート', 'VATALION': 'ヴァタリオン', 'I-JACK': 'アイジャック',
    'I-LOUD': 'アイラウド', 'I-SLIDE': 'アイスライド', 'MAKIPPA': 'マキッパ',
    'METAL-X': 'メタルエックス', 'MAGDRAFT': 'マグドラフト', 'DARK SLEEPER': 'ダークスリーパー',
    'SPARK SHAD': 'スパークシャッド', 'SWING HOT': 'スウィングホット', 'KONOSIRUS': 'コノシラス',
    'TOUGH BOMB': 'タフボム', 'HAZEDONG': 'ハゼドン', 'BOTTLE SHRIMP': 'ボトルシュリンプ',
    'ROCKY FRY': 'ロッキーフライ',
}

SPEC_LABELS = ('LENGTH', 'WEIGHT', 'LURE', 'TYPE', 'HOOK', 'PRICE')


def name_kana(name: str) -> str:
    upper = name.upper().strip()
    if upper in NAME_KANA_MAP:
        return NAME_KANA_MAP[upper]
    for key in sorted(NAME_KANA_MAP, key=len, reverse=True):
        if upper.startswith(key):
            suffix = name[len(key):].strip()
            return f'{NAME_KANA_MAP[key]} {suffix}' if suffix else NAME_KANA_MAP[key]
    return name


def make_slug(url: str) -> str:
    segs = [s for s in urlparse(url).path.split('/') if s]
    if 'products' in segs:
        i = segs.index('products')
        if i + 1 < len(segs):
            return segs[i + 1].lower()
    if segs and re.fullmatch(r'[A-Za-z0-9_-]+', segs[-1]):
        return segs[-1].lower()
    return ''


def price_of(text: str) -> int:
    # list prices are tax-excluded; a range means the cheapest model
    t = fold_width(text)
    m = re.search(r'(\d[\d,]*)\s*[~\-]\s*\d', t)
    return parse_price(m.group(1) if m and '税込' not in t else t, excluded=True)


def _section(soup: BeautifulSoup, heading: str):
    for h in soup.select('h2, h3'):
        if g(h.get_text()).upper() == heading:
            return h.parent
    return None


def spec_data(section) -> Dict[str, str]:
    data: Dict[str, str] = {}
    if section is None:
        return data
    rows = table_rows(section.select_one('table'))
    if len(rows) >= 2:
        head = [h.upper() for h in rows[0]]
        for h, v in zip(head, rows[1]):
            if h and v:
                data[h] = v
        if len(rows) > 2 and 'LURE' in head:
            li = head.index('LURE')
            data['LURE'] = ', '.join(r[li] for r in rows[1:] if li < len(r) and r[li])
    if len(data) <= 1:
        lines = [g(x) for x in section.get_text('\n').splitlines() if g(x) and g(x) != 'SPEC']
        i = 0
        while i < len(lines) - 1:
            label, value = lines[i].upper(), lines[i + 1]
            if label in SPEC_LABELS and value.upper() not in SPEC_LABELS:
                data.setdefault(label, value)
                i += 1
            i += 1
        if 'PRICE' not in data:
            m = re.search(r'(メーカー希望小売価格[^\n]*\d+[^\n]*円)', section.get_text('\n'))
            if m:
                data['PRICE'] = m.group(1)
    return data


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    h1 = soup.select_one('main h1')
    name = g(h1.get_text(' ')) if h1 else ''
    title = g(soup.title.get_text()) if soup.title else ''
    nav = soup.select_one('main nav')

    spec_el = _section(soup, 'SPEC')
    spec = spec_data(spec_el)
    weight_text = spec.get('LURE') or spec.get('WEIGHT') or ''
    if not weight_text and spec_el is not None:
        # "10g : ¥1,800 / 14g : ¥1,900" price lists
        per = re.findall(r'(\d+(?:\.\d+)?)g\s*:\s*[￥¥]', spec_el.get_text(' '))
        weight_text = ' '.join(f'{w}g' for w in per)

    main = soup.select_one('main')
    paras = []
    if main is not None:
        for p in main.select('p, div.entry-content, .product_desc'):
            t = g(p.get_text(' '))
            if len(t) > 20 and 'SPEC' not in t and 'COLOR' not in t:
                paras.append(t)

    colors = []
    color_el = _section(soup, 'COLOR VARIATION')
    if color_el is not None:
        for li in color_el.select('ul > li, ol > li'):
            a = li.select_one('a')
            href = a.get('href', '') if a is not None else ''
            if re.search(r'\.(jpe?g|png|webp)', href, re.I) and g(a.get_text()):
                colors.append((g(a.get_text()), abs_url(href, url)))

    banner = soup.select_one('main [class*="banner"] img, main header img, main > div:first-child img, main > section:first-child img')
    return {
        'name': name,
        'name_kana': name_kana(name) if name else '',
        'slug': make_slug(url),
        'type_hint': f"{title} {spec.get('TYPE', '')}",
        'breadcrumb': g(nav.get_text(' ')) if nav else '',
        'description': clip_description('\n'.join(paras)) or title,
        'variants': [SpecVariant(
            weights=parse_weights(weight_text),
            length=parse_length(spec.get('LENGTH', '')),
            price=price_of(spec.get('PRICE', '')),
        )],
        'colors': colors,
        'main_image': img_src(banner, url),
    }


SOURCE = Source(
    slug='megabass',
    manufacturer='Megabass',
    hosts=('megabass.co.jp',),
    parse=parse,
    needs_browser=True,
    wait_selector='main h1',
)
