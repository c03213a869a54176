from __future__ import annotations
import re
from typing import Any, Dict

from bs4 import BeautifulSoup

from ..classifiers import TYPE_RULES as SHARED_RULES
from ..models import Source, SpecVariant
from ..scrape_utils import clip_description, fold_width, g, parse_length, parse_price, parse_weights

# duo's own spec "Type" field, checked before the shared rules
TYPE_RULES = [
    (r'ポッパー|POPPER', 'ポッパー'),
    (r'シンキングペンシル|シンペン', 'シンキングペンシル'),
    (r'ペンシルベイト|PENCIL\s*BAIT', 'ペンシルベイト'),
    (r'ミノー|MINNOW', 'ミノー'),
    (r'バイブレーション|VIBRATION', 'バイブレーション'),
    (r'クランク|CRANK', 'クランクベイト'),
    (r'シャッド|SHAD', 'シャッド'),
    (r'メタルジグ|METAL\s*JIG', 'メタルジグ'),
    (r'スピナーベイト|SPINNER\s*BAIT', 'スピナーベイト'),
    (r'スイムベイト|SWIM\s*BAIT', 'スイムベイト'),
    (r'ジョイント|JOINT', 'ジョイントベイト'),
    (r'ビッグベイト|BIG\s*BAIT', 'ビッグベイト'),
    (r'トップウォーター|TOPWATER', 'トップウォーター'),
    (r'スプーン|SPOON', 'スプーン'),
    (r'ブレード|BLADE|SPIN\s*TAIL', 'ブレードベイト'),
    (r'ワーム|WORM|SOFT', 'ワーム'),
    (r'ジグヘッド|JIG\s*HEAD', 'ジグヘッド'),
    # "シンキング"/"フローティング" alone is almost always a minnow
    (r'シンキング|フローティング', 'ミノー'),
] + SHARED_RULES

CATEGORY_FISH = {
    'SALT': ['シーバス'],
    'BASS': ['ブラックバス'],
    'TROUT': ['トラウト'],
    '鮎': ['鮎'],
}

_SERIES = re.compile(r'^(SALT|BASS|TROUT|怪魚|鮎)\s+(.+)$')
_KANA_TAIL = re.compile(r'^(.+?)([ァ-ヶー][ァ-ヶー\s\w]*)$')
_COLOR_CODE = re.compile(r'^[A-Z]{1,4}\d{3,5}')
_SPEC = re.compile(r'(Length|Weight|Type|Hook|Ring|Range|Depth|Action)\n([^\n]+)')
_DESC = re.compile(r'製品説明\s*\n([\s\S]{10,800}?)(?=\n(?:カラーラインナップ|MOVIE|STAFF REPORT|関連ムービー|RECOMMEND)|$)')


def make_slug(name: str, url: str) -> str:
    slug = re.sub(r'[()（）]', '', fold_width(name)).lower()
    slug = re.sub(r'[^a-z0-9]+', '-', slug).strip('-')
    if slug:
        return slug
    m = re.search(r'/product/(\d+)', url)
    return f'duo-{m.group(1)}' if m else ''


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    body = '\n'.join(g(x) for x in soup.get_text('\n').splitlines() if g(x))

    category = series = kana = ''
    for h2 in soup.select('h2'):
        m = _SERIES.match(g(h2.get_text()))
        if not m:
            continue
        category = m.group(1)
        km = _KANA_TAIL.match(m.group(2))
        if km:
            series, kana = km.group(1).strip(), km.group(2).strip()
        else:
            series = m.group(2).strip()
        break

    variation = ''
    for h3 in soup.select('h3.en'):
        t = g(h3.get_text())
        if 3 < len(t) < 80 and not any(x in t for x in ('レポート', '製品概要', '製品説明')):
            variation = t
            break

    name = variation or series
    if not name and soup.title:
        name = g(soup.title.get_text()).split(' - ')[0].strip()

    specs: Dict[str, str] = {}
    for m in _SPEC.finditer(body):
        specs.setdefault(m.group(1), m.group(2).strip())

    pm = re.search(r'¥[\d,]+[（(]?税込', fold_width(body))
    price = parse_price(pm.group(0)) if pm else 0

    # "13~17g" is a range of one model; keep the lower bound
    weight_text = re.split(r'[~\-]', fold_width(specs.get('Weight', '')))[0]

    colors = []
    for card in soup.select('a.c-grid-card'):
        ps = card.select('p')
        label = g(ps[-1].get_text()) if ps else ''
        if not _COLOR_CODE.match(label):
            continue
        for im in card.select('img'):
            src = im.get('src') or ''
            if 'duo-assets' in src and 'icon_tip' not in src and not src.endswith('.svg'):
                colors.append((label, src))
                break

    dm = _DESC.search(body)
    main_image = ''
    for im in soup.select('img'):
        src = im.get('src') or ''
        if 'product_variants/main_images' in src or 'product_images' in src:
            main_image = src
            break

    return {
        'name': name,
        'name_kana': kana,
        'slug': make_slug(name, url) if name else '',
        'type_hint': specs.get('Type', ''),
        'category': category,
        'description': clip_description(dm.group(1)) if dm else '',
        'variants': [SpecVariant(
            weights=parse_weights(weight_text, assume_grams=True),
            length=parse_length(specs.get('Length', ''), assume_mm=True),
            price=price,
        )],
        'colors': colors,
        'main_image': main_image,
    }


SOURCE = Source(
    slug='duo',
    manufacturer='DUO',
    hosts=('duo-inc.co.jp',),
    parse=parse,
    needs_browser=True,
    type_rules=TYPE_RULES,
    fish_map=CATEGORY_FISH,
    wait_selector='h3.en',
)
