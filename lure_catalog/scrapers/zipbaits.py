from __future__ import annotations
import re
from typing import Any, Dict, List

from bs4 import BeautifulSoup

from ..classifiers import first_match
from ..models import Source, SpecVariant
from ..scrape_utils import abs_url, fold_width, g, parse_length, parse_price, parse_weights

TYPE_RULES = [
    (r'ポッパー|Popper', 'ポッパー'),
    (r'シンキングペンシル|Sinking\s*Pencil', 'シンキングペンシル'),
    (r'ペンシル|Pencil', 'ペンシルベイト'),
    (r'バイブ|Vib', 'バイブレーション'),
    (r'クランク|Crank', 'クランクベイト'),
    (r'シャッド|Shad', 'シャッド'),
    (r'ミノー|Minnow|Rigge|リッジ|Orbit|オービット|ZBL', 'ミノー'),
    (r'メタルジグ|Metal\s*Jig', 'メタルジグ'),
    (r'ブレード|Blade|スピンテール', 'バイブレーション'),
    (r'スプーン|Spoon', 'スプーン'),
    (r'ジグヘッド|Jighead', 'ジグヘッド'),
    (r'ジグ|Jig', 'メタルジグ'),
    (r'ワーム|Worm', 'ワーム'),
    (r'トップウォーター|Topwater', 'トップウォーター'),
]

# title reads "ITEM | CATEGORY | ZIPBAITS"
FISH_RULES = [
    (r'青物|ヒラマサ|カンパチ|ブリ', ['青物']),
    (r'ヒラメ|フラット', ['ヒラメ・マゴチ']),
    (r'タチウオ', ['タチウオ']),
    (r'メバル|ロック', ['メバル']),
    (r'アジ', ['アジ', 'メバル']),
    (r'チヌ|クロダイ|黒鯛|kurodai', ['クロダイ']),
    (r'trout|トラウト', ['トラウト']),
    (r'light\s*salt|ライトソルト', ['メバル', 'アジ']),
    (r'sea\s*bass|シーバス', ['シーバス']),
    (r'bass|バス', ['ブラックバス']),
]


def _url(src: str, base: str) -> str:
    return abs_url(re.sub(r'^(\.\./)+', '/', src or ''), base)


def model_spec(text: str) -> tuple[SpecVariant, str]:
    """"サイズ：70mm / ウェイト：8.5g / ￥1,700（税抜）/ タイプ：フローティング" lines."""
    t = fold_width(text)
    wm = re.search(r'ウ[ェエ]イト:\s*(.+)', t)
    lm = re.search(r'サイズ:\s*(.+)', t)
    pm = re.search(r'¥[\d,]+\s*[(]税抜', t) or re.search(r'¥[\d,]+', t)
    tm = re.search(r'タイプ:\s*(\S+)', t)
    return SpecVariant(
        weights=parse_weights(wm.group(1)) if wm else [],
        length=parse_length(lm.group(1).replace('ミリ', 'mm')) if lm else None,
        # bare ¥ amounts on this site are tax-excluded too
        price=parse_price(pm.group(0), excluded=True) if pm else 0,
    ), (tm.group(1) if tm else '')


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    parts = [p.strip() for p in (soup.title.get_text() if soup.title else '').split('|')]
    name = parts[0] if parts else ''
    category = parts[1] if len(parts) > 1 else ''

    area = soup.select_one('#colorArea')
    variants: List[SpecVariant] = []
    types: List[str] = []
    colors = []
    main = ''
    desc = ''
    if area is not None:
        desc = ' '.join(g(el.get_text(' ')) for el in area.select('.subject, .body') if g(el.get_text()))
        item = area.select_one('.item')
        for p in item.select('p') if item is not None else []:
            text = p.get_text('\n').strip()
            if len(text) < 10:
                continue
            spec, lure_type = model_spec(text)
            variants.append(spec)
            if lure_type and lure_type not in types:
                types.append(lure_type)
            im = p.parent.select_one('img') if p.parent is not None else None
            if not main and im is not None:
                main = _url(im.get('src'), url)
        for art in area.select('.color article'):
            p = art.select_one('p')
            im = art.select_one('.img img') or art.select_one('img')
            text = g(p.get_text(' ')) if p is not None else ''
            # "123 チャートバックパール": drop the code
            m = re.match(r'^[\dA-Za-z]+\s+(.+)$', text)
            if text and im is not None and im.get('src'):
                colors.append((m.group(1).strip() if m else text, _url(im['src'], url)))
        logo = area.select_one('.logo img')
        if not main and logo is not None and '.svg' not in (logo.get('src') or ''):
            main = _url(logo.get('src'), url)

    m = re.search(r'[?&]i=(\d+)', url) or re.search(r'(\d+)\s*$', url)
    return {
        'name': name,
        'slug': m.group(1) if m else '',
        'type': first_match(f"{name} {' '.join(types)}", TYPE_RULES) or 'ルアー',
        'target_fish': first_match(f'{name} {category}', FISH_RULES) or ['シーバス'],
        'description': desc,
        'variants': variants,
        'colors': colors,
        'main_image': main,
    }


SOURCE = Source(
    slug='zipbaits',
    manufacturer='ZIPBAITS',
    hosts=('zipbaits.com',),
    parse=parse,
    needs_browser=True,
    price_policy='min',
    wait_selector='#colorArea .item',
)
