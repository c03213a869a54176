from __future__ import annotations
import re
from typing import Any, Dict, List

from bs4 import BeautifulSoup

from ..models import Source, SpecVariant
from ..scrape_utils import (
    find_col, fold_width, g, img_src, kana_to_fullwidth, parse_length, parse_price,
    parse_weights, slug_from_url, table_rows, text_with_breaks,
)

# name keywords first, then the catalog path
TYPE_RULES = [
    (r'WORM|ワーム|CRAWLER|クローラー', 'ワーム'),
    (r'CRAW|クロー|CREATURE|クリーチャー|BUG|バグ', 'ワーム'),
    (r'SHAD|シャッド|MINNOW|ミノー|SWIMBAIT|スイムベイト', 'ワーム'),
    (r'HAWG|ホッグ|GRUB|グラブ|TUBE|チューブ', 'ワーム'),
    (r'FLUTTER|フラッター|SHAKER|シェイカー|FINESSE', 'ワーム'),
    (r'SARDINE|サーディン|MULLET|マレット|SANDWORM|サンドワーム', 'ワーム'),
    (r'CRANK|クランク|DIME|ダイム', 'クランクベイト'),
    (r'SPY|スパイ|FRITTSIDE', 'クランクベイト'),
    (r'CHOPPO|チョッポ|POPPER|ポッパー', 'ペンシルベイト'),
    (r'JIG.*HEAD|ジグヘッド', 'ジグヘッド'),
    (r'SPINTAIL|スピンテール', 'スピンテールジグ'),
]

URL_TYPE_RULES = [
    (r'pb-fw|pb-maxscent|powerbait|pb-sw|gulp', 'ワーム'),
    (r'jig-head', 'ジグヘッド'),
]

SALT_FISH = ['シーバス', 'ヒラメ・マゴチ']
_SALT = re.compile(r'pb-sw|gulp.*salt|saltwater|sand.*worm|sardine|mullet', re.I)


def _cell(cells: List[str], i: int) -> str:
    return cells[i] if 0 <= i < len(cells) else ''


def color_key(name: str) -> str:
    return kana_to_fullwidth(g(name)).lower()


def swatches(soup: BeautifulSoup, base: str) -> Dict[str, str]:
    """alt "CODE（ジャパニーズ名）" -> image, keyed by code and by normalized name."""
    out: Dict[str, str] = {}
    for im in soup.select('.productColorValidationArea li.thumbListItem img.thumbImg'):
        alt = g(im.get('alt'))
        if not alt or re.search(r'カラー一覧|color.*chart', alt, re.I):
            continue
        src = img_src(im, base)
        code = re.match(r'^([A-Z0-9]+)\s*[（(]', alt)
        jp = re.search(r'[（(]([^）)]+)[）)]', alt)
        if code:
            out[code.group(1).upper()] = src
        out[color_key(jp.group(1) if jp else alt)] = src
    return out


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    if not soup.select_one('.contentTitle, .productSlider, .specTableWrap'):
        # redirected to a listing page
        return {'name': ''}

    title = soup.select_one('h1.contentTitle')
    name = g(title.get_text(' ')) if title else ''
    km = re.search(r'[（(]([^）)]*[ァ-ヶー]+[^）)]*)[）)]', name)

    swatch = swatches(soup, url)
    rows = table_rows(soup.select_one('.specTableWrap table'))
    colors: List[tuple] = []
    variants: List[SpecVariant] = []
    if rows:
        head, body = rows[0], rows[1:]
        ci, wi, li = find_col(head, 'カラー'), find_col(head, '自重'), find_col(head, '全長')
        pi, ni = find_col(head, '価格'), find_col(head, '製品名')
        if pi < 0:
            pi = len(head) - 1
        excl = pi >= 0 and re.search(r'本体|税抜|税別', head[pi]) is not None
        for cells in body:
            if len(cells) < 3:
                continue
            if _cell(cells, ci):
                code = re.search(r'-([A-Z0-9]+)(?:\s|$)', _cell(cells, ni))
                image = swatch.get(code.group(1).upper(), '') if code else ''
                colors.append((kana_to_fullwidth(_cell(cells, ci)), image or swatch.get(color_key(_cell(cells, ci)), '')))
            variants.append(SpecVariant(
                weights=parse_weights(_cell(cells, wi)),
                length=parse_length(_cell(cells, li)),
                price=parse_price(_cell(cells, pi), excluded=excl),
            ))

    desc = soup.select_one('.productTextArea p.contentText')
    url_type = ''
    for rx, t in URL_TYPE_RULES:
        if re.search(rx, url, re.I):
            url_type = t
            break

    return {
        'name': name,
        'name_kana': km.group(1).strip() if km else '',
        'slug': slug_from_url(url),
        'type_hint': url_type,
        'description': text_with_breaks(desc),
        'variants': variants,
        'length': parse_length(fold_width(name)),
        'colors': colors,
        'main_image': img_src(soup.select_one('.productSlider img'), url),
        'target_fish': SALT_FISH if _SALT.search(f'{url} {name}') else ['ブラックバス'],
    }


SOURCE = Source(
    slug='berkley',
    manufacturer='Berkley',
    hosts=('purefishing.jp',),
    parse=parse,
    type_rules=TYPE_RULES,
)
