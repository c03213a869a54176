from __future__ import annotations
import re
from typing import Any, Dict, List

from bs4 import BeautifulSoup

from ..classifiers import first_match
from ..models import Source, SpecVariant
from ..scrape_utils import abs_url, g, parse_length, parse_price, parse_weights

TYPE_RULES = [
    (r'ポッパー|Popper|CFP|フィード\.?ポッパー', 'ポッパー'),
    (r'シンキングペンシル|Sinking\s*Pencil|CRSP|クルーズ\s*SP|ストリーマー|Streamer|SST', 'シンキングペンシル'),
    (r'ペンシル|Pencil|Feed\.?Walking|ウォーキング', 'ペンシルベイト'),
    (r'バイブ|Vib|ローリングベイト|Rolling\s*Bait|RBM|RBS', 'バイブレーション'),
    (r'クランク|Crank|エルフィン\s*クリスタル', 'クランクベイト'),
    (r'ミノー|Minnow|K2F|K2S|TKF|TKW|TKR|TKLM|M\s*Sound|Blue\s*Ocean|ブルーオーシャン|BKF|BKLM'
     r'|コンタクト\s*フリッツ|Flitz|Feed\.?Shallow|CFS|BEZEL|NODE|ノード|ベゼル', 'ミノー'),
    (r'ジグ|Jig|メタル|Metal|PBJ|TJ|ソル|Sol', 'メタルジグ'),
    (r'シケイダー|Cicada|グラスホッパー|Grasshopper|シュリンプ|Shrimp|クリケット|Cricket|オーバル|Oval|プラグ|Plug', 'トップウォーター'),
    (r'シャッド|Shad', 'シャッド'),
]

FISH_RULES = [
    (r'青物|ヒラマサ|カンパチ|ブリ', ['青物']),
    (r'ヒラメ|フラット', ['ヒラメ・マゴチ']),
    (r'メバル|ロック', ['メバル']),
    (r'アジ|ライトゲーム', ['アジ', 'メバル']),
    (r'チヌ|クロダイ|黒鯛', ['クロダイ']),
    (r'タチウオ', ['タチウオ']),
]

_HEADERS = {
    'model': ('model', 'モデル'),
    'type': ('type', 'タイプ'),
    'length': ('length', '全長'),
    'weight': ('weight', '重量', 'ウェイト'),
    'price': ('price', '価格', '税込価格'),
}


def target_fish(name: str, breadcrumb: str) -> List[str]:
    hit = first_match(f'{name} {breadcrumb}', FISH_RULES)
    if hit:
        return hit
    if 'elfin' in breadcrumb.lower():
        return ['トラウト']
    if re.search(r'freshwater|バス', breadcrumb, re.I):
        return ['ブラックバス']
    return ['シーバス']


def make_slug(url: str) -> str:
    m = re.search(r'/product/([^/]+)\.html', url)
    if m:
        return m.group(1)
    return re.sub(r'\.html$', '', url).rstrip('/').split('/')[-1]


def _photo(src: str, base: str) -> str:
    # bare file names live under /productphoto/
    if src and not src.startswith(('http', '/', '../')):
        src = '/productphoto/' + src
    return abs_url(re.sub(r'^(\.\./)+', '/', src or ''), base)


def spec_rows(soup: BeautifulSoup) -> List[SpecVariant]:
    out: List[SpecVariant] = []
    for table in soup.select('table.table-striped'):
        head = [g(th.get_text()).lower() for th in table.select('th')]
        idx = {key: next((i for i, h in enumerate(head) if h in names), -1) for key, names in _HEADERS.items()}
        for tr in table.select('tbody tr') or table.select('tr'):
            cells = [g(td.get_text(' ')) for td in tr.find_all('td')]
            if len(cells) < 3:
                continue
            cell = {key: cells[i] if 0 <= i < len(cells) else '' for key, i in idx.items()}
            if not (cell['model'] or cell['length'] or cell['weight']):
                continue
            out.append(SpecVariant(
                weights=parse_weights(cell['weight']),
                length=parse_length(cell['length']),
                price=parse_price(cell['price']),
                label=cell['model'],
            ))
    return out


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    name = next((g(h.get_text(' ')) for h in soup.select('h2') if 1 < len(g(h.get_text())) < 100), '')
    crumb = soup.select_one('.breadcrumb')
    crumb = g(crumb.get_text(' ')) if crumb is not None else ''

    colors = []
    for el in soup.select('.yubi'):
        im = el.select_one('img')
        first = g(el.get_text('\n').strip().split('\n')[0])
        if not first or im is None or not im.get('src'):
            continue
        # "M01. パールイワシ", "No.3 チャート"
        m = re.match(r'^No\.\s*\d+\s+(.+)$', first, re.I) or re.match(r'^([A-Za-z0-9*]+)\.\s*(.+)$', first)
        colors.append((m.groups()[-1].strip() if m else first, _photo(im['src'], url)))

    photos = [im['src'] for im in soup.select('img[src*="productphoto/"]') if 's_for_mixup' not in im['src']]
    # the plain product shot has no "_" suffix; color shots do
    main = next((s for s in photos if '_' not in s), '') or next(iter(photos), '')

    desc = next((g(p.get_text(' ')) for p in soup.select('p') if 30 < len(g(p.get_text())) < 500), '')
    return {
        'name': name,
        'slug': make_slug(url),
        'type_hint': crumb,
        'type': first_match(f'{name} {crumb}', TYPE_RULES) or 'ルアー',
        'target_fish': target_fish(name, crumb),
        'description': desc,
        'variants': spec_rows(soup),
        'colors': colors,
        'main_image': _photo(main, url) if main else '',
    }


SOURCE = Source(
    slug='tacklehouse',
    manufacturer='Tackle House',
    hosts=('tacklehouse.co.jp',),
    parse=parse,
    needs_browser=True,
    price_policy='min',
    wait_selector='h2',
)
