from __future__ import annotations
import re
from typing import Any, Dict, List

from bs4 import BeautifulSoup, NavigableString

from ..classifiers import first_match
from ..models import Source, SpecVariant
from ..scrape_utils import g, img_src, meta_content, parse_length, parse_price, parse_weights

TYPE_RULES = [
    (r'バイブレーション|VIBRATION|鉄板バイブ', 'バイブレーション'),
    (r'メタルバイブ', 'メタルバイブ'),
    (r'ポッパー|POPPER', 'ポッパー'),
    (r'ダイビングペンシル|ダイペン', 'ダイビングペンシル'),
    (r'シンキングペンシル|シンペン', 'シンキングペンシル'),
    (r'ペンシル|PENCIL', 'ペンシルベイト'),
    (r'ミノー|MINNOW', 'ミノー'),
    (r'ジグヘッド', 'ジグヘッド'),
    (r'メタルジグ|METAL JIG|ジグ|JIG', 'メタルジグ'),
    (r'クランク|CRANK', 'クランクベイト'),
    (r'ワーム|WORM|シャッドテール|ピンテール|グラブ', 'ワーム'),
    (r'シャッド|SHAD', 'シャッド'),
    (r'スプーン|SPOON', 'スプーン'),
    (r'トップウォーター|TOPWATER|スイッシャー|SWISHER', 'トップウォーター'),
    (r'ブレード', 'スピンテール'),
]

FISH_RULES = [
    (r'trout|トラウト|ネイティブ|エリア|渓流', ['トラウト']),
    # シーバス and "sea bass" must not read as black bass
    (r'ブラックバス|black\s*bass|(?<!sea )\bbass\b', ['ブラックバス']),
    (r'オフショア|offshore|青物|ヒラマサ|ブリ|カンパチ|ショアジギ', ['青物']),
    (r'ヒラメ|フラット|マゴチ', ['ヒラメ・マゴチ']),
    (r'チヌ|クロダイ|黒鯛', ['クロダイ']),
    (r'タチウオ|太刀魚', ['タチウオ']),
    (r'メバル|メバリング', ['メバル']),
    (r'アジ|アジング', ['アジ']),
    (r'イカ|エギ|烏賊', ['アオリイカ']),
    (r'サワラ|サゴシ', ['サワラ']),
]


def detect_type(name: str, description: str) -> str:
    return first_match(name, TYPE_RULES) or first_match(description[:300], TYPE_RULES) or 'プラグ'


def make_slug(url: str) -> str:
    m = re.search(r'/products/([^/?#]+)', url)
    return m.group(1) if m else ''


def title_names(soup: BeautifulSoup) -> tuple[str, str]:
    """<h3><span class="en">Athlete 9S</span>アスリート 9S</h3> -> (en, ja)."""
    h3 = soup.select_one('.products_detail .pageTitle h3')
    if h3 is None:
        return meta_content(soup, 'og:title'), ''
    en = h3.select_one('span.en')
    ja = ' '.join(g(str(node)) for node in h3.children if isinstance(node, NavigableString) and g(str(node)))
    return (g(en.get_text(' ')) if en is not None else ''), ja


def spec_table(soup: BeautifulSoup) -> List[SpecVariant]:
    table = soup.select_one('.products_detail .spec .spenTab table')
    if table is None:
        return []
    head = [g(th.get_text()).lower() for th in table.select('thead tr th')]
    out = []
    for tr in table.select('tbody tr'):
        spec = SpecVariant()
        for i, cell in enumerate(tr.find_all(['th', 'td'])):
            h = head[i] if i < len(head) else ''
            text = g(cell.get_text(' '))
            if '価格' in h or 'price' in h:
                m = re.search(r'[¥￥][\d,]+', text)
                spec.price = spec.price or (parse_price(m.group(0)) if m else 0)
            if h == 'size' or 'サイズ' in h:
                spec.length = spec.length or parse_length(text)
            if h == 'weight' or re.search(r'ウ[エェ]イト|重量', h):
                spec.weights += parse_weights(text)
            elif h == 'name' or '名' in h:
                # "アスリート 9S 9g": the weight rides in the model name
                m = re.search(r'([\d.]+)\s*g\b', text, re.I)
                if m:
                    spec.weights += parse_weights(m.group(0))
        spec.label = g(tr.find(['th', 'td']).get_text()) if tr.find(['th', 'td']) is not None else ''
        out.append(spec)
    return out


def lineup_colors(soup: BeautifulSoup, base: str) -> List[tuple]:
    out = []
    for box in soup.select('.products_detail .lineup .imgBox .photoBox'):
        el = box.select_one('span.name') or box.select_one('span.lineupNameAddedStyle') or box.select_one('p')
        cname = g(el.get_text(' ')) if el is not None else ''
        if cname:
            out.append((cname, img_src(box.select_one('img'), base)))
    return out


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    en, ja = title_names(soup)
    name = f'{en} {ja}' if en and ja else (en or ja)
    tags = [g(li.get_text()) for li in soup.select('.products_detail .pageTitle ul.tagList01 li')]
    desc = '\n\n'.join(g(p.get_text(' ')) for p in soup.select('.products_detail .about p') if g(p.get_text()))
    main = img_src(soup.select_one('.sliderBox .phoList li img'), url) or meta_content(soup, 'og:image')
    return {
        'name': name,
        'slug': make_slug(url),
        'type': detect_type(name, desc) if name else '',
        'target_fish': first_match(f"{' '.join(tags)} {name} {desc}", FISH_RULES) or ['シーバス'],
        'description': desc,
        'variants': spec_table(soup),
        'colors': lineup_colors(soup, url),
        'main_image': main,
    }


SOURCE = Source(
    slug='jackson',
    manufacturer='Jackson',
    hosts=('jackson.jp',),
    parse=parse,
    needs_browser=True,
    wait_selector='.products_detail',
)
