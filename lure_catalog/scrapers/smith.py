from __future__ import annotations
import re
from typing import Any, Dict, List

from bs4 import BeautifulSoup

from ..classifiers import first_match
from ..models import Source, SpecVariant
from ..scrape_utils import g, img_src, parse_length, parse_price, parse_weights

TYPE_RULES = [
    (r"ポッパー|Popper|Torpedo|Chug|Pop'?n", 'ポッパー'),
    (r'シンキングペンシル|Sinking\s*Pencil', 'シンキングペンシル'),
    (r'ペンシル|Pencil|Spook|Zara|ザラ', 'ペンシルベイト'),
    (r'バイブ|Vib|ソナー|Sonar', 'バイブレーション'),
    (r'クランク|Crank', 'クランクベイト'),
    (r'シャッド|Shad', 'シャッド'),
    (r'ミノー|Minnow|D-コンタクト|D-Contact|D-Compact|D-Concept|D-Incite|Cherry\s*Blood|チェリーブラッド'
     r'|パニッシュ|Panish|サラナ|Saruna|Haluca|ハルカ|Still|スティル|CB.*LL', 'ミノー'),
    (r'メタルジグ|Metal\s*Jig|マサムネ|Masamune|ナガマサ|Nagamasa|Misago|ミサゴ|TG\s*Slow|Bay\s*Blue', 'メタルジグ'),
    (r'ブレード|Blade|スピンテール', 'バイブレーション'),
    (r'スプーン|Spoon|ARS|Pure|ピュア|Bisen|美泉|Heaven|ヘブン|Back\s*&\s*Forth|Edge\s*Dia|Drop\s*Dia|F-Select', 'スプーン'),
    (r'スピナー|Spinner|Niakis|ニアキス|AR-S|Hyper\s*Blade', 'スピナー'),
    (r'ジグヘッド|Jighead', 'ジグヘッド'),
    (r'フロッグ|Frog', 'フロッグ'),
    (r'クローラー|Crawler', 'クローラーベイト'),
    (r'バズベイト|Buzzbait', 'バズベイト'),
    (r'ジグ|Jig', 'メタルジグ'),
    (r'ワーム|Worm|Curly|Grub|Shrimp|シュリンプ|クロー|Craw|IMO|イモ|Swimmy', 'ワーム'),
    (r'トップウォーター|Topwater|Bud|Moss\s*Boss', 'トップウォーター'),
]


def target_fish(name: str, category: str) -> List[str]:
    """Name keywords first, then the /product/<category>/ path segment."""
    both = f'{name} {category}'
    rules = [
        (r'メバル|mebaru', ['メバル']),
        (r'青物|ヒラマサ|カンパチ|ブリ|gunship', ['青物']),
        (r'ヒラメ|フラット', ['ヒラメ・マゴチ']),
        (r'タチウオ', ['タチウオ']),
        (r'チヌ|クロダイ|黒鯛', ['クロダイ']),
        (r'イカ|エギ|egisharpner', ['アオリイカ']),
        (r'マゴチ', ['ヒラメ・マゴチ']),
    ]
    if re.search(r'アジ|aji|ace', both, re.I) and re.search(r'salt', category, re.I):
        return ['アジ']
    hit = first_match(both, rules)
    if hit:
        return hit
    for rx, fish in ((r'ナマズ|catfish', 'ナマズ'), (r'trout', 'トラウト'), (r'heddon|bass', 'ブラックバス')):
        if re.search(rx, category, re.I):
            return [fish]
    return ['シーバス']


def detect_type(name: str, spec_types: str) -> str:
    hit = first_match(f'{name} {spec_types}', TYPE_RULES)
    if hit:
        return hit
    # "シンキング" alone in the TYPE row means a minnow
    if re.search(r'シンキング|フローティング|サスペンド', spec_types):
        return 'ミノー'
    return 'ルアー'


def make_slug(url: str) -> str:
    m = re.search(r'/product/([^/]+)/([^/]+)/', url)
    if m:
        return f'{m.group(1)}-{m.group(2)}'
    return '-'.join(re.sub(r'\.html$', '', url).rstrip('/').split('/')[-2:])


def category_of(url: str) -> str:
    m = re.search(r'/product/([^/]+)/', url)
    return m.group(1) if m else ''


def spec_blocks(soup: BeautifulSoup) -> tuple[List[SpecVariant], List[str]]:
    """One .pro_jouhou_in table per model; label cells are LENGTH / WEIGHT / TYPE / PRICE."""
    variants: List[SpecVariant] = []
    types: List[str] = []
    for block in soup.select('.pro_jouhou_in'):
        spec: Dict[str, str] = {}
        for tr in block.select('tr'):
            tds = tr.find_all('td')
            if len(tds) >= 2:
                spec.setdefault(g(tds[0].get_text()).upper(), g(tds[1].get_text(' ')))
        if not any(spec.get(k) for k in ('LENGTH', 'WEIGHT', 'PRICE')):
            continue
        m = re.search(r'[¥￥][\d,]+', spec.get('PRICE', ''))
        variants.append(SpecVariant(
            weights=parse_weights(spec.get('WEIGHT')),
            length=parse_length(re.sub(r'ミリ', 'mm', spec.get('LENGTH', ''))),
            # list prices are tax-excluded
            price=parse_price(m.group(0), excluded=True) if m else 0,
        ))
        if spec.get('TYPE') and spec['TYPE'] not in types:
            types.append(spec['TYPE'])
    return variants, types


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    name = g(soup.title.get_text()) if soup.title else ''
    catch = soup.select_one('.pro_toptext_komidashi span.tx12')
    body = soup.select_one('.pro_toptext p.mb20') or soup.select_one('.pro_toptext p')
    desc = '\n'.join(g(el.get_text(' ')) for el in (catch, body) if el is not None and g(el.get_text()))

    variants, types = spec_blocks(soup)

    colors = []
    for div in soup.select('.pro_content_color'):
        p = div.select_one('p.tx11')
        im = div.select_one('a > img') or div.select_one('img')
        # "12. パールチャート" -> "パールチャート"
        cname = re.sub(r'^\d+\.\s*', '', g(p.get_text())) if p is not None else ''
        if cname and im is not None:
            colors.append((cname, img_src(im, url)))

    category = category_of(url)
    return {
        'name': name,
        'slug': make_slug(url),
        'type': detect_type(name, ' '.join(types)) if name else '',
        'target_fish': target_fish(name, category),
        'description': desc,
        'variants': variants,
        'colors': colors,
        'main_image': img_src(soup.select_one('.pro_topimg img'), url),
    }


SOURCE = Source(
    slug='smith',
    manufacturer='SMITH',
    hosts=('smith.jp',),
    parse=parse,
    needs_browser=True,
    price_policy='min',
    wait_selector='.pro_toptext',
)
