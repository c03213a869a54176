from __future__ import annotations
import re
from typing import Any, Dict, List

from bs4 import BeautifulSoup

from ..classifiers import first_match
from ..models import Source, SpecVariant
from ..scrape_utils import g, img_src, meta_content, parse_length, parse_weights

TYPE_RULES = [
    (r'ミノー|Minnow|ダーター|Darter|ダイバー|Diver|シャローランナー|Shallow\s*Runner', 'ミノー'),
    (r'シャッド|Shad', 'シャッド'),
    (r'クランク|Crank', 'クランクベイト'),
    (r'バイブ|Vib', 'バイブレーション'),
    (r'ポッパー|Popper|ポップ|Pop|バブルジェット|Bubble\s*Jet', 'ポッパー'),
    (r'ペンシル|Pencil|ウォータードライブ|Water\s*Drive', 'ペンシルベイト'),
    (r'SBショット|SBシュート|SBダイブ|ソニックブーム|Sonic\s*Boom|バレット(ファスト|ダイブ|ブル)|Bullet\s*(Fast|Dive|Bull)'
     r'|ヘビーショット|Heavy\s*Shot|モンスターショット|Monster\s*Shot', 'シンキングペンシル'),
    (r'ジグ|Jig|ブランカ|Blanca|ソリッドスピン|Solid\s*Spin', 'メタルジグ'),
    (r'ラバー|Rubber|タイラバ|インチク|スライドヘッド|Slide\s*Head', 'タイラバ'),
    (r'トップ|Top', 'トップウォーター'),
    (r'ワーム|Worm', 'ワーム'),
    (r'スクアート|Squat|マグナム|Magnum', 'プラグ'),
]

# matched against "<name> <url>"
FISH_RULES = [
    (r'trout|トラウト|ストゥープ|ヘビーフラット|ボトムスキップ|ヘビートゥイッチ', ['トラウト']),
    (r'tachi|タチウオ|タチ魚', ['タチウオ']),
    (r'madai|マダイ|タイラバ|インチク|ラ\s*トゥール', ['マダイ']),
    (r'kurodai|クロダイ|チヌ', ['クロダイ']),
    (r'flat|フラット|ヒラメ', ['ヒラメ・マゴチ']),
    (r'rock|ロック|メバル|カサゴ', ['メバル', 'ロックフィッシュ']),
    (r'light\s*game|ライトゲーム|アジ', ['アジ', 'メバル']),
    (r'青物|ブリ|ヒラマサ|カンパチ|ショア|ジギング|モンスターショット|ボニータ|ブランカ|マグナム', ['青物']),
    (r'bass|バス|フレッシュ|クランク|シャッド', ['ブラックバス']),
]

_OG_TAIL = re.compile(r'\s*-\s*釣具の総合メーカー\s*デュエル\s*$')


def name_slug(english: str, japanese: str) -> str:
    """"Hardcore Minnow 90mm/H2 120mm" -> "hardcore-minnow"."""
    base = english or japanese
    base = re.sub(r'\s+\d+\s*mm(?:/.*)?$', '', base)
    base = re.sub(r'\s+\d+\w*(?:/\d+\w*)+\s*$', '', base)
    base = re.sub(r'\s+\d+\+\s+\d+\w+(?:/.*)?$', '', base)
    base = re.sub(r'[®™©（）()【】\[\]]', '', base)
    if english:
        base = re.sub(r'[^\x20-\x7E]', '', base)
    base = re.sub(r'[^a-zA-Z0-9-]', '', re.sub(r'\s+', '-', base)).lower()
    return re.sub(r'-+', '-', base).strip('-')


def spec_rows(soup: BeautifulSoup) -> List[SpecVariant]:
    """Columns: order no, type, size, weight, ... price (9th, always open price)."""
    out = []
    for tr in soup.select('.p-spec-table tbody tr'):
        cells = [g(td.get_text(' ')) for td in tr.find_all('td')]
        if len(cells) < 5:
            continue
        out.append(SpecVariant(
            weights=parse_weights(cells[3]),
            length=parse_length(cells[2]),
            label=cells[0],
        ))
    return out


def product_colors(soup: BeautifulSoup, base: str) -> List[tuple]:
    out = []
    for wrapper in soup.select('.p-product-list_wrapper'):
        body = wrapper.select_one('.p-product-list_body')
        if body is None:
            continue
        h2 = body.select_one('h2.p-product-list_ttl')
        h3 = body.select_one('h3')
        code = re.sub(r'^\d+\.', '', g(h2.get_text())) if h2 is not None else ''
        cname = (g(h3.get_text()) if h3 is not None else '') or code
        first = next(iter(wrapper.find_all(recursive=False)), None)
        src = img_src(first.select_one('img'), base) if first is not None else ''
        # colors without a photo are placeholders for unreleased sizes
        if cname and src:
            out.append((cname, src))
    return out


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    title = soup.select_one('h1.l-hero-detail_ttl')
    main_span = title.select_one('span._main') if title is not None else None
    sub_span = title.select_one('span._sub') if title is not None else None
    main_text = re.split(r'\s{2,}', main_span.get_text().strip())[0].strip() if main_span is not None else ''
    sub = g(sub_span.get_text()) if sub_span is not None else ''
    name = _OG_TAIL.sub('', meta_content(soup, 'og:title')).strip() or main_text
    full = f'{name} {sub}' if sub else name

    desc_el = soup.select_one('.p-product-text, .product-description, .p-detail-text')
    return {
        'name': name,
        'slug': name_slug(sub, name),
        'type': (first_match(full, TYPE_RULES) or 'ルアー') if name else '',
        'target_fish': first_match(f'{full} {url}', FISH_RULES) or ['シーバス'],
        'description': g(desc_el.get_text(' ')) if desc_el is not None else '',
        'variants': spec_rows(soup),
        # every item is オープン価格
        'price': 0,
        'colors': product_colors(soup, url),
        'main_image': img_src(soup.select_one('.p-slick-slide_img img, .slick-slide img'), url),
    }


SOURCE = Source(
    slug='duel',
    manufacturer='DUEL',
    hosts=('duel.co.jp',),
    parse=parse,
    needs_browser=True,
    wait_selector='h1.l-hero-detail_ttl',
)
