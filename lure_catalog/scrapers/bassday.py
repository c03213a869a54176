from __future__ import annotations
import re
from typing import Any, Dict, List

from bs4 import BeautifulSoup

from ..classifiers import first_match
from ..models import Source, SpecVariant
from ..scrape_utils import abs_url, fold_width, g, make_slug, parse_length, parse_price, parse_weights

TYPE_RULES = [
    (r'レンジバイブ|VIB|バイブ', 'バイブレーション'),
    (r'ポッパー|POPPER', 'ポッパー'),
    (r'ダイビングペンシル|ダイペン', 'ダイビングペンシル'),
    (r'シュガペン|シンキングペンシル|シンペン', 'シンキングペンシル'),
    (r'ペンシル|PENCIL', 'ペンシルベイト'),
    (r'ミノー|MINNOW|シュガミノー', 'ミノー'),
    (r'メタルバイブ', 'メタルバイブ'),
    (r'メタルジグ|ジグ|JIG|バンジー', 'メタルジグ'),
    (r'クランク|CRANK|シュガディープ|SUGAR DEEP', 'クランクベイト'),
    (r'シャッド|SHAD', 'シャッド'),
    (r'スプーン|SPOON', 'スプーン'),
    (r'ワーム|WORM|クロー|CRAW', 'ワーム'),
    (r'トップウォーター|TOPWATER', 'トップウォーター'),
]

DEFAULT_TYPE = 'プラグ'


def detect_type(name: str, description: str) -> str:
    hit = first_match(name, TYPE_RULES)
    if hit:
        return hit
    # "シュガー 70F" style names only say F/S; the copy says minnow
    if re.search(r'ミノー|minnow', description, re.I):
        if re.search(r'\bF\b', name):
            return 'ミノー'
        if re.search(r'\bS\b', name):
            return 'ミノー'
    return first_match(description[:200], TYPE_RULES) or DEFAULT_TYPE


def detect_fish(*texts: str) -> List[str]:
    t = ' '.join(texts).lower()
    if re.search(r'ネイティブトラウト|エリア|フレッシュウォーター|トラウト', t):
        return ['トラウト']
    if re.search(r'バス\s|バスフィッシング|ブラックバス', t):
        return ['ブラックバス']
    if 'オフショア' in t:
        return ['青物']
    if 'ライトソルト' in t:
        if re.search(r'メバル|メバリング', t):
            return ['メバル']
        if re.search(r'アジ|アジング', t):
            return ['アジ']
        return ['メバル', 'アジ']
    if re.search(r'青物|ヒラマサ|ブリ|カンパチ|ショアジギ|ジギング', t):
        return ['青物']
    if re.search(r'ヒラメ|フラット', t):
        return ['ヒラメ・マゴチ']
    if re.search(r'チヌ|クロダイ|黒鯛', t):
        return ['クロダイ']
    if re.search(r'タチウオ|太刀魚', t):
        return ['タチウオ']
    return ['シーバス']


def _url(src: str, base: str) -> str:
    # relative paths climb with ../ from nested pages
    if src and not src.startswith('http'):
        src = re.sub(r'^(\.\./)+', '', src)
        return abs_url('/' + src.lstrip('/'), base)
    return src


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    title = g(soup.title.get_text()) if soup.title else ''
    names = [title.split(' | ')[0].strip()] if title.split(' | ')[0].strip() else []

    variants: List[SpecVariant] = []
    inner = soup.select_one('div.colorwrapper div.inner')
    main = ''
    if inner is not None:
        for i, p in enumerate(inner.select('p')):
            lines = [fold_width(x).strip() for x in p.get_text('\n').splitlines()]
            lines = [x for x in lines if x]
            if i == 0 and lines and '価格' not in lines[0]:
                names.append(lines[0])
            for line in lines:
                pm = re.search(r'価格[:].*?¥([\d,]+)', line)
                sm = re.search(r'サイズ[:]\s*(\d+)\s*mm', line, re.I)
                wm = re.search(r'ウ[エェ]イト[:]\s*([\d.]+)\s*g', line, re.I)
                if pm or sm or wm:
                    variants.append(SpecVariant(
                        weights=parse_weights(wm.group(0)) if wm else [],
                        length=parse_length(sm.group(1) + 'mm') if sm else None,
                        price=parse_price('¥' + pm.group(1)) if pm else 0,
                    ))
        item_img = inner.select_one('div.item img')
        if item_img is not None:
            main = _url(item_img.get('src', ''), url)

    desc = '\n\n'.join(g(el.get_text(' ')) for el in soup.select('div.colorwrapper div.subject, div.colorwrapper div.body') if g(el.get_text()))

    colors = []
    for art in soup.select('div.color article'):
        p = art.select_one('p')
        im = art.select_one('div.img img')
        cname = g(p.get_text(' ')) if p is not None else ''
        if cname:
            # data-flyout holds the zoom image
            src = (im.get('data-flyout') or im.get('src') or '') if im is not None else ''
            colors.append((cname, _url(src, url)))

    name = names[0] if names else ''
    m = re.search(r'[?&]i=(\d+)', url)
    return {
        'name': name,
        'slug': m.group(1) if m else make_slug(url, name),
        'type': detect_type(name, desc) if name else '',
        'description': desc,
        'variants': variants,
        'colors': colors,
        'main_image': main,
        'target_fish': detect_fish(title, name, desc),
    }


SOURCE = Source(
    slug='bassday',
    manufacturer='Bassday',
    hosts=('bassday.co.jp',),
    parse=parse,
    needs_browser=True,
    default_type=DEFAULT_TYPE,
    wait_selector='div.colorwrapper',
)
