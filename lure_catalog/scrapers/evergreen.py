from __future__ import annotations
import re
from typing import Any, Dict, List
from urllib.parse import parse_qs, urljoin, urlparse

from bs4 import BeautifulSoup

from ..models import Source, SpecVariant
from ..scrape_utils import abs_url, clip_description, g, parse_length, parse_price, parse_weights, slug_from_url

TYPE_RULES = [
    (r'ビッグベイト|ビッグ・ベイト|BIG\s?BAIT', 'ビッグベイト'),
    (r'クランク|CRANK', 'クランクベイト'),
    (r'バイブレーション|VIBRATION|VIB', 'バイブレーション'),
    (r'ミノー|MINNOW|ジャークベイト|JERKBAIT', 'ミノー'),
    (r'シャッド|SHAD', 'シャッド'),
    (r'トップウォーター|TOP\s?WATER|ポッパー|POPPER|ペンシル|PENCIL', 'トップウォーター'),
    (r'プロップ|PROP', 'プロップベイト'),
    (r'フロッグ|FROG', 'フロッグ'),
    (r'スピナーベイト|SPINNER\s?BAIT', 'スピナーベイト'),
    (r'バズベイト|BUZZ\s?BAIT', 'バズベイト'),
    (r'チャターベイト|CHATTER', 'ブレードジグ'),
    (r'ワイヤーベイト|WIRE\s?BAIT', 'ワイヤーベイト'),
    (r'メタルジグ|METAL\s?JIG', 'メタルジグ'),
    (r'ジグ|JIG', 'ラバージグ'),
    (r'スプーン|SPOON', 'スプーン'),
    (r'エギ|\bEGI\b|SQUID', 'エギ'),
    (r'タイラバ|TAIRABA', 'タイラバ'),
    (r'シーバス|SEA\s?BASS', 'シーバスルアー'),
    (r'スイムベイト|SWIM\s?BAIT', 'スイムベイト'),
]


def make_slug(url: str) -> str:
    m = re.search(r'/goods_list/([^/]+)\.html', url, re.I)
    return m.group(1).lower() if m else slug_from_url(url)


def full_image(href: str, base: str) -> str:
    """Color links go through resizeimg.php?image=../path; unwrap to the original."""
    if not href:
        return ''
    q = parse_qs(urlparse(href).query).get('image')
    if q:
        path = re.sub(r'^\.\./', '/', q[0])
        return urljoin(base, path if path.startswith('/') else '/' + path)
    if 'resizeimg' in href:
        return ''
    return abs_url(href, base)


def spec_tables(soup: BeautifulSoup) -> List[SpecVariant]:
    out: List[SpecVariant] = []
    for table in soup.select('table.spec'):
        length = weight = price = ''
        for tr in table.select('tr'):
            cells = [g(c.get_text(' ')) for c in tr.find_all(['th', 'td'])]
            # two label/value pairs per row: 全長 | x | 自重 | y
            pairs = dict(zip(cells[0::2], cells[1::2]))
            length = length or pairs.get('全長', '')
            weight = weight or pairs.get('自重', '')
            price = price or pairs.get('価格', '')
        out.append(SpecVariant(
            weights=parse_weights(weight),
            length=parse_length(length),
            price=parse_price(price, excluded=True),
        ))
    return out


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    name = next((g(h.get_text(' ')) for h in soup.select('h2') if g(h.get_text()) and g(h.get_text()) != 'Search'), '')
    if not name and soup.title:
        t = g(soup.title.get_text())
        name = t.rsplit(' - ', 1)[1].strip() if ' - ' in t else ''
    slug = make_slug(url)

    crumb = soup.select_one('ol')
    desc = ''
    lead = soup.select_one('.titleArea p')
    if lead is not None and len(g(lead.get_text(' '))) > 30:
        desc = g(lead.get_text(' '))
    if not desc:
        for p in (soup.select_one('#contents') or soup).select('p'):
            t = g(p.get_text(' '))
            if len(t) > 30 and 'Copyright' not in t and '©' not in t:
                desc = t
                break
    if not desc:
        feats = [g(s.get_text()).lstrip('■').strip() for s in soup.select('li.item-feature strong')]
        desc = clip_description('。'.join(f for f in feats if len(f) > 5))

    colors = []
    for li in soup.select('ul.ccswitch_ul li'):
        strong = li.select_one('strong')
        img = li.select_one('img')
        a = li.select_one('a')
        label = g(strong.get_text()) if strong is not None else ''
        # ■/【 entries are section labels, not colors
        if not label or img is None or label.startswith(('■', '【')):
            continue
        image = full_image(a.get('href', '') if a is not None else '', url) or abs_url(img.get('src'), url)
        if image:
            colors.append((label, image))

    srcs = [im.get('src', '') for im in soup.select('img')]
    main = next((s for s in srcs if 'goods_detail' in s and '_08.' in s), '') or \
        next((s for s in srcs if 'goods_detail' in s and '_07.' in s), '')

    return {
        'name': name or slug.replace('-', ' '),
        # product names are already katakana
        'name_kana': name,
        'slug': slug,
        'breadcrumb': g(crumb.get_text(' ')) if crumb is not None else '',
        'description': desc,
        'variants': spec_tables(soup),
        'colors': colors,
        'main_image': main,
    }


SOURCE = Source(
    slug='evergreen',
    manufacturer='EVERGREEN INTERNATIONAL',
    hosts=('evergreen-fishing.com',),
    parse=parse,
    needs_browser=True,
    type_rules=TYPE_RULES,
    default_fish=('ブラックバス',),
    wait_selector='h2',
)
