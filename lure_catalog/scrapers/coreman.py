from __future__ import annotations
import json
import re
from typing import Any, Dict, List
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup

from ..models import Source, SpecVariant
from ..scrape_utils import g, img_src, parse_length, parse_price, parse_weights

# product codes (VJ-16, IP-26 ...) identify the family
TYPE_RULES = [
    (r'バイブレーション\s*ジグヘッド|VIBRATION\s*JIGHEAD|VJ-', 'バイブレーションジグヘッド'),
    (r'ローリング\s*ジグヘッド|ROLLING\s*JIGHEAD|RJ-', 'ローリングジグヘッド'),
    (r'アイアン\s*ジグヘッド|IRON\s*JIGHEAD|IJ-', 'アイアンジグヘッド'),
    (r'パワーブレード|POWER\s*BLADE|PB-', 'ブレードベイト'),
    (r'アイアンプレート|IRON\s*PLATE|IP-', 'メタルバイブ'),
    (r'バックチャッター|BACK\s*CHATTER|BC-', 'バイブレーション'),
    (r'ゼッタイ|ZETTAI|CZ-', 'メタルジグ'),
    (r'パワーヘッド|POWER\s*HEAD|PH-', 'ジグヘッド'),
    (r'ダートヘッド|DART\s*HEAD', 'ジグヘッド'),
    (r'アルカリ|ALKALI', 'ワーム'),
    (r'シルバークロー|SILVER\s*CLAW', 'フック'),
    (r'ブースター|BOOSTER', 'ブレードベイト'),
]

_SPEC_BLOCK = re.compile(r'■\s*(?:LURE\s+|SYSTEM\s+)?SPEC\s*■([\s\S]*?)(?=■|カラーチャート|Color|$)', re.I)
_PRICE = re.compile(r'(?:PRICE\s*:\s*)?\d[\d,]*\s*(?:円\s*[(]\s*税別|JPY\s*[(]\s*\+\s*Tax)', re.I)


def make_slug(url: str) -> str:
    decoded = unquote(url)
    m = re.search(r'/product_lure/([^/?#]+)', decoded)
    if m:
        return m.group(1).lower()
    segs = [s for s in urlparse(decoded).path.split('/') if s]
    return segs[-1].lower() if segs else ''


def _price(text: str) -> int:
    return parse_price(re.sub(r'\s*JPY', '円', text or ''), excluded=True)


def breadcrumb(soup: BeautifulSoup) -> str:
    for script in soup.select('script[type="application/ld+json"]'):
        try:
            data = json.loads(script.string or '')
        except ValueError:
            continue
        if isinstance(data, dict) and data.get('@type') == 'BreadcrumbList':
            return ' > '.join(str(i.get('name', '')) for i in data.get('itemListElement') or [])
    return ''


def color_list(soup: BeautifulSoup, body: str, base: str) -> List[tuple]:
    out: List[tuple] = []
    seen = set()
    for im in soup.select('img[src*="/color-"]'):
        src = img_src(im, base)
        if src in seen:
            continue
        seen.add(src)
        name = ''
        parent = im.parent
        if parent is not None and parent.name == 'figure' and parent.select_one('figcaption'):
            name = g(parent.select_one('figcaption').get_text())
        if not name and parent is not None:
            sib = parent.find_next_sibling()
            t = g(sib.get_text()) if sib is not None and sib.name == 'p' else ''
            if re.match(r'^#\d', t) or '/' in t:
                name = t
        name = name or g(im.get('alt'))
        if not name:
            m = re.search(r'color-(\d+)', src)
            name = f'#{m.group(1)}' if m else ''
        out.append((name, src))
    if out:
        return out

    figures = soup.select('figure')
    start = next((i + 1 for i, f in enumerate(figures)
                  if f.select_one('figcaption') and re.search(r'COLOR\s*LINEUP', f.select_one('figcaption').get_text(), re.I)), None)
    if start is not None:
        for f in figures[start:]:
            cap = f.select_one('figcaption')
            im = f.select_one('img')
            if cap is not None and im is not None and re.match(r'^#\d+', g(cap.get_text())):
                out.append((g(cap.get_text()), img_src(im, base)))
    if out:
        return out

    # text-only lineup: every color shares the product shot
    m = re.search(r'COLOR\s*LINEUP\s*■?([\s\S]*?)$', body, re.I)
    shot = next((img_src(im, base) for im in soup.select('img[src*="/wp-content/uploads/"]')
                 if '1024x1024' in im['src'] and 'logo' not in im['src']), '')
    if m and shot:
        out = [(e.strip(), shot) for e in re.findall(r'#\d+\s+[^\n#]+', m.group(1))]
    return out


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    body = soup.get_text('\n')
    title = g(soup.title.get_text()) if soup.title else ''
    name = title.split(' | ')[0].strip() if ' | ' in title else ''
    if not name:
        h = soup.select_one('h1, h2')
        name = g(h.get_text(' ')) if h is not None else ''

    desc = ''
    for el in soup.select('.e-con p, .e-con .elementor-widget-text-editor, .entry-content p, .post-content p, article p, .page-content p'):
        t = g(el.get_text(' '))
        if len(t) > 50 and not any(k in t for k in ('■ LURE SPEC', '■ SPEC', '■ SYSTEM SPEC', 'LENGTH', 'WEIGHT')) \
                and not re.match(r'^\d+円', t):
            desc = t
            break
    if not desc:
        meta = soup.select_one('meta[name="description"]')
        desc = g(meta.get('content')) if meta is not None else ''

    spec_m = _SPEC_BLOCK.search(body)
    spec = spec_m.group(1)[:1000] if spec_m else ''
    price_m = _PRICE.search(body)
    variants = [SpecVariant(
        weights=parse_weights(spec),
        length=parse_length(spec),
        price=_price(price_m.group(0)) if price_m else 0,
    )]
    # one "■ SPEC ■" block per model on multi-size pages
    for section in re.split(r'■\s*(?:LURE\s+)?SPEC\s*■', body, flags=re.I)[1:]:
        section = section[:500]
        lm = re.search(r'LENGTH\s*[:：]\s*([\d.]+\s*mm)', section, re.I)
        wm = re.search(r'WEIGHT\s*[:：]?\s*(.*?)(?:\n|$)', section, re.I)
        pm = re.search(r'(?:PRICE\s*[:：]\s*)?\d[\d,]*\s*(?:円|JPY)[^\n]*', section)
        variants.append(SpecVariant(
            weights=parse_weights(wm.group(1)) if wm else [],
            length=parse_length(lm.group(1)) if lm else None,
            price=_price(pm.group(0)) if pm else 0,
        ))

    main = soup.select_one('img[src*="main-img"]')
    if main is None:
        main = next((im for im in soup.select('img[src*="/img/product/"]') if '/color-' not in im['src']), None)
    if main is None:
        main = next((im for im in soup.select('img[src*="/wp-content/uploads/"]')
                     if int(re.sub(r'\D', '', im.get('width') or '') or 0) > 200 or 'resize' in im['src']), None)

    slug = make_slug(url)
    return {
        'name': name or slug.replace('-', ' '),
        'slug': slug,
        'breadcrumb': breadcrumb(soup),
        'description': desc,
        'variants': variants,
        'colors': color_list(soup, body, url),
        'main_image': img_src(main, url),
        'target_fish': ['シーバス'],
    }


SOURCE = Source(
    slug='coreman',
    manufacturer='COREMAN',
    hosts=('coreman.jp',),
    parse=parse,
    needs_browser=True,
    type_rules=TYPE_RULES,
    # single-finish products list no colors; the product itself is the one color
    single_finish=True,
    wait_selector='.e-con',
)
