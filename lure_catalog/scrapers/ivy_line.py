from __future__ import annotations
import re
from typing import Any, Dict, List

from bs4 import BeautifulSoup

from ..models import Source, SpecVariant
from ..scrape_utils import (
    abs_url, clip_description, figure_colors, find_col, g, img_src, label_specs,
    meta_content, parse_length, parse_price, parse_weights, table_rows,
)

# area trout specialist: anything unmatched is a spoon
TYPE_RULES = [
    (r'スプーン|spoon', 'スプーン'),
    (r'メタルバイブ|metal\s*vib', 'メタルバイブ'),
    (r'バイブレーション|vibration', 'バイブレーション'),
    (r'クランク|crank', 'クランクベイト'),
    (r'ミノー|minnow', 'ミノー'),
    (r'プラグ|plug', 'プラグ'),
    (r'ペンシル|pencil', 'ペンシルベイト'),
    (r'ポッパー|popper', 'ポッパー'),
    (r'ジグ|jig', 'メタルジグ'),
]


def _name(soup: BeautifulSoup) -> str:
    h1 = soup.select_one('h1')
    if h1 is not None and g(h1.get_text()):
        return g(h1.get_text(' '))
    for raw in (g(soup.title.get_text()) if soup.title else '', meta_content(soup, 'og:title')):
        # titles read "NAME - 愛知県の釣具メーカー | IVY LINE"
        name = re.split(r'\s*[|｜]', re.sub(r'\s*-\s*愛知.*$', '', raw))[0].strip()
        if name:
            return name
    return ''


def make_slug(url: str) -> str:
    segs = [s for s in re.sub(r'[?#].*$', '', url).split('/')[3:] if s]
    if 'products' in segs and segs.index('products') + 1 < len(segs):
        return segs[segs.index('products') + 1].lower()
    return segs[-1].lower() if segs else ''


def spec_variants(tables) -> List[SpecVariant]:
    """Header-row tables (WEIGHT | SIZE | PRICE) give one variant per row."""
    out: List[SpecVariant] = []
    for table in tables:
        rows = table_rows(table)
        if len(rows) < 2:
            continue
        head = rows[0]
        wi = find_col(head, 'WEIGHT', '重量', 'ウエイト')
        si = find_col(head, 'SIZE', 'サイズ', '全長', 'LENGTH')
        pi = find_col(head, 'PRICE', '価格', '円')
        if max(wi, si, pi) < 1:
            continue
        for r in rows[1:]:
            cell = dict(enumerate(r))
            out.append(SpecVariant(
                weights=parse_weights(cell.get(wi, '')),
                length=parse_length(cell.get(si, '')),
                price=parse_price(cell.get(pi, '')),
            ))
    return out


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    name = _name(soup)

    main = meta_content(soup, 'og:image') or img_src(soup.select_one('img.wp-post-image, img.postThumb, img.post-thumbnail'), url)
    crumb = soup.select_one('nav.breadcrumb, div.breadcrumb, [class*="breadcrumb"]')

    desc = meta_content(soup, 'description')
    if len(desc) <= 20:
        desc = ''
        content = soup.select_one('.post_content, .entry-content, .swell-block')
        for scope, min_len, skip in ((content, 30, r'SPEC|FEATURE|COLOR|スペック|カラー|特長'),
                                     (soup, 40, r'SPEC|COLOR|HOME|PRODUCTS|特長|スペック|カラー')):
            if scope is None:
                continue
            desc = next((g(p.get_text(' ')) for p in scope.select('p')
                         if len(g(p.get_text())) > min_len and not re.search(skip, g(p.get_text())[:15], re.I)), '')
            if desc:
                break

    tables = [t for t in soup.select('table')
              if re.search(r'weight|size|price|hook|重量|サイズ|価格|¥|￥', t.get_text(' '), re.I)]
    variants = spec_variants(tables)
    weights, length, price = label_specs(tables)
    spec_text = ' '.join(g(t.get_text(' ')) for t in tables)
    variants.append(SpecVariant(
        weights=weights if weights or variants else parse_weights(spec_text),
        length=length,
        price=price,
    ))
    if not any(v.length for v in variants):
        variants[-1].length = parse_length(spec_text)
    if not any(v.price for v in variants):
        variants[-1].price = parse_price(spec_text)

    colors = []
    for cname, image in figure_colors(soup, url):
        # captions lead with an item code: "A12 オリーブ"
        cname = re.sub(r'^[A-Z]\d+\s*', '', cname).strip() or cname
        if len(cname) < 50 and not re.search(r'spec|スペック|price|価格|feature|特長', cname, re.I):
            colors.append((cname, image))
    if not colors:
        gallery = soup.select_one('[class*="gallery"], [class*="color"], [id*="color"]')
        if gallery is not None:
            colors = [(g(im.get('alt')), img_src(im, url)) for im in gallery.select('img') if g(im.get('alt'))]

    return {
        'name': name,
        'slug': make_slug(url),
        'breadcrumb': g(crumb.get_text(' ')) if crumb is not None else '',
        'description': clip_description(desc),
        'variants': variants,
        'colors': colors,
        'main_image': abs_url(main, url),
        # the whole lineup is for trout, native or area
        'target_fish': ['トラウト'],
    }


SOURCE = Source(
    slug='ivy-line',
    manufacturer='IVY LINE',
    hosts=('ivyline.jp',),
    parse=parse,
    type_rules=TYPE_RULES,
    default_type='スプーン',
)
