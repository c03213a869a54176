from __future__ import annotations
import re
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from ..models import Source, SpecVariant
from ..scrape_utils import (
    OZ_TO_GRAMS, abs_url, fold_width, g, no_query, parse_price, slug_from_url, text_with_breaks,
)

_BLUE = ['マグロ', 'ヒラマサ', 'カンパチ', 'ブリ']
_GT = ['マグロ', 'ヒラマサ', 'カンパチ', 'GT']

# page -> (name, slug, type, fish); product pages carry no usable title
PRODUCTS = {
    'lure-ns-jig.html': ('NS JIG', 'ns-jig', 'メタルジグ', _BLUE),
    'lure-kalchi-jig.html': ('KALCHI SUPER LONG JIG', 'kalchi-super-long-jig', 'メタルジグ', _BLUE),
    'lure-keitan.html': ('KEITAN JIG', 'keitan-jig', 'メタルジグ', _BLUE),
    'lure-drift-tune.html': ('Drift tune', 'drift-tune', 'メタルジグ', _BLUE),
    'lure-debutan.html': ('DEBUTAN JIG', 'debutan-jig', 'メタルジグ', _BLUE),
    'lure-keitan-std.html': ('KEITAN JIG STD.', 'keitan-jig-std', 'メタルジグ', _BLUE),
    'lure-keitan-jig-alumi.html': ('KEITAN JIG Aluminum', 'keitan-jig-aluminum', 'メタルジグ', _BLUE),
    'lure-ks-jig.html': ('KS JIG', 'ks-jig', 'メタルジグ', _BLUE),
    'lure-otoko-jig.html': ('Otoko JIG', 'otoko-jig', 'メタルジグ', _BLUE),
    'lure-r2-jig.html': ('R2 JIG', 'r2-jig', 'メタルジグ', _BLUE),
    'lure-y2-jig.html': ('Y2 JIG', 'y2-jig', 'メタルジグ', _BLUE),
    'lure-conker.html': ('Conker', 'conker', 'メタルジグ', _BLUE),
    'lure-chibitan.html': ('CHIBITAN', 'chibitan', 'メタルジグ', _BLUE),
    'lure-skill-gamma.html': ('Skill Gamma', 'skill-gamma', 'メタルジグ', _BLUE),
    'lure-slash-blade.html': ('SLASH BLADE', 'slash-blade', 'メタルジグ', _BLUE),
    'lure-big-fin.html': ('Bigfin', 'bigfin', 'メタルジグ', _BLUE),
    'lure-keiko-bull.html': ('KEIKO OCEAN BULL', 'keiko-ocean-bull', 'ダイビングペンシル', _GT),
    'lure-keiko-gataro.html': ('KEIKO OCEAN GATARO', 'keiko-ocean-gataro', 'ダイビングペンシル', _GT),
    'lure-keiko-attuma.html': ('KEIKO OCEAN ATTUMA', 'keiko-ocean-attuma', 'ダイビングペンシル', _GT),
    'lure-keiko-chugayu.html': ('KEIKO OCEAN CHUGAYU', 'keiko-ocean-chugayu', 'ポッパー', _GT),
    'lure-keiko-ocean.html': ('KEIKO OCEAN', 'keiko-ocean', 'ポッパー', _GT),
    'lure-keiko-popper.html': ('KEIKO OCEAN POPPER Rv.', 'keiko-ocean-popper-rv', 'ポッパー', _GT),
    'lure-igosso.html': ('IGOSSO', 'igosso', 'ダイビングペンシル', _GT),
    'lure-tidebait.html': ('Tide Bait.Sardine', 'tide-bait-sardine', 'シンキングペンシル', ['ヒラマサ', 'カンパチ', 'ブリ']),
    'lure-chug-mini.html': ('Chug & MiniChag', 'chug-and-minichag', 'ポッパー', ['ヒラマサ', 'カンパチ', 'シイラ']),
}

_YEN = re.compile(r'¥([\d,]+)')
_LEN_WEIGHT = (
    re.compile(r'(\d+)\s*mm\s*[・·\s/]\s*約?(\d+)\s*g'),
    re.compile(r'(?P<w>\d+)\s*g\s*/\s*(?P<l>\d+)\s*mm'),
)
_WEIGHT = re.compile(r'(?:●\s*)?(\d+)\s*g(?:\s|$|[^a-z])', re.I)


def _price(text: str) -> int:
    # list prices are tax-excluded
    m = _YEN.search(fold_width(text))
    return parse_price(m.group(0), excluded=True) if m else 0


def _line_spec(line: str) -> tuple[Optional[float], Optional[int]]:
    for rx in _LEN_WEIGHT:
        m = rx.search(line)
        if m:
            if 'w' in rx.groupindex:
                return float(m.group('w')), int(m.group('l'))
            return float(m.group(2)), int(m.group(1))
    m = _WEIGHT.search(line)
    return (float(m.group(1)), None) if m else (None, None)


def oz_table(table) -> List[SpecVariant]:
    """Column-per-size tables: header "1oz | 2oz", rows Length / 本体価格."""
    head = [g(th.get_text()) for th in table.select('thead th')]
    ozs = []
    for h in head[1:]:
        m = re.search(r'([\d.]+)\s*oz', h, re.I)
        ozs.append(float(m.group(1)) if m else 0.0)
    lengths: List[Optional[int]] = []
    prices: List[int] = []
    for tr in table.select('tr'):
        tds = [g(td.get_text()) for td in tr.select('td')]
        if len(tds) < 2:
            continue
        if re.search(r'length', tds[0], re.I):
            lengths = [int(m.group(1)) if m else None for m in (re.search(r'(\d+)\s*mm', t) for t in tds[1:])]
        elif re.search(r'価格', tds[0]):
            prices = [_price(t) for t in tds[1:]]
    out = []
    for i, oz in enumerate(ozs):
        if oz > 0 and i < len(prices) and prices[i]:
            out.append(SpecVariant(
                weights=[round(oz * OZ_TO_GRAMS)],
                length=lengths[i] if i < len(lengths) else None,
                price=prices[i],
            ))
    return out


def spec_variants(soup: BeautifulSoup) -> List[SpecVariant]:
    out: List[SpecVariant] = []
    for block in soup.select('div[class*="tableBlock"]'):
        if 'tableBlock_sb' in (block.get('class') or []) or re.search(r'oz', ' '.join(g(th.get_text()) for th in block.select('th')), re.I):
            for table in block.select('table'):
                out += oz_table(table)
            continue
        pending: Optional[SpecVariant] = None
        for td in block.select('td'):
            if 'price-eng' in (td.get('class') or []) or td.select_one('.title, .price-eng') is not None:
                continue
            text = fold_width(text_with_breaks(td))
            if not text:
                continue
            m = re.search(r'サイズ\s*:\s*(\d+)\s*mm\s*/\s*(\d+)\s*g', text)
            if m:
                pending = SpecVariant(weights=[float(m.group(2))], length=int(m.group(1)))
                continue
            if pending is not None and re.search(r'価格', text) and _price(text):
                pending.price = _price(text)
                out.append(pending)
                pending = None
                continue
            # a cell lists "100g ¥2,800" lines, or a weight line then a price line
            current: Optional[SpecVariant] = None
            for line in text.split('\n'):
                if re.search(r'retail price|excl\.\s*tax', line, re.I):
                    continue
                weight, length = _line_spec(line)
                price = _price(line)
                if weight and price:
                    out.append(SpecVariant(weights=[weight], length=length, price=price))
                    current = None
                elif weight:
                    current = SpecVariant(weights=[weight], length=length)
                elif price and current is not None:
                    current.price = price
                    out.append(current)
                    current = None
            pending = None

    if out:
        return out
    # no per-size rows: one size from the notes, cheapest listed price
    length = weight = None
    for p in soup.select('p.immunity'):
        t = fold_width(p.get_text('\n'))
        lm = re.search(r'全長\s*:\s*(\d+)\s*mm', t)
        wm = re.search(r'重量\s*:\s*約?(\d+)\s*g', t)
        cm = re.search(r'(\d+)\s*mm\s*/\s*約?(\d+)\s*g', t)
        length = int(lm.group(1)) if lm else length
        weight = float(wm.group(1)) if wm else weight
        if weight is None and cm:
            length, weight = int(cm.group(1)), float(cm.group(2))
    prices = [p for p in (_price(td.get_text()) for td in soup.select('div[class*="tableBlock"] td')) if p]
    if weight and prices:
        out.append(SpecVariant(weights=[weight], length=length, price=min(prices)))
    return out


def color_chart(soup: BeautifulSoup, base: str) -> List[tuple]:
    out = []
    for row in soup.select('div.row.clm006, div.row.clm0006'):
        for block in row.select('.bs-grid-block .content'):
            im = block.select_one('img[src]')
            txt = block.select_one('p.txt')
            if im is None or txt is None:
                continue
            first = g(txt.get_text('\n').strip().split('\n')[0])
            # "01. ブルーイワシ"
            name = re.sub(r'^\d+\.\s*', '', first)
            if name:
                out.append((name, abs_url(no_query(im['src']), base)))
    return out


def description(soup: BeautifulSoup) -> str:
    lead = soup.select_one('div.content.clm03 p.txt')
    if lead is not None:
        return g(lead.get_text(' '))
    intro = soup.select_one('div.content.clm01')
    if intro is not None:
        paras = [g(p.get_text(' ')) for p in intro.select('p') if 'm-eng' not in (p.get('class') or [])]
        return ' '.join(p for p in paras if len(p) > 10)
    return ''


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    page = slug_from_url(url) + '.html'
    name, slug, lure_type, fish = PRODUCTS.get(page, ('', '', '', []))
    if not name:
        h = soup.select_one('h1, h2')
        name = g(h.get_text(' ')) if h is not None else ''
        slug = re.sub(r'^lure-', '', slug_from_url(url))
    main = soup.select_one('p.rodImg img, div.content.clm02 img')
    return {
        'name': name,
        'slug': slug,
        'type': lure_type,
        'target_fish': list(fish),
        'description': description(soup),
        'variants': spec_variants(soup),
        'colors': color_chart(soup, url),
        'main_image': abs_url(no_query(main.get('src', '')), url) if main is not None else '',
    }


SOURCE = Source(
    slug='hots',
    manufacturer='HOTS',
    hosts=('hots.co.jp',),
    parse=parse,
    default_type='メタルジグ',
    default_fish=('青物',),
)
