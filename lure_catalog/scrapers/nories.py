from __future__ import annotations
import re
from typing import Any, Dict, List

from bs4 import BeautifulSoup

from ..classifiers import first_match
from ..models import Source, SpecVariant
from ..scrape_utils import g, html_to_text, img_src, parse_length, parse_price, parse_weights

TYPE_RULES = [
    (r'ポッパー|POPPER', 'ポッパー'),
    (r'ペンシル|PENCIL', 'ペンシルベイト'),
    (r'プロップ|PROP', 'プロップベイト'),
    (r'バイブ|VIB', 'バイブレーション'),
    (r'クランク|CRANK|PUPA|SQUARE|HIRA\s*CRANK', 'クランクベイト'),
    (r'シャッド|SHAD|JETTY', 'シャッド'),
    (r'ミノー|MINNOW|LAYDOWN', 'ミノー'),
    (r'スピナーベイト|SPINNER\s*BAIT|CRYSTAL\s*S|SHALLOW\s*ROLL|SUPER\s*SLOW\s*ROLL|DEEPER\s*RANGE|POWER\s*ROLL', 'スピナーベイト'),
    (r'バズベイト|BUZZ\s*BAIT', 'バズベイト'),
    (r'チャター|CHATTER|HULA\s*CHAT', 'チャターベイト'),
    (r'フロッグ|FROG|FUKA[\s-]?BAIT|PADTUE', 'フロッグ'),
    (r'クローラー|CRAWLER|WASHER', 'クローラーベイト'),
    (r'スイムベイト|SWIM\s*BAIT', 'スイムベイト'),
    (r'ビッグベイト|BIG\s*BAIT|BIHADOU', 'ビッグベイト'),
    (r'メタルジグ|METAL\s*JIG', 'メタルジグ'),
    (r'ジグ|JIG|DAIRAKKA|METAL\s*WASAB', 'ラバージグ'),
    (r'スプーン|SPOON|鱒玄人|MASUKUROUTO|MEET|RICE|RUSH\s*BELL|SWEEK|BOTTOM\s*CHOPPER|FUKADAMA', 'スプーン'),
    (r'ESCAPE|エスケープ|FLIP[\s-]?GILL|ROCK[\s-]?CLAW|RING[\s-]?MAX|SHRILPIN|LADY|LATTERIE|FRONT[\s-]?FLAPPER'
     r'|FLIP[\s-]?DOM|SANSUN|HASSUN|SANKAKU|SWITCH[\s-]?ON|MARUNOMI|SINGLE[\s-]?CONTROL|CLIONEX', 'ワーム'),
    (r'GILL\s*TOP|JOINT', 'クローラーベイト'),
    (r'WIND\s*RANGE', 'スピナーベイト'),
    (r'SHOT[\s-]?OVER|SHOT[\s-]?STORMY|WORMING\s*CRANK|SHOT[\s-]?OMEGA|TADAMAKI|COMPLETE|HIRA[\s-]?TOP', 'クランクベイト'),
    (r'TG[\s-]?RATTLIN', 'バイブレーション'),
]

CATEGORY_RULES = [
    (r'soft[\s-]?baits', 'ワーム'),
    (r'wire[\s-]?baits', 'スピナーベイト'),
    (r'jig[\s-]?baits', 'ラバージグ'),
]


def detect_type(name: str, category: str) -> str:
    # the category decides for soft, wire and jig baits; names decide the rest
    return first_match(category, CATEGORY_RULES) or first_match(name, TYPE_RULES) or 'その他'


def target_fish(url: str) -> List[str]:
    if 'trout.nories.com' in url:
        return ['トラウト']
    if '/salt/' in url:
        return ['シーバス']
    return ['ブラックバス']


def full_size(url: str) -> str:
    """WordPress thumbnails: foo-300x200.webp -> foo.webp"""
    return re.sub(r'-\d+x\d+\.(webp|jpe?g|png)$', r'.\1', url or '', flags=re.I)


def _price(text: str) -> int:
    # ¥ prices are tax-excluded
    m = re.search(r'[¥￥][\d,]+', text or '')
    return parse_price(m.group(0), excluded=True) if m else 0


def spec_variant(panel) -> SpecVariant:
    spec = SpecVariant()
    if panel is None:
        return spec
    for table in panel.select('table'):
        rows = table.select('tr')
        if not rows:
            continue
        head_th = rows[0].find_all('th')
        length_text = price_text = ''
        weights: List[str] = []
        # row-label tables: "Length | 63mm", "Weight | 1/4oz | 3/8oz"
        for tr in rows:
            th = tr.find('th')
            if th is None:
                continue
            label = g(th.get_text()).lower()
            values = [g(td.get_text()) for td in tr.find_all('td')]
            if not values:
                continue
            if 'length' in label and not length_text:
                length_text = values[0]
            if 'weight' in label and 'hook' not in label:
                weights += [v for v in values if v]
            if 'price' in label and not price_text:
                price_text = values[0]
        # header-row tables: "Weight | Hook | Price" then one row per size
        if len(head_th) >= 2:
            labels = [g(th.get_text()).lower() for th in head_th]
            if 'weight' in labels:
                wi = labels.index('weight')
                pi = next((i for i, h in enumerate(labels) if 'price' in h), -1)
                weights, price_text = [], ''
                for tr in rows[1:]:
                    tds = [g(td.get_text()) for td in tr.find_all('td')]
                    if wi < len(tds) and tds[wi]:
                        weights.append(tds[wi])
                    if 0 <= pi < len(tds) and not price_text:
                        price_text = tds[pi]
        if price_text or weights:
            spec.weights = [w for v in weights for w in parse_weights(v, assume_grams=True)]
            spec.length = parse_length(length_text)
            spec.price = _price(price_text)
            break
    return spec


def color_chart(panel, base: str) -> List[tuple]:
    out = []
    if panel is None:
        return out
    for td in panel.select('table td'):
        im = td.select_one('img')
        if im is None:
            continue
        # "<img><br>NAME<br>note": the name sits between the first two breaks
        parts = re.split(r'<br\s*/?>', td.decode_contents(), flags=re.I)
        raw = html_to_text(parts[1]) if len(parts) > 1 else ''
        if not raw or re.fullmatch(r'[✓–—-]', raw):
            continue
        name = re.sub(r'※.*$', '', re.sub(r'NEW', '', raw, flags=re.I)).strip()
        if name:
            out.append((name, full_size(img_src(im, base))))
    return out


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    h2 = soup.select_one('h2.mainh2')
    name = g(h2.get_text(' ')) if h2 is not None else ''
    h4 = soup.select_one('article h4')
    kana = re.sub(r'[「」『』]', '', g(h4.get_text())) if h4 is not None else ''
    category = next((g(c.get_text()) for c in soup.select('.metabox .newscate')
                     if g(c.get_text()) not in ('BASS', 'SALT')), '')

    article = soup.select_one('article')
    main = None
    desc = ''
    if article is not None:
        main = article.select_one('img.full-width') or article.select_one('img[class*="wp-image-"]') or \
            next((im for im in article.select('img') if 'MAIN_' in (im.get('src') or '')), None)
        seen_heading = False
        for child in article.find_all(recursive=False):
            if child.name in ('h3', 'h4'):
                seen_heading = True
            elif seen_heading and child.name == 'p' and len(g(child.get_text())) > 20:
                desc = g(child.get_text(' '))
                break
        if not desc:
            desc = next((g(p.get_text(' ')) for p in article.select('p')
                         if len(g(p.get_text())) > 50 and '※' not in p.get_text()), '')

    m = re.search(r'/([^/]+)/?$', url)
    return {
        'name': name,
        'name_kana': kana,
        'slug': m.group(1) if m else '',
        'type': detect_type(name, category) if name else '',
        'description': desc,
        'variants': [spec_variant(soup.select_one('.ChangeElem_Panel.specs'))],
        'colors': color_chart(soup.select_one('.ChangeElem_Panel.colorchart'), url),
        'main_image': full_size(img_src(main, url)),
        'target_fish': target_fish(url),
    }


SOURCE = Source(
    slug='nories',
    manufacturer='Nories',
    hosts=('nories.com',),
    parse=parse,
    needs_browser=True,
    wait_selector='h2.mainh2',
)
