from __future__ import annotations
import re
from typing import Any, Dict, List
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup

from ..classifiers import first_match
from ..models import Source, SpecVariant
from ..scrape_utils import g, img_src, parse_length, parse_weights

TYPE_RULES = [
    (r'crank|クランク|CB|Clutch|クラッチ', 'クランクベイト'),
    (r"minnow|ミノー|B'?Freeze|Bfreeze|Staysee|ステイシー|Pointer|ポインター|Humpback", 'ミノー'),
    (r'shad|シャッド', 'シャッド'),
    (r'vib|バイブ|LV\b', 'バイブレーション'),
    (r'pencil|ペンシル|Sammy|サミー|Gunni?sh|ガニッシュ|Splash\s*Tail|スプラッシュテール|Wake\s*Tail|Snap\s*Kick', 'ペンシルベイト'),
    (r'popper|ポッパー', 'ポッパー'),
    (r'prop|プロップ', 'プロップベイト'),
    (r"spinner|スピナー|Area'?s", 'スピナーベイト'),
    (r'blade|ブレード|Salty\s*Beats|ソルティービーツ', 'メタルバイブ'),
    (r'wander|ワンダー', 'シンキングペンシル'),
    (r'bull|ブル|Input\s*Swimmer|インプットスイマー|Real\s*Bait|Real\s*Ayu', 'ビッグベイト'),
    (r'egi|エギ|kirari|キラリ', 'エギ'),
    (r'spoon|スプーン|CraPea|クラピー|cra-pea|SRoller|WAH\b|unfair|Air\s*(Beatle|Blow|Claw|Pellet)|Poko', 'スプーン'),
    (r'jig|ジグ', 'ジグ'),
    (r'stream|ストリーム|Two\s*Twicher|Watch\b|Raiou', 'ミノー'),
    (r'malas|マラス', 'スイムジグ'),
    (r'screw|スクリュー|varid|バリッド|C-?Cube|シーキューブ', 'バイブレーション'),
    (r'surface|rat|ラット|keroll|ケロール|kingyo|金魚', 'トップウォーター'),
    (r'sea\s*swim', 'メタルジグ'),
    (r'wobty|ウォブティー', 'シャッド'),
    (r'amago|アマゴ|LCMT|MTO|MTS', 'ミノー'),
]

# substring keys over "<category> <url path>", first hit wins
FISH_KEYS = [
    (('area', 'trout', 'native', 'stream'), ['トラウト']),
    (('ayu',), ['アユ']),
    (('namazu',), ['ナマズ']),
    (('chinu',), ['クロダイ']),
    (('haze',), ['ハゼ']),
    (('ika',), ['アオリイカ']),
    (('jack',), ['アジ']),
    (('mlg',), ['メバル', 'アジ']),
    (('salt', 'seabass', 'sw'), ['シーバス']),
]

_OLD_HEADERS = ('.headerArea, .headerSalt, .headerBass, .headerNative, .headerSW, '
                '.headerNamazu, .headerPup, .headerYlw, .headerLight')


def target_fish(category: str, path: str) -> List[str]:
    both = f'{category} {path}'.lower()
    for keys, fish in FISH_KEYS:
        if any(k in both for k in keys):
            return fish
    return ['ブラックバス']


def make_slug(url: str) -> str:
    """/product/salt/foo.html -> foo-salt; plain bass pages keep the file name."""
    decoded = unquote(url)
    m = re.search(r'/product/([^?#]+?)(?:\.html)?$', decoded)
    if not m:
        segments = [s for s in urlparse(decoded).path.split('/') if s]
        return re.sub(r'\.html$', '', segments[-1].lower()) if segments else ''
    parts = m.group(1).split('/')
    name = re.sub(r'\.html$', '', parts[-1].lower())
    cat = parts[0].lower()
    if cat in ('salt', 'native', 'namazu'):
        return f'{name}-{cat}'
    if cat == 'swlightgame' and len(parts) >= 3:
        return f'{name}-{parts[1].lower()}'
    if cat == 'area':
        return f'{name}-area'
    return name


def _image(im, base: str) -> str:
    src = img_src(im, base)
    return '' if 'comingsoon' in src else src


def new_template_specs(soup: BeautifulSoup) -> List[SpecVariant]:
    out: List[SpecVariant] = []
    for buy in soup.select('.buy'):
        text = g(buy.select_one('.text-1').get_text(' ')) if buy.select_one('.text-1') else ''
        lm = re.search(r'長さ\s*[:：]\s*([\d.]+)\s*mm', text)
        wm = re.search(r'重さ\s*[:：]\s*([\d.]+)\s*g', text)
        if lm or wm:
            label = buy.select_one('.text-name')
            out.append(SpecVariant(
                weights=parse_weights(wm.group(0)) if wm else [],
                length=parse_length(lm.group(1) + 'mm') if lm else None,
                label=g(label.get_text()) if label is not None else '',
            ))
    return out


def old_template_specs(soup: BeautifulSoup) -> List[SpecVariant]:
    """Row-label tables: アイテム / 全長 / 重量, one column per model."""
    rows: Dict[str, List[str]] = {}
    for tr in soup.select('tr'):
        head = tr.select_one('.tableCategory')
        if head is None:
            continue
        label = g(head.get_text())
        values = [g(td.get_text(' ')) for td in tr.select('.tableInside')]
        for key, names in (('item', ('アイテム', 'Item')), ('length', ('全長', 'Length')),
                           ('weight', ('重量', 'Weight'))):
            if label in names:
                rows.setdefault(key, values)
    width = max((len(v) for v in rows.values()), default=0)
    out = []
    for i in range(width):
        cell = {k: (v[i] if i < len(v) else '') for k, v in rows.items()}
        out.append(SpecVariant(
            weights=parse_weights(cell.get('weight'), assume_grams=True),
            length=parse_length(cell.get('length'), assume_mm=True),
            label=cell.get('item', ''),
        ))
    return out


def color_list(soup: BeautifulSoup, base: str) -> List[tuple]:
    out = []
    for tr in soup.select('table.itemlist tbody tr'):
        td = tr.select_one('td[data-label="商品名"]')
        if td is None:
            continue
        cname = g(re.split(r'<br\s*/?>', td.decode_contents(), flags=re.I)[0])
        cname = g(BeautifulSoup(cname, 'html.parser').get_text())
        if cname:
            out.append((cname, _image(tr.select_one('img'), base)))
    if out:
        return out
    images = soup.select('.tableColorImage img')
    names = soup.select('.tableColorName')
    for im, el in zip(images, names):
        cname = g(el.get_text('\n').strip().split('\n')[0])
        if cname:
            out.append((cname, _image(im, base)))
    return out


def main_image(soup: BeautifulSoup, base: str) -> str:
    for sel in ('#section1 > img', '#imgFrameFull img', 'img.ccimg'):
        src = _image(soup.select_one(sel), base)
        if src:
            return src
    for im in soup.select('img[src*="/product/images/"]'):
        src = _image(im, base)
        if src and 'Shop-logo' not in src:
            return src
    return ''


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    title = g(soup.title.get_text()) if soup.title else ''
    m = re.search(r'Lucky\s*Craft\s*JAPAN\s*[-–—]\s*(.+)', title, re.I)
    item = soup.select_one('.itemName')
    name = g(m.group(1)) if m else (g(item.get_text(' ')) if item is not None else '')

    header = soup.select_one(_OLD_HEADERS)
    category = g(header.get_text()).split('/')[0].strip() if header is not None else ''

    desc = ' '.join(g(p.get_text(' ')) for p in soup.select('#section1 > p') if g(p.get_text()))
    if not desc:
        desc = ' '.join(g(p.get_text(' ')) for p in
                        soup.select('#container p, #containerSalt p, #containerArea p, #containerBass p')
                        if len(g(p.get_text())) > 30)

    if soup.select_one('.text-name') is not None:
        variants = new_template_specs(soup)
    else:
        variants = old_template_specs(soup)

    slug = make_slug(url)
    return {
        'name': name,
        'slug': slug,
        'category': category,
        'type': first_match(f'{name} {slug}', TYPE_RULES) or 'ルアー',
        'target_fish': target_fish(category, urlparse(url).path),
        'description': desc,
        'variants': variants,
        # the site lists no prices
        'price': 0,
        'colors': color_list(soup, url),
        'main_image': main_image(soup, url),
    }


SOURCE = Source(
    slug='luckycraft',
    manufacturer='LUCKY CRAFT',
    hosts=('luckycraft.co.jp',),
    parse=parse,
    needs_browser=True,
    single_finish=True,
    wait_selector='.text-name, .itemName, #section1',
)
