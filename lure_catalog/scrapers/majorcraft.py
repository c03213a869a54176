from __future__ import annotations
import re
from typing import Any, Dict, List
from urllib.parse import unquote

from bs4 import BeautifulSoup

from ..classifiers import first_match
from ..models import ScrapeError, Source, SpecVariant
from ..scrape_utils import g, img_src, parse_length, parse_price, parse_weights

TYPE_RULES = [
    (r'ワーム|WORM|シャッドテール|ピンテール|グラブ|クロー|クリーチャー|ホッグ', 'ワーム'),
    (r'エギ|EGIZO|餌木|SQUID', 'エギ'),
    (r'タコ|OCTOPUS|TAKO|オクトパス', 'タコエギ'),
    (r'テンヤ|TENYA|タイラバ|鯛ラバ', 'テンヤ'),
    (r'メタルバイブ', 'メタルバイブ'),
    (r'バイブレーション|VIBRATION', 'バイブレーション'),
    (r'ポッパー|POPPER', 'ポッパー'),
    (r'ダイビングペンシル|ダイペン', 'ダイビングペンシル'),
    (r'シンキングペンシル|シンペン', 'シンキングペンシル'),
    (r'ペンシル|PENCIL', 'ペンシルベイト'),
    (r'ミノー|MINNOW|ブレイクバック|BREAKBACK', 'ミノー'),
    (r'ラバ|RUBA|RUBBER|ナノラバ', 'ラバージグ'),
    (r'ジグヘッド|JIG\s*HEAD|ヘッド.*ブンタ', 'ジグヘッド'),
    (r'ブレードジグ|BLADE.*JIG|マキジグ', 'ブレードジグ'),
    (r'メタルジグ|METAL.*JIG|ジグパラ|JIG\s*PARA', 'メタルジグ'),
    (r'ジグ(?!ヘッド|パラ)|JIG(?!HEAD|PARA)', 'メタルジグ'),
    (r'クランク|CRANK', 'クランクベイト'),
    (r'シャッド|SHAD', 'シャッド'),
    (r'スプーン|SPOON', 'スプーン'),
    (r'スピナーベイト|SPINNERBAIT', 'スピナーベイト'),
    (r'フック|HOOK|ブレード|BLADE|アシスト', 'フック'),
    (r'仕掛|サビキ|RIG|SABIKI', '仕掛'),
    (r'スッテ|SUTTE', 'スッテ'),
    (r'プラグ|PLUG', 'プラグ'),
]

FISH_RULES = [
    (r'trout|トラウト|渓流', ['トラウト']),
    (r'タチウオ|太刀魚|scabbard', ['タチウオ']),
    (r'タコ|蛸|octopus', ['タコ']),
    (r'ロックフィッシュ|rock.?fish|根魚|カサゴ|ソイ|アイナメ', ['ロックフィッシュ']),
    (r'エギ|eging|squid|イカ|餌木', ['アオリイカ']),
    (r'black.?seabream|チヌ|クロダイ|黒鯛', ['クロダイ']),
    (r'タイラバ|鯛|マダイ|テンヤ|\btai\b', ['マダイ']),
    (r'バス|bass|fresh', ['ブラックバス']),
    (r'サーフ|surf|ヒラメ|マゴチ|フラット', ['ヒラメ・マゴチ']),
    (r'シーバス|sea.?bass', ['シーバス']),
    (r'ライトゲーム|light.?game|鯵道|アジドー|adw|アジ.*ワーム|メバル', ['アジ', 'メバル']),
    (r'青物|ショアジギ|ジギング|ブリ|ヒラマサ', ['青物']),
]

_DESC_SKIP = re.compile(r'^(ROD|LURE|OTHER|SPEC|COLOR|ONLINE)$', re.I)


def make_slug(url: str) -> str:
    m = re.search(r'/lure/([^/?]+)', url)
    if not m:
        return ''
    raw = unquote(m.group(1)).lower()
    raw = re.sub(r'[^\w\s\-　-鿿]', '', raw)
    return re.sub(r'-+', '-', re.sub(r'\s+', '-', raw)).strip('-')[:60]


def _price(value: str) -> int:
    """"¥1,000(税込¥1,100)" quotes both; a lone ¥ amount is tax-excluded."""
    found = re.findall(r'[¥￥][\d,]+', value)
    if not found:
        return 0
    if '税込' in value:
        return parse_price(found[-1])
    return parse_price(found[0], excluded=True)


def spec_variants(soup: BeautifulSoup) -> List[SpecVariant]:
    out: List[SpecVariant] = []
    for table in soup.select('table'):
        head = [g(th.get_text()).lower() for th in table.select('th')]
        for tr in table.select('tr'):
            cells = [g(td.get_text(' ')) for td in tr.find_all('td')]
            if not cells:
                continue
            if not head:
                out.append(SpecVariant(weights=parse_weights(' '.join(cells))))
                continue
            spec = SpecVariant()
            for h, val in zip(head, cells):
                if re.search(r'size|サイズ', h):
                    spec.weights += parse_weights(val)
                    spec.length = spec.length or parse_length(val)
                if re.search(r'weight|重さ|重量|ウェイト', h):
                    spec.weights += parse_weights(val)
                if re.search(r'length|全長|レングス', h) and not re.search(r'weight|重', h):
                    spec.length = spec.length or parse_length(val)
                if re.search(r'price|価格|希望.*小売|税込', h):
                    spec.price = spec.price or _price(val)
            out.append(spec)
    for button in soup.select('.js-toggle_block_switch[data-size]'):
        out.append(SpecVariant(weights=parse_weights(button.get_text(' '))))
    return out


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    if soup.select_one('input[name="post_password"]') is not None:
        raise ScrapeError('password-protected page', url)

    title = g(soup.title.get_text()) if soup.title else ''
    name = title.split(' – ')[0].strip() if ' – ' in title else re.sub(r'\s*[–|]\s*メジャークラフト.*$', '', title)

    main = ''
    for im in soup.select('.js-products_sec__img_slider img'):
        slide = im.find_parent(class_='slick-slide')
        # negative indexes are slick's cloned slides
        if slide is not None and slide.get('data-slick-index', '0').startswith('-'):
            continue
        src = img_src(im, url)
        if 'wp-content' in src:
            main = re.sub(r'-\d+x\d+(\.\w+)$', r'\1', src)
            break

    colors = []
    for li in soup.select('li.lure-color_chart__color_list_item'):
        cap = li.select_one('figcaption')
        im = li.select_one('.lure-color_chart__color_list_img_block_inner img')
        cname = g(cap.get_text()) if cap is not None else ''
        if cname:
            colors.append((cname, img_src(im, url).replace('-300x300', '-1024x1024') if im is not None else ''))

    heads = [g(h.get_text(' ')) for h in soup.select('h2, h3')]
    desc = ' '.join([h for h in heads if 8 < len(h) < 300 and not _DESC_SKIP.match(h)][:3])

    cat = next((a.get('href') for a in soup.select('a[href*="lure_cate"]') if a.get('href')), '')
    if not cat:
        el = soup.select_one('.products__header_category, .breadcrumb')
        cat = g(el.get_text(' ')) if el is not None else ''

    both = f'{name} {desc} {cat}'
    return {
        'name': name,
        'slug': make_slug(url),
        'type': first_match(f'{name} {desc[:500]} {cat}', TYPE_RULES) or 'プラグ',
        'target_fish': first_match(both, FISH_RULES) or ['青物', 'シーバス'],
        'description': desc,
        'variants': spec_variants(soup),
        'colors': colors,
        'main_image': main,
    }


SOURCE = Source(
    slug='majorcraft',
    manufacturer='Major Craft',
    hosts=('majorcraft.co.jp',),
    parse=parse,
    needs_browser=True,
    # multi-size tables: the largest size's price stands for the product
    price_policy='max',
    wait_selector='.lure-color_chart__color_list_item, h1',
)
