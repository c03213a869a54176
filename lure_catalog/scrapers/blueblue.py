from __future__ import annotations
import re
from typing import Any, Dict, List
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from ..models import Source, SpecVariant
from ..scrape_utils import fold_width, g, img_src, parse_length, parse_price, parse_weights, slugify, text_with_breaks

# product pages are numeric ids; the catalog uses romaji slugs
SLUG_MAP = {
    'シーライド': 'sea-ride', 'シーライドミニ': 'sea-ride-mini', 'シーライドロング': 'sea-ride-long',
    'ガボッツ': 'gabotz', 'ガボッツ65': 'gabotz-65', 'ガボッツ90': 'gabotz-90',
    'ガボッツ120': 'gabotz-120', 'ガボッツ150': 'gabotz-150',
    'ブローウィン': 'blowin', 'ブローウィン80S': 'blowin-80s', 'ブローウィン125F': 'blowin-125f',
    'ブローウィン140S': 'blowin-140s', 'ブローウィン165F': 'blowin-165f',
    'スネコン': 'snecon', 'スネコン90S': 'snecon-90s', 'スネコン130S': 'snecon-130s', 'スネコン150S': 'snecon-150s',
    'トレイシー': 'tracy', 'トレイシー15': 'tracy-15', 'トレイシー25': 'tracy-25',
    'ナレージ': 'narage', 'ナレージ50': 'narage-50', 'ナレージ65': 'narage-65',
    'アミコン': 'amicon', 'アミコン40S': 'amicon-40s', 'アミコン40HS': 'amicon-40hs',
    'ジョルティ': 'jolty', 'ジョルティミニ': 'jolty-mini', 'ジョルティmini': 'jolty-mini',
    'ジョルティ22': 'jolty-22', 'ジョルティ30': 'jolty-30',
    'フォルテン': 'forten', 'フォルテンミッド': 'forten-mid', 'フォルテンロング': 'forten-long',
    'スピンビット': 'spinbit', 'グラバー': 'grabber', 'グラバーHi': 'grabber-hi', 'グラバーHi68S': 'grabber-hi-68s',
    'ゼッパー': 'zepper', 'ゼッパー140': 'zepper-140', 'ニンジャリ': 'ninjari',
    'シャルダス': 'shalldus', 'シャルダス14': 'shalldus-14', 'シャルダス20': 'shalldus-20', 'シャルダス35': 'shalldus-35',
    'メタルシャルダス': 'metal-shalldus', 'ラザミン': 'lazamin', 'ラザミン90': 'lazamin-90',
    'ガチペン': 'gachpen', 'ガチペン130': 'gachpen-130', 'ガチペン160': 'gachpen-160', 'ガチペン200': 'gachpen-200',
    'ガチペンスイマー180': 'gachpen-swimmer-180',
    'ガチポップ': 'gachpop', 'ガチポップ60': 'gachpop-60', 'ガチポップ100': 'gachpop-100',
    'ガチスラ': 'gachisla', 'ガチスラ180HS': 'gachisla-180hs', 'ガチスラ230HS': 'gachisla-230hs',
    'スカーナッシュ': 'scarnash', 'スカーナッシュ120F': 'scarnash-120f', 'スカーナッシュ140F': 'scarnash-140f',
    'イネムン': 'inemun', 'イネムン60': 'inemun-60',
    'アイザー': 'aiser', 'アイザー100F': 'aiser-100f', 'アイザー125F': 'aiser-125f', 'アイザー160F': 'aiser-160f',
    'アービン': 'arvin', 'アービン60S': 'arvin-60s', 'アービン150S': 'arvin-150s',
    'アウトスター': 'outstar', 'アウトスター120S': 'outstar-120s',
    'エグイド': 'eguid', 'エグイド90F': 'eguid-90f', 'エスナル': 'esnal',
    'エビコン': 'ebicon', 'エビコン60S': 'ebicon-60s',
    'クミホン': 'kumihon', 'クミホン70S': 'kumihon-70s', 'クミホンディープ': 'kumihon-deep',
    'クミホンディープ75S': 'kumihon-deep-75s',
    'コニファー': 'conifer', 'コノ野郎': 'konoyaro', 'コノ野郎180': 'konoyaro-180',
    'フリッド': 'freed', 'フリッドスリム': 'freed-slim', 'シーバイツ': 'seabites',
}


def make_slug(name: str, url: str) -> str:
    key = fold_width(name).strip()
    if key in SLUG_MAP:
        return SLUG_MAP[key]
    stripped = re.sub(r'[\s\d]+$', '', key)
    if stripped in SLUG_MAP:
        return SLUG_MAP[stripped]
    for k in sorted(SLUG_MAP, key=len, reverse=True):
        if k in key:
            suffix = re.sub(r'\s+', '-', key.replace(k, '', 1).strip().lower())
            return f'{SLUG_MAP[k]}-{suffix}' if suffix else SLUG_MAP[k]
    segs = [s for s in urlparse(url).path.split('/') if s]
    if segs and re.fullmatch(r'[A-Za-z0-9_-]+', segs[-1]):
        return segs[-1].lower()
    return slugify(name)


def color_name(raw: str) -> str:
    # "＃01 ブルーブルー" -> "01 ブルーブルー"
    return g(fold_width(raw)).lstrip('#').strip()


def option_weights(options: List[str]) -> List[float]:
    # "＃01 ブルーブルー × 20g 在庫あり" -> 20
    out: List[float] = []
    for text in options:
        m = re.search(r'[×x]\s*([\d.]+)\s*g', fold_width(text))
        if m:
            out += parse_weights(m.group(1) + 'g')
    return out


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    name_el = soup.select_one('.itemDet_name')
    name = g(name_el.get_text()) if name_el else ''

    title = g(soup.title.get_text()) if soup.title else ''
    parts = [p.strip() for p in title.split('|')]
    type_hint = parts[1] if len(parts) >= 3 else ''

    colors = []
    for el in soup.select('.itemDet_colorItem'):
        raw = g(el.get_text(' '))
        if raw:
            colors.append((color_name(raw), img_src(el.select_one('img'), url)))

    spec_el = soup.select_one('.itemDet_setBody')
    spec = text_with_breaks(spec_el)
    m = re.search(r'(?:weight|重さ|重量)[^\d]*([\d.]+\s*g(?:\s*/\s*[\d.]+\s*g)*)', fold_width(spec), re.I)
    spec_weights = parse_weights(m.group(1) if m else spec)
    labelled = re.search(r'(?:全長|Length|レングス|サイズ)[:\]]\s*([\d.]+\s*mm)', fold_width(spec), re.I)
    length = parse_length(labelled.group(1) if labelled else spec)

    price_el = soup.select_one('.itemDet_setBody-price')
    price = parse_price(g(price_el.get_text(' ')) if price_el else '')

    options = [g(o.get_text()) for o in soup.select('.itemDet_select-long option')]
    desc_el = soup.select_one('.itemDet_wisiwyg.editor, .itemDet_wisiwyg')

    return {
        'name': name,
        # product names are already katakana
        'name_kana': name,
        'slug': make_slug(name, url) if name else '',
        'type_hint': f'{title} {type_hint}',
        'description': text_with_breaks(desc_el),
        'variants': [SpecVariant(weights=spec_weights + option_weights(options), length=length, price=price)],
        'colors': colors,
        'main_image': img_src(soup.select_one('.itemDet_bigList img'), url),
    }


SOURCE = Source(
    slug='blueblue',
    manufacturer='BlueBlueFishing',
    hosts=('bluebluefishing.com',),
    parse=parse,
    needs_browser=True,
    default_fish=('シーバス',),
    wait_selector='.itemDet_name',
)
