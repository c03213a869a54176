from __future__ import annotations
import re
from typing import Any, Dict, List

from bs4 import BeautifulSoup

from ..models import Source, SpecVariant
from ..scrape_utils import (
    abs_url, clip_description, figure_colors, g, img_src, label_specs, meta_content,
    page_name, parse_length, parse_price, parse_weights, slug_from_url,
)

TYPE_RULES = [
    (r'メタルバイブ|metal\s*vib', 'メタルバイブ'),
    (r'バイブレーション|vibration', 'バイブレーション'),
    (r'ミノー|minnow', 'ミノー'),
    (r'シンキングペンシル|シンペン|sinking\s*pencil', 'シンキングペンシル'),
    (r'ペンシル|pencil', 'ペンシルベイト'),
    (r'ポッパー|popper', 'ポッパー'),
    (r'メタルジグ|metal\s*jig|ジグ', 'メタルジグ'),
    (r'クランク|crank', 'クランクベイト'),
    (r'ワーム|worm', 'ワーム'),
    (r'プラグ|plug', 'プラグ'),
    (r'スプーン|spoon', 'スプーン'),
    (r'ジグヘッド|jig\s*head', 'ジグヘッド'),
    (r'ブレード|blade', 'ブレードベイト'),
]

FISH_RULES = [
    (r'メバル|メバリング', 'メバル'),
    (r'アジ|アジング', 'アジ'),
    (r'シーバス|スズキ', 'シーバス'),
    (r'チヌ|クロダイ|チニング', 'クロダイ'),
    (r'ヒラメ|マゴチ|フラット', 'ヒラメ・マゴチ'),
    (r'青物|ショアジギ', '青物'),
    (r'ロック|カサゴ|根魚', 'ロックフィッシュ'),
]

DEFAULT_FISH = ('シーバス', 'メバル', 'アジ', 'クロダイ')


def target_fish(*texts: str) -> List[str]:
    """Every species the copy mentions, in rule order (light-game pages name several)."""
    t = ' '.join(texts)
    return [fish for rx, fish in FISH_RULES if re.search(rx, t, re.I)] or list(DEFAULT_FISH)


def _slug(url: str) -> str:
    return re.sub(r'[^a-z0-9-]', '-', slug_from_url(url)).strip('-')


def parse(url: str, html: str) -> Dict[str, Any]:
    soup = BeautifulSoup(html, 'html.parser')
    name = page_name(soup)

    main = meta_content(soup, 'og:image')
    if not main:
        im = next((im for im in soup.select('img[src]') if re.search(r'product|lure|main', im['src'], re.I)), None)
        main = img_src(im, url)

    desc = meta_content(soup, 'description')
    if len(desc) <= 20:
        desc = next((g(p.get_text(' ')) for p in soup.select('p')
                     if len(g(p.get_text())) > 30
                     and not re.search(r'spec|スペック|カラー|color|価格|price|重量', g(p.get_text())[:30], re.I)), '')

    tables = [t for t in soup.select('table')
              if re.search(r'重量|ウエイト|weight|全長|length|サイズ|価格|price|円', t.get_text(' '), re.I)]
    weights, length, price = label_specs(tables)
    # labels not in the first column: fall back to the whole table text
    spec_text = ' '.join(g(t.get_text(' ')) for t in tables)
    variants = [SpecVariant(
        weights=weights or parse_weights(spec_text),
        length=length or parse_length(spec_text),
        price=price or parse_price(spec_text),
    )]

    colors = figure_colors(soup, url)
    if not colors:
        colors = [(g(im.get('alt')), img_src(im, url)) for im in soup.select('img[src]')
                  if re.search(r'color|col_|カラー', im['src'], re.I) and g(im.get('alt'))]

    return {
        'name': name,
        'slug': _slug(url),
        'description': clip_description(desc),
        'variants': variants,
        'colors': colors,
        'main_image': abs_url(main, url),
        'target_fish': target_fish(name, desc),
    }


SOURCE = Source(
    slug='breaden',
    manufacturer='BREADEN',
    hosts=('breaden.net',),
    parse=parse,
    type_rules=TYPE_RULES,
)
