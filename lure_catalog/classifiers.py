from __future__ import annotations
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .scrape_utils import fold_width

DEFAULT_TYPE = 'ルアー'

Rules = Sequence[Tuple[str, object]]

# First match wins. Specific patterns must stay above the general ones they
# contain (シンキングペンシル above ペンシル, ジグヘッド/ラバージグ above ジグ).
TYPE_RULES: List[Tuple[str, str]] = [
    (r'シンキングペンシル|シンペン|SINKING\s*PENCIL', 'シンキングペンシル'),
    (r'ダイビングペンシル|DIVING\s*PENCIL', 'ダイビングペンシル'),
    (r'ペンシル|PENCIL', 'ペンシルベイト'),
    (r'ポッパー|POPPER', 'ポッパー'),
    (r'ジグミノー|JIG\s*MINNOW', 'ジグミノー'),
    (r'ミノー|MINNOW', 'ミノー'),
    (r'シャッド|SHAD(?!OW)', 'シャッド'),
    (r'クランク|CRANK', 'クランクベイト'),
    (r'メタルバイブ|METAL\s*VIB', 'メタルバイブ'),
    (r'バイブレーション|VIBRATION|バイブ(?!ラ)', 'バイブレーション'),
    (r'スピンテール|SPIN\s*TAIL', 'スピンテールジグ'),
    (r'スピナーベイト|SPINNER\s*BAIT', 'スピナーベイト'),
    (r'バズベイト|BUZZ\s*BAIT', 'バズベイト'),
    (r'ワイヤーベイト|WIRE\s*BAIT', 'ワイヤーベイト'),
    (r'チャターベイト|ブレードジグ|BLADED\s*JIG|CHATTER', 'ブレードジグ'),
    (r'ブレードベイト|BLADE\s*BAIT|ブレード|BLADE', 'ブレードベイト'),
    (r'スイムベイト|SWIM\s*BAIT', 'スイムベイト'),
    (r'ビッグベイト|BIG\s*BAIT', 'ビッグベイト'),
    (r'ジョイント|JOINT', 'ジョイントベイト'),
    (r'プロップ|PROP\s*BAIT|スイッシャー', 'プロップベイト'),
    (r'フロッグ|FROG', 'フロッグ'),
    (r'トップウォーター|TOP\s*WATER|ノイジー', 'トップウォーター'),
    (r'i字系|I字系|I-?MOTION', 'i字系'),
    (r'タイラバ|鯛ラバ|TAI\s*RUBBER|TAIRABA', 'タイラバ'),
    (r'ひとつテンヤ|一つテンヤ', 'ひとつテンヤ'),
    (r'テンヤ|TENYA', 'テンヤ'),
    (r'スッテ|SUTTE', 'スッテ'),
    (r'エギ|餌木|\bEGI\b', 'エギ'),
    (r'ジグヘッド|JIG\s*HEAD', 'ジグヘッド'),
    (r'ラバージグ|ラバジ|RUBBER\s*JIG', 'ラバージグ'),
    (r'メタルジグ|METAL\s*JIG', 'メタルジグ'),
    (r'スプーン|SPOON', 'スプーン'),
    (r'スピナー|SPINNER', 'スピナー'),
    (r'ワーム|SOFT\s*BAIT|グラブ|GRUB', 'ワーム'),
    (r'フロート|FLOAT\s*RIG', 'フロート'),
    (r'ジグ|JIG', 'メタルジグ'),
]

# type-based fallback for species
TYPE_FISH_MAP: Dict[str, List[str]] = {
    'エギ': ['イカ'], 'スッテ': ['イカ'], 'ティップラン': ['イカ'], 'イカメタル': ['イカ'],
    'タイラバ': ['マダイ'], 'テンヤ': ['マダイ'], 'ひとつテンヤ': ['マダイ'],
    'シーバスルアー': ['シーバス'],
    'アジング': ['アジ'], 'バチコン': ['アジ'],
    'メバリング': ['メバル'],
    'チニング': ['クロダイ'],
    'ロックフィッシュ': ['ロックフィッシュ'],
    'タチウオルアー': ['タチウオ'], 'タチウオジギング': ['タチウオ'],
    'ショアジギング': ['青物'], 'ジギング': ['青物'], 'オフショアキャスティング': ['青物'],
    'サーフルアー': ['ヒラメ・マゴチ'],
    'フロート': ['アジ', 'メバル'],
    'フグルアー': ['フグ'],
    'ナマズルアー': ['ナマズ'],
    'トラウトルアー': ['トラウト'],
    '鮎ルアー': ['鮎'],
    'ラバージグ': ['ブラックバス'], 'バズベイト': ['ブラックバス'], 'スピナーベイト': ['ブラックバス'],
    'i字系': ['ブラックバス'], 'フロッグ': ['ブラックバス'], 'ワイヤーベイト': ['ブラックバス'],
    'ブレードジグ': ['ブラックバス'],
}

# keyword fallback over name/description/breadcrumb
FISH_RULES: List[Tuple[str, List[str]]] = [
    (r'エギング|アオリイカ|ティップラン|イカメタル|SQUID', ['イカ']),
    (r'タイラバ|鯛ラバ|真鯛|マダイ', ['マダイ']),
    (r'タチウオ|太刀魚', ['タチウオ']),
    (r'アジング|\bAJI\b', ['アジ']),
    (r'アジ・メバル|ライトゲーム|LIGHT\s*GAME', ['アジ', 'メバル']),
    (r'メバリング|メバル|MEBARU', ['メバル']),
    (r'チニング|クロダイ|チヌ|黒鯛|CHINU', ['クロダイ']),
    (r'ロックフィッシュ|根魚|ROCK\s*FISH', ['ロックフィッシュ']),
    (r'ヒラメ|マゴチ|フラットフィッシュ|サーフ|FLAT\s*FISH|SURF', ['ヒラメ・マゴチ']),
    (r'ショアジギ|オフショア|青物|ブリ|ヒラマサ|カンパチ|マグロ|ツナ|TUNA|JIGGING', ['青物']),
    (r'シーバス|SEA\s*BASS|スズキ', ['シーバス']),
    (r'トラウト|渓流|エリア|管釣|TROUT|サクラマス|イワナ|ヤマメ', ['トラウト']),
    (r'ナマズ|鯰|CATFISH', ['ナマズ']),
    (r'ブラックバス|バス釣|BASS', ['ブラックバス']),
]

# id -> (rules, compiled); holding rules keeps the id from being reused
_COMPILED: Dict[int, Tuple[Rules, List[Tuple[re.Pattern, object]]]] = {}


def _compile(rules: Rules) -> List[Tuple[re.Pattern, object]]:
    hit = _COMPILED.get(id(rules))
    if hit is None or hit[0] is not rules or len(hit[1]) != len(rules):
        hit = (rules, [(re.compile(p, re.I), v) for p, v in rules])
        _COMPILED[id(rules)] = hit
    return hit[1]


def first_match(text: str, rules: Rules, default=None):
    """Value of the first rule whose pattern occurs in text."""
    t = fold_width(text or '')
    if not t:
        return default
    for rx, value in _compile(rules):
        if rx.search(t):
            return value
    return default


def classify_type(*texts: str, rules: Rules = TYPE_RULES, default: str = DEFAULT_TYPE) -> str:
    return first_match(' '.join(t for t in texts if t), rules, default)


def lookup_category(category: str | None, table: Dict[str, object] | None):
    """Exact (case-insensitive) lookup, then substring lookup in table order."""
    if not category or not table:
        return None
    c = fold_width(category).strip().upper()
    for k, v in table.items():
        if k.upper() == c:
            return v
    for k, v in table.items():
        if k.upper() in c:
            return v
    return None


def classify_fish(
    lure_type: str,
    *texts: str,
    category: str | None = None,
    category_map: Dict[str, List[str]] | None = None,
    default: Optional[Iterable[str]] = None,
) -> List[str]:
    """Target species. Order: category table, type table, keywords, default."""
    hit = lookup_category(category, category_map)
    if hit:
        return list(hit)
    if lure_type in TYPE_FISH_MAP:
        return list(TYPE_FISH_MAP[lure_type])
    hit = first_match(' '.join(t for t in texts if t), FISH_RULES)
    if hit:
        return list(hit)
    return list(default or [])
