import html as htmllib
import math
import re
import unicodedata
from urllib.parse import quote, unquote, urljoin, urlparse
from bs4 import BeautifulSoup


OZ_TO_GRAMS = 28.3495
INCH_TO_MM = 25.4
TAX_RATE = 1.10
DESCRIPTION_LIMIT = 500
MAX_LENGTH_MM = 5000
MAX_WEIGHT_G = 10000
MAX_PRICE = 10_000_000


def g(s: str | None) -> str:
    if not s:
        return ""
    return re.sub(r"\s+", " ", str(s).strip())


def abs_url(url: str, base: str) -> str:
    if not url:
        return ""
    try:
        return urljoin(base, str(url).strip())
    except Exception:
        return url or ""


def no_query(u: str) -> str:
    try:
        p = urlparse(str(u or ""))
        return p._replace(query="", fragment="").geturl()
    except Exception:
        return str(u or "")


def text_with_breaks(el: BeautifulSoup | None) -> str:
    if el is None:
        return ""
    return html_to_text(str(el))


def best_from_srcset(ss: str) -> str:
    try:
        parts = [p.strip() for p in str(ss or "").split(",") if p.strip()]
        best = ""
        best_w = -1
        for p in parts:
            tokens = p.split()
            if not tokens:
                continue
            url = tokens[0]
            m = re.search(r"\s(\d+)(w|x)$", p)
            w = int(m.group(1)) if m else 0
            if w > best_w:
                best_w = w
                best = url
        return best
    except Exception:
        return ""


def img_src(im, base: str) -> str:
    """Best absolute URL for an <img>: srcset winner, then lazy-load attrs, then src."""
    if im is None:
        return ""
    ss = im.get("srcset") or im.get("data-srcset")
    if ss:
        b = best_from_srcset(ss)
        if b:
            return abs_url(b, base)
    for attr in ("data-src", "data-lazy-src", "data-original", "src"):
        s = im.get(attr)
        if s and not str(s).startswith("data:"):
            return abs_url(s, base)
    return ""


# ------------------------------------------------------------------ width

_FOLD = {code: code - 0xFEE0 for code in range(0xFF01, 0xFF5F)}
_FOLD.update({
    ord("　"): " ",
    ord("〜"): "~",
    ord("￥"): "¥",
    ord("″"): '"',
    ord("”"): '"',
    ord("㎜"): "mm",
    ord("㎝"): "cm",
    ord("㌘"): "g",
})


def fold_width(s: str | None) -> str:
    """Fullwidth ASCII (digits, letters, ＃，．～：ｇ ...) to halfwidth. Idempotent."""
    if not s:
        return ""
    return str(s).translate(_FOLD)


_HANKAKU_KANA = re.compile(r"[｡-ﾟ]+")


def kana_to_fullwidth(s: str | None) -> str:
    # ﾐﾉｰ -> ミノー; only the halfwidth katakana runs are touched
    if not s:
        return ""
    return _HANKAKU_KANA.sub(lambda m: unicodedata.normalize("NFKC", m.group(0)), str(s))


def has_cjk(s: str) -> bool:
    return bool(re.search(r"[぀-ヿ一-鿿ｦ-ﾟ]", s or ""))


# ------------------------------------------------------------------ html

def html_to_text(raw: str | None) -> str:
    """Strip tags (<br> and block ends become newlines) and decode entities."""
    if not raw:
        return ""
    s = str(raw)
    s = re.sub(r"<script[\s\S]*?</script>", "", s, flags=re.I)
    s = re.sub(r"<style[\s\S]*?</style>", "", s, flags=re.I)
    s = re.sub(r"<br\s*/?\s*>", "\n", s, flags=re.I)
    s = re.sub(r"</(p|div|li|dd|dt|h[1-6]|section|ul|ol|table|tr)>", r"</\1>\n", s, flags=re.I)
    s = re.sub(r"<[^>]+>", "", s)
    s = htmllib.unescape(s).replace("\xa0", " ")
    lines = [g(x) for x in s.split("\n")]
    return "\n".join(x for x in lines if x)


def clip_description(text: str | None, limit: int = DESCRIPTION_LIMIT) -> str:
    t = (text or "").strip()
    return t[:limit]


# ------------------------------------------------------------------ price

_NUM = r"(\d[\d,]*)"
_INCL_AFTER = re.compile(_NUM + r"\s*円?\s*(?:[(]\s*税込み?\s*[)]|税込)")
_INCL_BEFORE = re.compile(r"税込み?(?:価格)?\s*\)?\s*:?\s*¥?\s*" + _NUM)
_INCL_WITH_EXCL_NOTE = re.compile(r"¥?\s*" + _NUM + r"\s*円?\s*[(]\s*(?:税抜き?|税別|本体)(?:価格)?\s*[:]?\s*¥?\s*\d")
_EXCL_AFTER = re.compile(_NUM + r"\s*円?\s*[(]?\s*(?:税抜き?|税別|\+\s*税)")
_EXCL_BEFORE = re.compile(r"(?:税抜き?|税別|本体)(?:価格)?\s*\)?\s*:?\s*¥?\s*" + _NUM)
_YEN_BEFORE = re.compile(r"¥\s*" + _NUM)
_YEN_AFTER = re.compile(_NUM + r"\s*円")
_ONLY_NUM = re.compile(r"\s*" + _NUM + r"\s*")


def _to_int(digits: str) -> int:
    try:
        v = int(re.sub(r"[^0-9]", "", digits or ""))
    except ValueError:
        return 0
    return v if 0 < v < MAX_PRICE else 0


def with_tax(v: int) -> int:
    """round(v * 1.10), half up, in integer arithmetic."""
    return (int(v) * 110 + 50) // 100


def parse_price(text: str | None, excluded: bool = False) -> int:
    """Free price text -> tax-included yen. 0 means unknown.

    税込 next to a number wins verbatim. "¥X(税抜¥Y)" quotes X tax-included.
    税別/税抜/+税 are converted at 10%. An unmarked ¥/円 amount (or a text
    that is nothing but a number) is taken as-is, or converted when the
    site lists prices tax-excluded (excluded=True).
    """
    if not text:
        return 0
    t = fold_width(html_to_text(text) if "<" in str(text) else text)
    t = t.replace("\\", "¥")
    for rx in (_INCL_AFTER, _INCL_BEFORE, _INCL_WITH_EXCL_NOTE):
        m = rx.search(t)
        if m:
            v = _to_int(m.group(1))
            if v:
                return v
    for rx in (_EXCL_AFTER, _EXCL_BEFORE):
        m = rx.search(t)
        if m:
            v = _to_int(m.group(1))
            if v:
                return with_tax(v)
    hits = [m for rx in (_YEN_BEFORE, _YEN_AFTER) for m in rx.finditer(t)]
    hits.sort(key=lambda m: m.start())
    m = _ONLY_NUM.fullmatch(t)
    if m:
        hits.append(m)
    for m in hits:
        v = _to_int(m.group(1))
        if v:
            return with_tax(v) if excluded else v
    return 0


# ------------------------------------------------------------------ weight

_OZ_WITH_GRAMS = re.compile(
    r"(?:\d+[.\-\s])?\d*(?:\.\d+|/\d+)?\s*oz\.?[^()\d]{0,12}\(\s*約?\s*(\d+(?:\.\d+)?)\s*g",
)
# a whole number can't start right after a fraction or a decimal point: "1/4-3/8oz" is two weights
_OZ = re.compile(r"(?:(?<![\d./])(\d+)[.\-\s](\d+)/(\d+)|(\d+)/(\d+)|(\d+(?:\.\d+)?|\.\d+))\s*oz")
# "1/4-3/8oz", "3/8 1/2oz": fractions in a run share the trailing unit
_OZ_RUN = re.compile(r"(?<![\d./])(\d+/\d+)(?=(?:\s*[-~,、・]\s*|\s+)\d[\d./\-\s~,、・]*oz)")
_GRAMS = re.compile(r"(\d+(?:\.\d+)?)\s*(?:g|グラム)(?![a-z])")
_BARE = re.compile(r"(?<![\d./])(\d+(?:\.\d+)?)(?![\d./])")


def _oz_value(m: re.Match) -> float:
    if m.group(1):
        return int(m.group(1)) + int(m.group(2)) / int(m.group(3))
    if m.group(4):
        den = int(m.group(5))
        return int(m.group(4)) / den if den else 0.0
    try:
        return float(m.group(6))
    except (TypeError, ValueError):
        return 0.0


def normalize_weights(values) -> list[float]:
    out: set[float] = set()
    for v in values or []:
        try:
            f = round(float(v), 1)
        except (TypeError, ValueError):
            continue
        if 0 < f < MAX_WEIGHT_G:
            out.add(f)
    return sorted(out)


def parse_weights(text: str | None, assume_grams: bool = False) -> list[float]:
    """All weights mentioned in text, in grams, deduped and ascending.

    "3/8oz" and "1.1/4oz" are fractions; "24oz class(約680g)" keeps the
    parenthesized grams. assume_grams reads unitless numbers (spec columns
    headed 自重(g)).
    """
    if not text:
        return []
    t = fold_width(text).lower().replace("約", "")
    found: list[float] = []

    def _take_paren(m: re.Match) -> str:
        found.append(float(m.group(1)))
        return " "

    t = _OZ_WITH_GRAMS.sub(_take_paren, t)
    t = _OZ_RUN.sub(lambda m: m.group(1) + "oz", t)

    def _take_oz(m: re.Match) -> str:
        oz = _oz_value(m)
        if oz > 0:
            found.append(oz * OZ_TO_GRAMS)
        return " "

    t = _OZ.sub(_take_oz, t)
    for m in _GRAMS.finditer(t):
        found.append(float(m.group(1)))
    if not found and assume_grams:
        for m in _BARE.finditer(t):
            found.append(float(m.group(1)))
    return normalize_weights(found)


# ------------------------------------------------------------------ length

_MM = re.compile(r"(\d+(?:\.\d+)?)\s*mm")
_CM = re.compile(r"(\d+(?:\.\d+)?)\s*cm")
_INCH_FRAC = re.compile(r"(?:(\d+)[\-\s])?(\d+)/(\d+)\s*(?:inch|in\b|インチ|\")")
_INCH = re.compile(r"(\d+(?:\.\d+)?)\s*(?:inch|in\b|インチ|\")")


def _half_up(v: float) -> int:
    return int(math.floor(v + 0.5))


def _length_ok(mm: float) -> int | None:
    v = _half_up(mm)
    return v if 0 < v <= MAX_LENGTH_MM else None


def parse_length(text: str | None, assume_mm: bool = False) -> int | None:
    """First length in text as integer mm: mm, else cm x10, else inch x25.4."""
    if not text:
        return None
    t = fold_width(text).lower()
    m = _MM.search(t)
    if m:
        return _length_ok(float(m.group(1)))
    m = _CM.search(t)
    if m:
        return _length_ok(float(m.group(1)) * 10)
    m = _INCH_FRAC.search(t)
    if m:
        whole = int(m.group(1)) if m.group(1) else 0
        den = int(m.group(3))
        if den:
            return _length_ok((whole + int(m.group(2)) / den) * INCH_TO_MM)
    m = _INCH.search(t)
    if m:
        return _length_ok(float(m.group(1)) * INCH_TO_MM)
    if assume_mm:
        m = _BARE.search(t)
        if m:
            return _length_ok(float(m.group(1)))
    return None


# ------------------------------------------------------------------ slug

_EXT = re.compile(r"\.(?:html?|php|aspx?|jsp|cgi)$", re.I)


def slug_from_url(url: str | None) -> str:
    """Last non-empty path segment, lowercased, extension dropped."""
    try:
        path = urlparse(str(url or "")).path
    except Exception:
        return ""
    segs = [s for s in path.split("/") if s.strip()]
    if not segs:
        return ""
    seg = _EXT.sub("", unquote(segs[-1])).strip().lower()
    seg = quote(seg, safe="-_.~")
    if seg in ("index", "detail", "product", "products", "item"):
        return ""
    return seg


def slugify(name: str | None) -> str:
    n = g(fold_width(name))
    if not n:
        return ""
    s = re.sub(r"[^a-z0-9]+", "-", n.lower()).strip("-")
    if s and not has_cjk(n):
        return s
    return quote(n, safe="").lower()


def make_slug(url: str | None, name: str | None = None) -> str:
    return slug_from_url(url) or slugify(name)


# ------------------------------------------------------------------ tables

def table_rows(table) -> list[list[str]]:
    """Rows of a <table> as lists of cell texts (th and td)."""
    rows: list[list[str]] = []
    if table is None:
        return rows
    for tr in table.select("tr"):
        cells = [g(c.get_text(" ")) for c in tr.find_all(["th", "td"])]
        if any(cells):
            rows.append(cells)
    return rows


def find_col(headers: list[str], *keys: str) -> int:
    for i, h in enumerate(headers):
        hu = fold_width(h).upper()
        if any(k.upper() in hu for k in keys):
            return i
    return -1


def spec_pairs(lines: list[str]) -> dict[str, str]:
    """"LENGTH：250mm" style lines -> {"LENGTH": "250mm"}; first key wins."""
    out: dict[str, str] = {}
    for line in lines or []:
        m = re.match(r"^\s*([^:]+?)\s*:\s*(.+)$", fold_width(line))
        if m:
            out.setdefault(m.group(1).strip().upper(), m.group(2).strip())
    return out


# ------------------------------------------------------------------ page meta

def meta_content(soup: BeautifulSoup, key: str) -> str:
    """content of <meta property=key> or <meta name=key>."""
    tag = soup.find("meta", attrs={"property": key}) or soup.find("meta", attrs={"name": key})
    return g(tag.get("content")) if tag is not None else ""


def page_name(soup: BeautifulSoup) -> str:
    """h1, then <title> / og:title with the " | site" tail cut."""
    h1 = soup.select_one("h1")
    name = g(h1.get_text(" ")) if h1 is not None else ""
    if not name and soup.title is not None:
        name = re.split(r"\s*[|｜]", g(soup.title.get_text()))[0].strip()
    if not name:
        name = re.split(r"\s*[|｜]", meta_content(soup, "og:title"))[0].strip()
    return name


def figure_colors(soup: BeautifulSoup, base: str, scope=None) -> list[tuple[str, str]]:
    """(caption, image) for every <figure> holding both an <img> and a <figcaption>."""
    out: list[tuple[str, str]] = []
    for fig in (scope or soup).select("figure"):
        im = fig.select_one("img")
        cap = fig.select_one("figcaption")
        if im is None or cap is None:
            continue
        name = g(cap.get_text(" "))
        if name:
            out.append((name, img_src(im, base)))
    return out


def label_specs(tables) -> tuple[list[float], int | None, int]:
    """Weights, length and price from "label | value" rows of spec tables."""
    weights: list[float] = []
    length = None
    price = 0
    for table in tables:
        for cells in table_rows(table):
            if len(cells) < 2:
                continue
            label, value = cells[0].lower(), cells[1]
            if re.search(r"重量|ウエイト|ウェイト|weight", label):
                weights += parse_weights(value)
            if length is None and re.search(r"全長|length|サイズ|size|レングス", label):
                length = parse_length(value)
            if not price and re.search(r"価格|price|円", label):
                price = parse_price(value)
    return weights, length, price
