from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional

from .classifiers import TYPE_RULES, classify_fish, classify_type
from .models import Color, LureRecord, ScrapeError, Source, SpecVariant
from .scrape_utils import abs_url, clip_description, g, make_slug, normalize_weights

PRICE_POLICIES = ('first_nonzero', 'min', 'max')


def _variant(v: Any) -> SpecVariant:
    if isinstance(v, SpecVariant):
        return v
    if isinstance(v, dict):
        return SpecVariant(
            weights=list(v.get('weights') or []),
            length=v.get('length'),
            price=int(v.get('price') or 0),
            label=str(v.get('label') or ''),
        )
    raise TypeError(f'unsupported spec variant: {v!r}')


def _color(c: Any) -> Color:
    if isinstance(c, Color):
        return c
    if isinstance(c, dict):
        return Color(str(c.get('name') or ''), str(c.get('image_url') or c.get('imageUrl') or ''))
    name, image = c
    return Color(str(name or ''), str(image or ''))


def color_key(name: str) -> str:
    return ' '.join((name or '').split()).casefold()


def pick_price(prices: Iterable[int], policy: str = 'first_nonzero') -> int:
    """Resolve several price sightings into one. 0 sightings are ignored."""
    seen = [int(p) for p in prices if p and int(p) > 0]
    if not seen:
        return 0
    if policy == 'min':
        return min(seen)
    if policy == 'max':
        return max(seen)
    if policy != 'first_nonzero':
        raise ValueError(f'unknown price policy: {policy}')
    return seen[0]


def merge_colors(groups: Iterable[Iterable[Any]], base: str) -> List[Color]:
    """Union of every color listing; first name (case/space-insensitive) wins."""
    out: List[Color] = []
    seen: Dict[str, Color] = {}
    for group in groups:
        for raw in group or []:
            c = _color(raw)
            name = g(c.name)
            key = color_key(name)
            if not key:
                continue
            image = abs_url(c.image_url, base) if c.image_url else ''
            if key in seen:
                # a later listing may carry the image the first one lacked
                if not seen[key].image_url:
                    seen[key].image_url = image
                continue
            seen[key] = Color(name, image)
            out.append(seen[key])
    return out


def assemble(url: str, frag: Dict[str, Any], source: Source) -> LureRecord:
    """Turn one page's raw fragments into a LureRecord.

    Raises ScrapeError when the name or the slug cannot be determined.
    """
    name = g(frag.get('name'))
    if not name:
        raise ScrapeError('product name not found', url)
    slug = g(frag.get('slug')) or make_slug(url, name)
    if not slug:
        raise ScrapeError('could not determine slug', url)

    variants = [_variant(v) for v in frag.get('variants') or []]
    weights = normalize_weights(
        [w for v in variants for w in v.weights] + list(frag.get('weights') or [])
    )
    length: Optional[int] = next((v.length for v in variants if v.length), None)
    if length is None:
        length = frag.get('length') or None
    price = pick_price([v.price for v in variants], source.price_policy)
    if not price:
        price = int(frag.get('price') or 0)

    colors = merge_colors(
        [frag.get('colors') or []] + list(frag.get('extra_colors') or []), url
    )
    main_image = abs_url(frag.get('main_image') or '', url)
    if not colors and source.single_finish and main_image:
        colors = [Color(name, main_image)]
    if not main_image:
        main_image = next((c.image_url for c in colors if c.image_url), '')

    description = clip_description(frag.get('description'))
    hint = ' '.join(g(x) for x in (frag.get('type_hint'), frag.get('breadcrumb')) if x)
    lure_type = g(frag.get('type')) or classify_type(
        name, hint, description,
        rules=source.type_rules or TYPE_RULES,
        default=source.default_type,
    )
    fish = frag.get('target_fish')
    if not fish:
        fish = classify_fish(
            lure_type, name, hint, description,
            category=frag.get('category'),
            category_map=source.fish_map,
            default=source.default_fish,
        )

    return LureRecord(
        name=name,
        name_kana=g(frag.get('name_kana')) or name,
        slug=slug,
        manufacturer=source.manufacturer,
        manufacturer_slug=source.slug,
        type=lure_type,
        target_fish=list(dict.fromkeys(fish)),
        description=description,
        price=price,
        colors=colors,
        weights=weights,
        length=length,
        main_image=main_image,
        source_url=url,
    )
