"""Color images: download, shrink to WebP and mirror into Supabase Storage."""
from __future__ import annotations
import io
from typing import Any, Dict, List, Optional

import requests
from PIL import Image, UnidentifiedImageError

from .creds import require_secret
from .fetch import HEADERS, _log
from .models import LureRecord

# CDNs that refuse hotlinking without their own site as referer
REFERERS = {
    "shimano.com": "https://fish.shimano.com/",
}


def referer_for(url: str) -> str | None:
    return next((ref for host, ref in REFERERS.items() if host in url), None)


def to_webp(data: bytes, width: int = 500, quality: int = 80) -> bytes:
    """Resize to `width` (never enlarging) and encode as WebP."""
    with Image.open(io.BytesIO(data)) as img:
        if img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGBA" if "transparency" in img.info else "RGB")
        if img.width > width:
            height = max(1, round(img.height * width / img.width))
            img = img.resize((width, height), Image.LANCZOS)
        out = io.BytesIO()
        img.save(out, format="WEBP", quality=quality)
    return out.getvalue()


def storage_key(maker_slug: str, slug: str, index: int) -> str:
    """index is the 0-based color position; keys are 1-based and zero padded."""
    return f"{maker_slug}/{slug}/{index + 1:02d}.webp"


class ImageMirror:
    def __init__(self, storage, bucket: str, session: requests.Session | None = None,
                 width: int = 500, quality: int = 80, timeout: float = 30):
        self.storage = storage
        self.bucket = bucket
        self.session = session or requests.Session()
        self.width = width
        self.quality = quality
        self.timeout = timeout
        self._cache: Dict[str, str] = {}

    @classmethod
    def from_settings(cls, settings: Dict[str, Any], client) -> "ImageMirror":
        return cls(
            client.storage,
            require_secret("IMAGE_BUCKET"),
            width=int(settings.get("image_width", 500)),
            quality=int(settings.get("image_quality", 80)),
            timeout=float(settings.get("fetch_timeout_s", 30)),
        )

    def download(self, url: str) -> bytes:
        headers = dict(HEADERS)
        headers["Accept"] = "image/avif,image/webp,image/*,*/*;q=0.8"
        ref = referer_for(url)
        if ref:
            headers["Referer"] = ref
        r = self.session.get(url, headers=headers, timeout=self.timeout)
        r.raise_for_status()
        return r.content

    def upload(self, key: str, body: bytes) -> str:
        bucket = self.storage.from_(self.bucket)
        bucket.upload(key, body, {
            "content-type": "image/webp",
            "cache-control": "31536000",
            "upsert": "true",
        })
        return bucket.get_public_url(key)

    def mirror(self, image_url: str, key: str) -> Optional[str]:
        """Public URL of the stored copy, or None when any step fails."""
        if image_url in self._cache:
            return self._cache[image_url]
        try:
            body = to_webp(self.download(image_url), self.width, self.quality)
            _log("images", f"uploading {key} ({len(body) / 1024:.1f} KB)")
            public = self.upload(key, body)
        except (requests.RequestException, UnidentifiedImageError, OSError) as exc:
            _log("images", f"[ERROR] {image_url}: {exc}")
            return None
        except Exception as exc:
            # storage client errors
            _log("images", f"[ERROR] upload {key}: {exc}")
            return None
        self._cache[image_url] = public
        return public

    def mirror_colors(self, record: LureRecord) -> Dict[str, str]:
        """color name -> public URL for every color whose image made it."""
        out: Dict[str, str] = {}
        skipped: List[str] = []
        for i, color in enumerate(record.colors):
            if not color.image_url:
                skipped.append(color.name)
                continue
            public = self.mirror(color.image_url, storage_key(record.manufacturer_slug, record.slug, i))
            if public:
                out[color.name] = public
        for name in skipped:
            _log("images", f"skipping color {name}: no image URL")
        _log("images", f"uploaded {len(out)} of {len(record.colors)} color image(s)")
        return out
