import base64
import binascii
import logging
import re
from io import BytesIO
from typing import Tuple

import httpx
from fastapi import HTTPException
from PIL import Image, ImageOps

from stylesnap.core.config import get_settings
from stylesnap.core.http import fetch_timeout, make_httpx_client

try:
    import pillow_heif  # type: ignore

    pillow_heif.register_heif_opener()
except ImportError:
    pillow_heif = None

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:(image/[\w.+-]+);base64,(.*)$", flags=re.S)


def parse_data_uri(data_uri: str) -> Tuple[str, str]:
    """Split ``data:<mime>;base64,<payload>`` into (mime, payload)."""
    if not data_uri or not isinstance(data_uri, str):
        raise HTTPException(400, "Invalid input: data URI must be a non-empty string.")
    m = _DATA_URI_RE.match(data_uri.strip())
    if not m or not m.group(2):
        raise HTTPException(
            400, "Invalid image data URI. Expected format: data:<mimetype>;base64,<encoded_data>"
        )
    return m.group(1), m.group(2)


def decode_data_uri(data_uri: str) -> Tuple[str, bytes]:
    mime, payload = parse_data_uri(data_uri)
    try:
        return mime, base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(400, "Invalid image data URI: payload is not valid base64")


def to_data_uri(data: bytes, mime: str) -> str:
    b64 = base64.b64encode(data).decode("utf-8")
    return f"data:{mime};base64,{b64}"


def preview(data_uri: str, limit: int = 100) -> str:
    return (data_uri or "")[:limit]


def open_image(image_bytes: bytes) -> Image.Image:
    try:
        img = Image.open(BytesIO(image_bytes))
        img.load()
    except Exception as e:
        hint = " (HEIC? install pillow-heif)" if pillow_heif is None else ""
        raise HTTPException(400, f"Cannot decode image{hint}: {e}")

    img = ImageOps.exif_transpose(img)
    if img.mode != "RGB":
        img = img.convert("RGB")
    return img


def resize_max(img: Image.Image, max_side: int) -> Image.Image:
    w, h = img.size
    m = max(w, h)
    if m <= max_side:
        return img
    scale = max_side / float(m)
    return img.resize((max(1, int(w * scale)), max(1, int(h * scale))), Image.Resampling.LANCZOS)


def encode_jpeg(img: Image.Image, quality: int = 90) -> bytes:
    out = BytesIO()
    img.save(out, format="JPEG", quality=quality, optimize=True)
    return out.getvalue()


def normalize_photo(image_bytes: bytes, max_side: int) -> str:
    """Any decodable upload -> resized JPEG data URI."""
    img = resize_max(open_image(image_bytes), max_side)
    return to_data_uri(encode_jpeg(img), "image/jpeg")


def _fetch_failed(reason: str, status_code: int = 502) -> HTTPException:
    return HTTPException(status_code, f"Failed to process item image from URL: {reason}")


def check_item_url(url: str) -> httpx.URL:
    """Only catalog image hosts are fetched server-side."""
    settings = get_settings()
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        raise HTTPException(400, "Invalid item image reference. Expected a data URI or an HTTP/S URL.")
    allowed = {h.lower() for h in settings.item_image_hosts}
    if parsed.scheme not in ("http", "https") or parsed.host.lower() not in allowed:
        raise HTTPException(400, f"Item image host is not allowed: {parsed.host or 'none'}")
    return parsed


async def fetch_image(url: str) -> Tuple[str, bytes]:
    settings = get_settings()
    check_item_url(url)
    limit = int(settings.max_item_image_mb * 1024 * 1024)
    logger.info("Fetching item image from URL: %s", url)

    chunks = []
    try:
        async with make_httpx_client(fetch_timeout(), settings.proxy_url) as client:
            async with client.stream("GET", url, follow_redirects=False) as r:
                if r.status_code < 200 or r.status_code >= 300:
                    raise _fetch_failed(f"fetch failed with status {r.status_code}")
                content_type = (r.headers.get("content-type") or "").split(";")[0].strip()
                if not content_type.startswith("image/"):
                    raise _fetch_failed(f"invalid content type {content_type or 'none'}", 400)

                declared = r.headers.get("content-length", "")
                if declared.isdigit() and int(declared) > limit:
                    raise _fetch_failed(f"image exceeds {settings.max_item_image_mb:g}MB")
                total = 0
                async for chunk in r.aiter_bytes():
                    total += len(chunk)
                    if total > limit:
                        raise _fetch_failed(f"image exceeds {settings.max_item_image_mb:g}MB")
                    chunks.append(chunk)
    except httpx.HTTPError as e:
        raise _fetch_failed(str(e) or type(e).__name__)

    return content_type, b"".join(chunks)


async def load_image_reference(ref: str) -> Tuple[str, bytes]:
    """Resolve a data URI or an HTTP(S) URL into (mime, bytes)."""
    ref = (ref or "").strip()
    if ref.startswith("data:"):
        return decode_data_uri(ref)
    if ref.startswith("http://") or ref.startswith("https://"):
        return await fetch_image(ref)
    raise HTTPException(400, "Invalid item image reference. Expected a data URI or an HTTP/S URL.")
