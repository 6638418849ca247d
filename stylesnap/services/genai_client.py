"""google-genai SDK calls used by validation and the Gemini Flash try-on path."""

import base64
import logging
from typing import Any, Optional, Tuple

from google import genai
from google.genai import types

from stylesnap.core.config import get_settings, require_api_key

logger = logging.getLogger(__name__)


def make_client() -> genai.Client:
    return genai.Client(api_key=require_api_key(get_settings()))


def image_part(mime: str, data: bytes) -> types.Part:
    return types.Part.from_bytes(data=data, mime_type=mime)


async def generate_json(prompt: str, mime: str, data: bytes, schema: Any) -> Tuple[Any, str]:
    """Ask the validation model about one image; returns (parsed, raw_text)."""
    settings = get_settings()
    client = make_client()
    resp = await client.aio.models.generate_content(
        model=settings.validation_model,
        contents=[prompt, image_part(mime, data)],
        config=types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=schema,
            temperature=0,
        ),
    )
    return resp.parsed, resp.text or ""


async def generate_image(
    parts: list, model: str, temperature: float
) -> Optional[Tuple[str, bytes]]:
    """Call an image-capable Gemini model; returns the first image part or None."""
    client = make_client()
    resp = await client.aio.models.generate_content(
        model=model,
        contents=parts,
        config=types.GenerateContentConfig(
            response_modalities=["TEXT", "IMAGE"],
            temperature=temperature,
        ),
    )
    return first_inline_image(resp)


def first_inline_image(resp: Any) -> Optional[Tuple[str, bytes]]:
    for cand in getattr(resp, "candidates", None) or []:
        content = getattr(cand, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if inline is None or not inline.data:
                continue
            mime = inline.mime_type or "image/png"
            if not mime.startswith("image/"):
                continue
            raw = inline.data
            if isinstance(raw, str):
                raw = base64.b64decode(raw)
            return mime, raw
    return None
