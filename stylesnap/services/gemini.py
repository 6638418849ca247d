"""Raw ``generateContent`` REST calls (no SDK) used by the Imagen try-on path."""

import base64
import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException

from stylesnap.core.config import get_settings, require_api_key
from stylesnap.core.http import generation_timeout, make_httpx_client

logger = logging.getLogger(__name__)


def img_part(mime: str, data: bytes) -> Dict[str, Any]:
    b64 = base64.b64encode(data).decode("utf-8")
    return {"inlineData": {"mimeType": mime, "data": b64}}


def find_image_part(data: Dict[str, Any]) -> Optional[Tuple[str, bytes]]:
    for cand in (data.get("candidates") or []):
        content = (cand or {}).get("content") or {}
        for part in (content.get("parts") or []):
            inline = (part or {}).get("inlineData") or (part or {}).get("inline_data")
            if not inline or not inline.get("data"):
                continue
            mime = inline.get("mimeType") or inline.get("mime_type") or "image/png"
            if mime.startswith("image/"):
                return mime, base64.b64decode(inline["data"])
    return None


async def gemini_generate_image(
    model: str, images: List[Tuple[str, bytes]], prompt: str, temperature: float
) -> Tuple[str, bytes]:
    settings = get_settings()
    key = require_api_key(settings)
    url = f"{settings.gemini_api_base.rstrip('/')}/models/{model}:generateContent"

    parts: List[Dict[str, Any]] = [img_part(mime, data) for mime, data in images]
    parts.append({"text": prompt})

    payload = {
        "contents": [{"role": "user", "parts": parts}],
        "generationConfig": {"temperature": temperature, "responseModalities": ["TEXT", "IMAGE"]},
    }

    logger.info("generateContent model=%s parts=%d", model, len(parts))
    async with make_httpx_client(generation_timeout(), settings.proxy_url) as client:
        r = await client.post(
            url,
            json=payload,
            headers={"Content-Type": "application/json", "x-goog-api-key": key},
        )

    if r.status_code < 200 or r.status_code >= 300:
        raise HTTPException(502, f"generateContent {r.status_code}: {(r.text or '')[:1500]}")

    data = r.json()
    found = find_image_part(data)
    if found is None:
        logger.error("generateContent returned no image: %s", str(data)[:2000])
        raise HTTPException(502, f"{model} did not return image data in the expected format")
    return found
