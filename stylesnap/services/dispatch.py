"""Try-on generation: one strategy per selectable model.

Each strategy takes (user_image, item_image) and returns a data URI or
raises. Adding a model means adding an entry to ``STRATEGIES``.
"""

import logging
from typing import Awaitable, Callable, Dict, List

from fastapi import HTTPException

from stylesnap.core.config import ConfigurationError, get_settings
from stylesnap.core.prompts import TRYON_COMPOSITE_PROMPT
from stylesnap.schemas.tryon import GenerateTryOnInput, GenerateTryOnOutput, ModelId, ModelOption
from stylesnap.services import genai_client
from stylesnap.services.gemini import gemini_generate_image
from stylesnap.services.image_utils import decode_data_uri, load_image_reference, preview, to_data_uri

logger = logging.getLogger(__name__)

Strategy = Callable[[str, str], Awaitable[str]]

MODEL_OPTIONS: List[ModelOption] = [
    ModelOption(id=ModelId.GEMINI_FLASH, name="Gemini Flash", description="Fast and versatile model."),
    ModelOption(id=ModelId.IMAGEN3, name="Imagen 3", description="Advanced image generation."),
    ModelOption(id=ModelId.IMAGEN4, name="Imagen 4", description="State-of-the-art capabilities."),
]

MODEL_LABELS: Dict[ModelId, str] = {opt.id: opt.name for opt in MODEL_OPTIONS}


async def gemini_flash_try_on(user_image: str, item_image: str) -> str:
    settings = get_settings()
    user_mime, user_bytes = decode_data_uri(user_image)
    item_mime, item_bytes = await load_image_reference(item_image)

    parts = [
        genai_client.image_part(user_mime, user_bytes),
        genai_client.image_part(item_mime, item_bytes),
        TRYON_COMPOSITE_PROMPT,
    ]
    logger.info(
        "Gemini Flash try-on: model=%s temperature=%s",
        settings.flash_image_model,
        settings.generation_temperature,
    )
    found = await genai_client.generate_image(
        parts, settings.flash_image_model, settings.generation_temperature
    )
    if found is None:
        raise HTTPException(
            502, f"{settings.flash_image_model} did not return image data in the expected format"
        )
    mime, data = found
    return to_data_uri(data, mime)


def imagen_try_on(model_setting: str) -> Strategy:
    async def _call(user_image: str, item_image: str) -> str:
        settings = get_settings()
        model = getattr(settings, model_setting)
        images = [decode_data_uri(user_image), await load_image_reference(item_image)]
        mime, data = await gemini_generate_image(
            model, images, TRYON_COMPOSITE_PROMPT, settings.generation_temperature
        )
        return to_data_uri(data, mime)

    return _call


STRATEGIES: Dict[ModelId, Strategy] = {
    ModelId.GEMINI_FLASH: gemini_flash_try_on,
    ModelId.IMAGEN3: imagen_try_on("imagen3_model"),
    ModelId.IMAGEN4: imagen_try_on("imagen4_model"),
}


async def generate_try_on(req: GenerateTryOnInput) -> GenerateTryOnOutput:
    model = req.model
    strategy = STRATEGIES.get(model)
    if strategy is None:
        raise HTTPException(400, f"The selected AI model ({model.value}) is not supported for try-on generation.")

    label = MODEL_LABELS.get(model, model.value)
    logger.info("Try-on requested: model=%s user=%s", model.value, preview(req.userImage, 40))
    try:
        image = await strategy(req.userImage, req.itemImage)
    except ConfigurationError:
        raise
    except HTTPException as e:
        if e.status_code == 400:
            raise
        logger.error("Try-on with %s failed: %s", label, e.detail)
        raise HTTPException(502, f"Failed to generate image with {label}: {e.detail}")
    except Exception as e:
        logger.exception("Try-on with %s failed", label)
        raise HTTPException(502, f"Failed to generate image with {label}: {e}")

    return GenerateTryOnOutput(generatedImage=image)
