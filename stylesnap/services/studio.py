import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import HTTPException

from stylesnap.schemas.catalog import Item
from stylesnap.schemas.tryon import GenerateTryOnInput, GenerateTryOnOutput, ModelId, ValidationResult
from stylesnap.services.dispatch import MODEL_OPTIONS, generate_try_on
from stylesnap.services.session import GENERATE, VALIDATE, TryOnSession
from stylesnap.services.uploader import DEFAULT_MAX_FILE_SIZE_MB, ImageUploader
from stylesnap.services.validation import validate_image, validation_failed

logger = logging.getLogger(__name__)

Validator = Callable[[str], Awaitable[ValidationResult]]
Generator = Callable[[GenerateTryOnInput], Awaitable[GenerateTryOnOutput]]


class TryOnStudio:
    """Drives one item's try-on page: upload -> validate -> generate."""

    def __init__(
        self,
        item: Item,
        session: Optional[TryOnSession] = None,
        validator: Validator = validate_image,
        generator: Generator = generate_try_on,
        max_file_size_mb: float = DEFAULT_MAX_FILE_SIZE_MB,
    ) -> None:
        self.item = item
        self.session = session or TryOnSession()
        self.validator = validator
        self.generator = generator
        self.uploader = ImageUploader(self.upload, max_file_size_mb=max_file_size_mb)
        self.notice: Optional[str] = None

    def upload(self, data_uri: str) -> None:
        self.session.set_user_image(data_uri)
        self.notice = None

    def select_model(self, model: ModelId) -> None:
        if not self.session.can_select_model:
            return
        self.session.select_model(model)

    async def validate(self) -> Optional[ValidationResult]:
        session = self.session
        if not session.user_image:
            self.notice = "No Image: please upload an image first."
            return None

        ticket = session.begin(VALIDATE)
        try:
            result = await self.validator(session.user_image)
        except Exception as e:
            logger.warning("Validation error: %s", e)
            result = validation_failed()

        if not session.finish_validation(ticket, result):
            logger.info("Dropping stale validation result (ticket %d)", ticket)
            return None
        if result.isValid:
            self.notice = "Image Validated: your image is suitable for try-on!"
        else:
            self.notice = f"Image Validation Failed: {result.reason or 'The image is not suitable. Please check suggestions.'}"
        return result

    async def generate(self) -> Optional[str]:
        session = self.session
        if not session.can_generate:
            self.notice = "Cannot Generate: ensure an image is uploaded and validated."
            return None

        ticket = session.begin(GENERATE)
        req = GenerateTryOnInput(
            userImage=session.user_image,
            itemImage=self.item.image_url,
            model=session.selected_model,
        )
        try:
            out = await self.generator(req)
        except Exception as e:
            detail = e.detail if isinstance(e, HTTPException) else str(e)
            logger.warning("Generation error: %s", detail)
            if session.fail_generation(ticket, f"Could not generate the try-on image: {detail}"):
                self.notice = "Generation Error: could not generate the try-on image."
            return None

        if not session.finish_generation(ticket, out.generatedImage):
            logger.info("Dropping stale generation result (ticket %d)", ticket)
            return None
        self.notice = "Try-On Complete! Check out your new look."
        return out.generatedImage

    def view(self) -> Dict[str, Any]:
        s = self.session
        return {
            "item": self.item.model_dump(mode="json", by_alias=True),
            "userImage": s.user_image,
            "validation": s.validation.model_dump() if s.validation else None,
            "generatedImage": s.generated_image,
            "selectedModel": s.selected_model.value,
            "models": [m.model_dump(mode="json") for m in MODEL_OPTIONS],
            "error": s.error,
            "notice": self.notice,
            "isValidating": s.is_validating,
            "isGenerating": s.is_generating,
            "canValidate": s.can_validate,
            "canSelectModel": s.can_select_model,
            "canGenerate": s.can_generate,
        }
