import logging

from fastapi import HTTPException
from pydantic import ValidationError

from stylesnap.core.config import ConfigurationError
from stylesnap.core.prompts import VALIDATION_PROMPT
from stylesnap.schemas.tryon import ValidationResult
from stylesnap.services import genai_client
from stylesnap.services.image_utils import decode_data_uri, preview
from stylesnap.services.parsing import extract_json, safe_bool

logger = logging.getLogger(__name__)


def validation_failed() -> ValidationResult:
    return ValidationResult(
        isValid=False,
        reason="An error occurred during validation.",
        suggestions="Please try again or use a different image.",
    )


def _coerce(parsed, text: str) -> ValidationResult:
    if isinstance(parsed, ValidationResult):
        return parsed
    obj = parsed if isinstance(parsed, dict) else extract_json(text)
    return ValidationResult(
        isValid=safe_bool(obj.get("isValid")),
        reason=str(obj.get("reason") or ""),
        suggestions=str(obj.get("suggestions") or ""),
    )


async def validate_image(photo_data_uri: str) -> ValidationResult:
    """Ask the vision model whether the photo is usable for try-on.

    Transport and model failures come back as a negative result, so callers
    only ever see "valid" or "not valid". Missing configuration still raises.
    """
    try:
        mime, data = decode_data_uri(photo_data_uri)
        parsed, text = await genai_client.generate_json(VALIDATION_PROMPT, mime, data, ValidationResult)
        result = _coerce(parsed, text)
    except ConfigurationError:
        raise
    except (HTTPException, ValidationError, ValueError) as e:
        logger.warning("Validation of %s failed: %s", preview(photo_data_uri), e)
        return validation_failed()
    except Exception:
        logger.exception("Validation call failed")
        return validation_failed()

    logger.info("Validation result: isValid=%s reason=%r", result.isValid, result.reason)
    return result
