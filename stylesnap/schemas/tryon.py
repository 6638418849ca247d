from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from stylesnap.schemas.catalog import AudienceFilter, Item


class ModelId(str, Enum):
    GEMINI_FLASH = "googleai/gemini-2.0-flash"
    IMAGEN3 = "imagen3"
    IMAGEN4 = "imagen4"


DEFAULT_MODEL = ModelId.GEMINI_FLASH


class ModelOption(BaseModel):
    id: ModelId
    name: str
    description: str


class ValidateImageIn(BaseModel):
    photoDataUri: str = Field(..., description="data:<mimetype>;base64,<encoded_data>")


class ValidationResult(BaseModel):
    isValid: bool
    reason: str = ""
    suggestions: str = ""


class GenerateTryOnInput(BaseModel):
    userImage: str = Field(..., description="The user's photo as a data URI")
    itemImage: str = Field(..., description="The item photo as a data URI or an HTTP(S) URL")
    model: ModelId = DEFAULT_MODEL


class GenerateTryOnOutput(BaseModel):
    generatedImage: str


class UploadOut(BaseModel):
    dataUri: str
    fileName: Optional[str] = None


class TryOnPage(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    audience: AudienceFilter
    item: Item
    title: str
    models: List[ModelOption]
    default_model: ModelId
    max_upload_mb: float
