import logging
from typing import Callable, Optional

from stylesnap.services.image_utils import to_data_uri

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE_MB = 5


class UploadRejected(ValueError):
    """A selected file was refused before encoding."""

    def __init__(self, title: str, description: str, status_code: int = 400) -> None:
        super().__init__(f"{title}: {description}")
        self.title = title
        self.description = description
        self.status_code = status_code


def check_upload(size: int, content_type: Optional[str], max_file_size_mb: float) -> None:
    if size > max_file_size_mb * 1024 * 1024:
        raise UploadRejected(
            "File too large",
            f"Please upload an image smaller than {max_file_size_mb:g}MB.",
            status_code=413,
        )
    if not (content_type or "").startswith("image/"):
        raise UploadRejected(
            "Invalid file type",
            "Please upload an image file (e.g., JPG, PNG).",
            status_code=415,
        )


class ImageUploader:
    """Single-image picker for the try-on page.

    Accepted files are encoded to a data URI and handed to ``on_upload``;
    rejected ones only set ``error``.
    """

    def __init__(
        self,
        on_upload: Callable[[str], None],
        max_file_size_mb: float = DEFAULT_MAX_FILE_SIZE_MB,
    ) -> None:
        self.on_upload = on_upload
        self.max_file_size_mb = max_file_size_mb
        self.preview_url: Optional[str] = None
        self.file_name: Optional[str] = None
        self.input_value: str = ""
        self.error: Optional[str] = None

    def select(self, filename: str, content_type: Optional[str], data: bytes) -> bool:
        try:
            check_upload(len(data), content_type, self.max_file_size_mb)
        except UploadRejected as e:
            logger.info("Upload rejected (%s): %s", filename, e.title)
            self.error = str(e)
            return False

        self.error = None
        self.file_name = filename
        self.input_value = filename
        self.preview_url = to_data_uri(data, content_type or "image/jpeg")
        self.on_upload(self.preview_url)
        return True

    def remove(self) -> None:
        self.preview_url = None
        self.file_name = None
        self.input_value = ""
        self.error = None
        self.on_upload("")
