"""Pytest configuration and fixtures."""

import base64
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from stylesnap.core.config import get_settings


@pytest.fixture(autouse=True)
def settings_env(monkeypatch):
    """Fresh settings with a dummy key for every test."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setenv("API_TXT_PATH", "")
    monkeypatch.setenv("ENVIRONMENT", "test")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "")
    get_settings.cache_clear()


@pytest.fixture
def client():
    from stylesnap.main import create_app

    with TestClient(create_app()) as c:
        yield c


def make_jpeg(size=(64, 96), color=(200, 120, 40)) -> bytes:
    out = BytesIO()
    Image.new("RGB", size, color).save(out, format="JPEG")
    return out.getvalue()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_jpeg()


@pytest.fixture
def photo_uri(jpeg_bytes) -> str:
    return "data:image/jpeg;base64," + base64.b64encode(jpeg_bytes).decode("ascii")


@pytest.fixture
def item_uri() -> str:
    return "data:image/png;base64," + base64.b64encode(b"\x89PNG-item").decode("ascii")
