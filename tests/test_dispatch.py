import asyncio
import base64
import json

import httpx
import pytest
from fastapi import HTTPException

from stylesnap.core.config import ConfigurationError, get_settings
from stylesnap.core.prompts import TRYON_COMPOSITE_PROMPT
from stylesnap.schemas.tryon import GenerateTryOnInput, ModelId
from stylesnap.services import dispatch, gemini, genai_client, image_utils

PNG = b"\x89PNG-generated"


def _mock_client_factory(handler, seen=None):
    def _factory(timeout, proxy_url=""):
        def _wrapped(request):
            if seen is not None:
                seen.append(request)
            return handler(request)

        return httpx.AsyncClient(transport=httpx.MockTransport(_wrapped))

    return _factory


def _image_response(mime="image/png", data=PNG):
    return {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "Here is the composite."},
                        {"inlineData": {"mimeType": mime, "data": base64.b64encode(data).decode()}},
                    ]
                }
            }
        ]
    }


def _run(req):
    return asyncio.run(dispatch.generate_try_on(req))


class TestGeminiFlash:
    def test_returns_first_image(self, monkeypatch, photo_uri, item_uri, jpeg_bytes):
        calls = []

        async def fake_generate_image(parts, model, temperature):
            calls.append((parts, model, temperature))
            return "image/png", PNG

        monkeypatch.setattr(genai_client, "generate_image", fake_generate_image)

        out = _run(GenerateTryOnInput(userImage=photo_uri, itemImage=item_uri, model=ModelId.GEMINI_FLASH))

        assert out.generatedImage == "data:image/png;base64," + base64.b64encode(PNG).decode()
        parts, model, temperature = calls[0]
        assert model == "gemini-2.0-flash-preview-image-generation"
        assert temperature == pytest.approx(0.2)
        assert len(parts) == 3
        assert parts[2] == TRYON_COMPOSITE_PROMPT
        assert parts[0].inline_data.data == jpeg_bytes
        assert parts[1].inline_data.mime_type == "image/png"

    def test_no_image_in_response(self, monkeypatch, photo_uri, item_uri):
        async def fake_generate_image(parts, model, temperature):
            return None

        monkeypatch.setattr(genai_client, "generate_image", fake_generate_image)

        with pytest.raises(HTTPException) as ei:
            _run(GenerateTryOnInput(userImage=photo_uri, itemImage=item_uri))

        assert ei.value.status_code == 502
        assert "Failed to generate image with Gemini Flash" in ei.value.detail
        assert "did not return image data" in ei.value.detail

    def test_sdk_error_is_wrapped(self, monkeypatch, photo_uri, item_uri):
        async def fake_generate_image(parts, model, temperature):
            raise RuntimeError("quota exceeded")

        monkeypatch.setattr(genai_client, "generate_image", fake_generate_image)

        with pytest.raises(HTTPException) as ei:
            _run(GenerateTryOnInput(userImage=photo_uri, itemImage=item_uri))

        assert ei.value.status_code == 502
        assert ei.value.detail == "Failed to generate image with Gemini Flash: quota exceeded"

    def test_remote_item_image_is_fetched(self, monkeypatch, photo_uri):
        seen = []

        def handler(request):
            return httpx.Response(200, content=b"remote-bytes", headers={"content-type": "image/png"})

        monkeypatch.setattr(image_utils, "make_httpx_client", _mock_client_factory(handler, seen))

        calls = []

        async def fake_generate_image(parts, model, temperature):
            calls.append(parts)
            return "image/png", PNG

        monkeypatch.setattr(genai_client, "generate_image", fake_generate_image)

        _run(GenerateTryOnInput(userImage=photo_uri, itemImage="https://placehold.co/400x600.png"))

        assert str(seen[0].url) == "https://placehold.co/400x600.png"
        assert calls[0][1].inline_data.data == b"remote-bytes"

    def test_remote_item_that_is_not_an_image(self, monkeypatch, photo_uri):
        def handler(request):
            return httpx.Response(200, content=b"<html>", headers={"content-type": "text/html"})

        monkeypatch.setattr(image_utils, "make_httpx_client", _mock_client_factory(handler))

        with pytest.raises(HTTPException) as ei:
            _run(GenerateTryOnInput(userImage=photo_uri, itemImage="https://placehold.co/400x400.png"))

        assert ei.value.status_code == 400
        assert "invalid content type" in ei.value.detail


class TestItemImageFetch:
    def _generate_ok(self, monkeypatch):
        async def fake_generate_image(parts, model, temperature):
            return "image/png", PNG

        monkeypatch.setattr(genai_client, "generate_image", fake_generate_image)

    def test_unreachable_host_names_the_model(self, monkeypatch, photo_uri):
        def handler(request):
            raise httpx.ConnectError("host unreachable", request=request)

        monkeypatch.setattr(image_utils, "make_httpx_client", _mock_client_factory(handler))

        with pytest.raises(HTTPException) as ei:
            _run(
                GenerateTryOnInput(
                    userImage=photo_uri, itemImage="https://placehold.co/400x600.png", model=ModelId.IMAGEN3
                )
            )

        assert ei.value.status_code == 502
        assert ei.value.detail == (
            "Failed to generate image with Imagen 3: Failed to process item image from URL: host unreachable"
        )

    def test_upstream_error_status_names_the_model(self, monkeypatch, photo_uri):
        monkeypatch.setattr(
            image_utils, "make_httpx_client", _mock_client_factory(lambda r: httpx.Response(503, text="busy"))
        )
        self._generate_ok(monkeypatch)

        with pytest.raises(HTTPException) as ei:
            _run(GenerateTryOnInput(userImage=photo_uri, itemImage="https://placehold.co/400x600.png"))

        assert ei.value.status_code == 502
        assert ei.value.detail.startswith("Failed to generate image with Gemini Flash:")
        assert "fetch failed with status 503" in ei.value.detail

    def test_redirects_are_not_followed(self, monkeypatch, photo_uri):
        seen = []

        def handler(request):
            return httpx.Response(302, headers={"location": "http://169.254.169.254/latest/x.png"})

        monkeypatch.setattr(image_utils, "make_httpx_client", _mock_client_factory(handler, seen))
        self._generate_ok(monkeypatch)

        with pytest.raises(HTTPException) as ei:
            _run(GenerateTryOnInput(userImage=photo_uri, itemImage="https://placehold.co/400x600.png"))

        assert ei.value.status_code == 502
        assert len(seen) == 1

    @pytest.mark.parametrize(
        "url",
        ["http://169.254.169.254/latest/x.png", "https://internal.local/item.png", "ftp://placehold.co/x.png"],
    )
    def test_host_outside_allowlist_is_not_fetched(self, monkeypatch, photo_uri, url):
        seen = []
        monkeypatch.setattr(
            image_utils,
            "make_httpx_client",
            _mock_client_factory(lambda r: httpx.Response(200, content=PNG, headers={"content-type": "image/png"}), seen),
        )
        self._generate_ok(monkeypatch)

        with pytest.raises(HTTPException) as ei:
            _run(GenerateTryOnInput(userImage=photo_uri, itemImage=url, model=ModelId.IMAGEN4))

        assert ei.value.status_code == 400
        assert seen == []

    def test_extra_hosts_come_from_settings(self, monkeypatch, photo_uri):
        monkeypatch.setenv("ITEM_IMAGE_HOSTS", '["cdn.example.com"]')
        get_settings.cache_clear()
        monkeypatch.setattr(
            image_utils,
            "make_httpx_client",
            _mock_client_factory(lambda r: httpx.Response(200, content=PNG, headers={"content-type": "image/png"})),
        )

        assert asyncio.run(image_utils.load_image_reference("https://cdn.example.com/a.png")) == ("image/png", PNG)
        with pytest.raises(HTTPException):
            asyncio.run(image_utils.load_image_reference("https://placehold.co/400x600.png"))

    def test_declared_oversized_body_is_refused(self, monkeypatch):
        monkeypatch.setenv("MAX_ITEM_IMAGE_MB", "0.001")
        get_settings.cache_clear()
        monkeypatch.setattr(
            image_utils,
            "make_httpx_client",
            _mock_client_factory(
                lambda r: httpx.Response(200, content=b"\0" * 4096, headers={"content-type": "image/png"})
            ),
        )

        with pytest.raises(HTTPException) as ei:
            asyncio.run(image_utils.fetch_image("https://placehold.co/400x600.png"))

        assert ei.value.status_code == 502
        assert "exceeds 0.001MB" in ei.value.detail

    def test_streamed_body_is_cut_off_at_the_ceiling(self, monkeypatch):
        monkeypatch.setenv("MAX_ITEM_IMAGE_MB", "0.002")
        get_settings.cache_clear()
        sent = []

        async def body():
            for _ in range(64):
                sent.append(1024)
                yield b"\0" * 1024

        monkeypatch.setattr(
            image_utils,
            "make_httpx_client",
            _mock_client_factory(lambda r: httpx.Response(200, content=body(), headers={"content-type": "image/png"})),
        )

        with pytest.raises(HTTPException) as ei:
            asyncio.run(image_utils.fetch_image("https://placehold.co/400x600.png"))

        assert ei.value.status_code == 502
        assert len(sent) == 3


class TestImagen:
    @pytest.mark.parametrize(
        "model,expected",
        [(ModelId.IMAGEN3, "imagen-3.0-generate-002"), (ModelId.IMAGEN4, "imagen-4.0-generate-preview-06-06")],
    )
    def test_generate_content_call(self, monkeypatch, photo_uri, item_uri, model, expected):
        seen = []
        monkeypatch.setattr(
            gemini,
            "make_httpx_client",
            _mock_client_factory(lambda r: httpx.Response(200, json=_image_response()), seen),
        )

        out = _run(GenerateTryOnInput(userImage=photo_uri, itemImage=item_uri, model=model))

        assert out.generatedImage.startswith("data:image/png;base64,")
        request = seen[0]
        assert request.url.path.endswith(f"/models/{expected}:generateContent")
        assert request.headers["x-goog-api-key"] == "test-key"
        body = json.loads(request.content)
        parts = body["contents"][0]["parts"]
        assert parts[0]["inlineData"]["mimeType"] == "image/jpeg"
        assert parts[1]["inlineData"]["mimeType"] == "image/png"
        assert parts[2]["text"] == TRYON_COMPOSITE_PROMPT

    def test_text_only_response_fails(self, monkeypatch, photo_uri, item_uri):
        body = {"candidates": [{"content": {"parts": [{"text": "I can't do that."}]}}]}
        monkeypatch.setattr(
            gemini, "make_httpx_client", _mock_client_factory(lambda r: httpx.Response(200, json=body))
        )

        with pytest.raises(HTTPException) as ei:
            _run(GenerateTryOnInput(userImage=photo_uri, itemImage=item_uri, model=ModelId.IMAGEN3))

        assert ei.value.status_code == 502
        assert ei.value.detail.startswith("Failed to generate image with Imagen 3:")

    def test_http_error_names_the_path(self, monkeypatch, photo_uri, item_uri):
        monkeypatch.setattr(
            gemini,
            "make_httpx_client",
            _mock_client_factory(lambda r: httpx.Response(404, text="model not found")),
        )

        with pytest.raises(HTTPException) as ei:
            _run(GenerateTryOnInput(userImage=photo_uri, itemImage=item_uri, model=ModelId.IMAGEN4))

        assert ei.value.status_code == 502
        assert "Imagen 4" in ei.value.detail
        assert "model not found" in ei.value.detail

    def test_transport_error_is_wrapped(self, monkeypatch, photo_uri, item_uri):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        monkeypatch.setattr(gemini, "make_httpx_client", _mock_client_factory(handler))

        with pytest.raises(HTTPException) as ei:
            _run(GenerateTryOnInput(userImage=photo_uri, itemImage=item_uri, model=ModelId.IMAGEN3))

        assert ei.value.status_code == 502
        assert "connection refused" in ei.value.detail


def test_find_image_part_skips_non_images():
    data = {
        "candidates": [
            {"content": {"parts": [{"inlineData": {"mimeType": "text/plain", "data": "aGk="}}]}},
            {"content": {"parts": [{"inline_data": {"mime_type": "image/webp", "data": "aGk="}}]}},
        ]
    }
    assert gemini.find_image_part(data) == ("image/webp", b"hi")


def test_bad_user_image_is_an_input_error(item_uri):
    with pytest.raises(HTTPException) as ei:
        _run(GenerateTryOnInput(userImage="data:text/plain;base64,aGk=", itemImage=item_uri))
    assert ei.value.status_code == 400


def test_missing_key_propagates(no_api_key, photo_uri, item_uri):
    with pytest.raises(ConfigurationError):
        _run(GenerateTryOnInput(userImage=photo_uri, itemImage=item_uri, model=ModelId.IMAGEN3))


def test_every_model_has_a_strategy():
    assert set(dispatch.STRATEGIES) == set(ModelId)
    assert [m.id for m in dispatch.MODEL_OPTIONS] == list(ModelId)


def test_model_without_strategy_is_rejected(monkeypatch, photo_uri, item_uri):
    monkeypatch.setattr(dispatch, "STRATEGIES", {ModelId.GEMINI_FLASH: dispatch.gemini_flash_try_on})

    with pytest.raises(HTTPException) as ei:
        _run(GenerateTryOnInput(userImage=photo_uri, itemImage=item_uri, model=ModelId.IMAGEN4))

    assert ei.value.status_code == 400
    assert ei.value.detail == "The selected AI model (imagen4) is not supported for try-on generation."
