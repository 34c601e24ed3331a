"""HTTP tests for the upload, chat and status endpoints."""

import asyncio
import io
import os

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from drawing_chat import config
from drawing_chat.analysis import routes
from drawing_chat.analysis.assistant import DrawingAssistant
from drawing_chat.analysis.gateway import ModelRequestFailed
from drawing_chat.api import app

from conftest import FakeGateway


def _png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (32, 32), color=(200, 200, 200)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def gateway():
    return FakeGateway(
        models=["llava:7b", "llama3.2"],
        reply="Document type: Elevation\nResidential 2-story house in brick and glass.",
    )


@pytest.fixture
def client(tmp_path, monkeypatch, gateway, fixed_now):
    monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path / "uploads"))
    routes.set_assistant(DrawingAssistant(gateway, now=fixed_now))
    yield TestClient(app)
    routes.set_assistant(None)


def _upload(client, content=None, content_type="image/png", name="front.png"):
    files = {"document": (name, content if content is not None else _png_bytes(), content_type)}
    return client.post("/api/upload", files=files)


class TestUpload:
    def test_successful_analysis(self, client):
        response = _upload(client)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["fileName"].startswith("document-")
        assert body["fileName"].endswith(".png")
        assert body["aiProvider"] == "Fake Model (llava:7b)"
        assert body["analysis"]["documentType"] == "Elevation"
        assert body["analysis"]["structuralElements"] == {"floors": 2, "type": "Residential structure"}
        assert body["analysis"]["projectInfo"]["fileName"] == "front.png"
        assert os.path.exists(os.path.join(config.UPLOAD_DIR, body["fileName"]))

    def test_missing_file(self, client):
        response = client.post("/api/upload")
        assert response.status_code == 400
        assert response.json() == {"error": "No file uploaded"}

    def test_wrong_media_type(self, client):
        response = _upload(client, content=b"%PDF-1.4", content_type="application/pdf", name="a.pdf")
        assert response.status_code == 400

    def test_oversized_file(self, client, monkeypatch):
        monkeypatch.setattr(config, "MAX_FILE_SIZE", 10)
        response = _upload(client)
        assert response.status_code == 413

    def test_file_at_size_limit_is_accepted(self, client, monkeypatch):
        content = _png_bytes()
        monkeypatch.setattr(config, "MAX_FILE_SIZE", len(content))
        assert _upload(client, content=content).status_code == 200

    def test_file_one_byte_over_limit_is_rejected(self, client, monkeypatch):
        content = _png_bytes()
        monkeypatch.setattr(config, "MAX_FILE_SIZE", len(content) - 1)
        response = _upload(client, content=content)
        assert response.status_code == 413
        assert not os.path.exists(config.UPLOAD_DIR) or os.listdir(config.UPLOAD_DIR) == []

    def test_undecodable_image(self, client):
        response = _upload(client, content=b"definitely not a png")
        assert response.status_code == 400
        assert os.listdir(config.UPLOAD_DIR) == []

    def test_gateway_down_returns_fallback(self, client, gateway):
        gateway.models = []
        body = _upload(client).json()

        assert body["success"] is True
        assert "note" in body
        assert "aiProvider" not in body
        assert body["analysis"]["projectInfo"]["scale"] == "Various scales"


class TestChat:
    def test_answer_from_model(self, client, gateway):
        key = _upload(client).json()["fileName"]
        gateway.reply = "Two floors."

        response = client.post("/api/chat", json={"question": "How many floors?", "fileName": key})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "answer": "Two floors.",
            "aiProvider": "Fake Model (llama3.2)",
        }

    def test_fallback_answer_on_model_error(self, client, gateway):
        key = _upload(client).json()["fileName"]
        gateway.error = ModelRequestFailed("model crashed")

        body = client.post("/api/chat", json={"question": "Which materials?", "fileName": key}).json()

        assert body["success"] is True
        assert "Brick" in body["answer"] and "Glass" in body["answer"]
        assert body["note"]

    def test_unknown_document(self, client):
        response = client.post("/api/chat", json={"question": "Hi?", "fileName": "nope.png"})
        assert response.status_code == 404
        assert response.json() == {"error": "Document analysis not found"}

    @pytest.mark.parametrize("payload", [{}, {"question": "Hi"}, {"fileName": "x"}, {"question": " ", "fileName": "x"}])
    def test_missing_fields(self, client, payload):
        response = client.post("/api/chat", json=payload)
        assert response.status_code == 400


class TestStatus:
    def test_health(self, client):
        body = client.get("/api/health").json()
        assert body["status"] == "OK"
        assert body["modelsAvailable"] is True

    def test_models(self, client):
        body = client.get("/api/models").json()
        assert body["models"] == ["llava:7b", "llama3.2"]
        assert body["preferredVisionModel"] == "llava:7b"
        assert body["preferredTextModel"] == "llama3.2"

    def test_models_when_unavailable(self, client, gateway):
        gateway.models = []
        body = client.get("/api/models").json()
        assert body["available"] is False
        assert body["preferredTextModel"] is None

    def test_root(self, client):
        assert client.get("/").json()["status"] == "online"

    def test_startup_lists_models_outside_event_loop(self, client, gateway):
        seen = []

        def fetch_models():
            try:
                asyncio.get_running_loop()
                seen.append("event loop")
            except RuntimeError:
                seen.append("worker thread")
            return list(gateway.models)

        gateway._fetch_models = fetch_models
        with TestClient(app) as started:
            assert started.get("/").status_code == 200

        assert seen == ["worker thread"]
