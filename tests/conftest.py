"""Shared fixtures: a scripted gateway and a small generated drawing image."""

from datetime import datetime, timezone
from typing import List, Optional

import pytest
from PIL import Image

from drawing_chat.analysis.gateway import ModelGateway, ModelRequestFailed
from drawing_chat.analysis.models import ModelDescriptor

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeGateway(ModelGateway):
    """In-memory gateway with Ollama-style family names and canned replies."""

    provider_label = "Fake Model"
    vision_families = ("llava", "vision")
    text_families = ("gemma3", "llama3.2", "llama")

    def __init__(self, models=None, reply="", error: Optional[Exception] = None):
        self.models = [ModelDescriptor(name=name) for name in (models or [])]
        self.reply = reply
        self.error = error
        self.calls: List[dict] = []

    def _fetch_models(self):
        return list(self.models)

    def _generate(self, model_name, prompt, images):
        self.calls.append({"model": model_name, "prompt": prompt, "images": images})
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fixed_now():
    return lambda: FIXED_NOW


@pytest.fixture
def drawing_png(tmp_path):
    path = tmp_path / "floorplan.png"
    image = Image.new("RGB", (64, 48), color=(255, 255, 255))
    image.save(path, format="PNG")
    return str(path)


@pytest.fixture
def failing_gateway():
    return FakeGateway(models=["llava:7b", "llama3.2"], error=ModelRequestFailed("boom"))
