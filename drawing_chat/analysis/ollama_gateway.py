"""Ollama backend for the model gateway (local Llama / LLaVA models over REST)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from .gateway import ModelGateway, ModelRequestFailed
from .models import ModelDescriptor

logger = logging.getLogger(__name__)


class OllamaGateway(ModelGateway):
    """Talks to an Ollama server through its `/api/tags` and `/api/generate` endpoints."""

    provider_label = "Local Ollama"
    vision_families = ("llava", "vision")
    text_families = ("gemma3", "llama3.2", "llama")

    def __init__(
        self,
        host: str = "http://localhost:11434",
        timeout: float = 300.0,
        client: Optional[httpx.Client] = None,
    ):
        self.host = host.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.Client(base_url=self.host, timeout=timeout)

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as exc:
            raise ModelRequestFailed(f"Ollama request to {path} timed out: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text[:300]
            raise ModelRequestFailed(
                f"Ollama returned HTTP {exc.response.status_code} for {path}: {detail}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ModelRequestFailed(f"Ollama connection error on {path}: {exc}") from exc
        except ValueError as exc:
            raise ModelRequestFailed(f"Ollama returned invalid JSON for {path}: {exc}") from exc

        if not isinstance(payload, dict):
            raise ModelRequestFailed(
                f"Ollama returned {type(payload).__name__} instead of an object for {path}"
            )
        return payload

    def _fetch_models(self) -> List[ModelDescriptor]:
        payload = self._request("GET", "/api/tags")
        descriptors = []
        entries = payload.get("models")
        if not isinstance(entries, list):
            entries = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            name = entry.get("name") or entry.get("model")
            if not name:
                continue
            details = {key: value for key, value in entry.items() if key not in ("name", "model")}
            descriptors.append(ModelDescriptor(name=name, details=details))
        return descriptors

    def _generate(self, model_name: str, prompt: str, images: Optional[List[str]]) -> str:
        body: Dict[str, Any] = {"model": model_name, "prompt": prompt, "stream": False}
        if images:
            body["images"] = list(images)

        payload = self._request("POST", "/api/generate", json=body)
        if payload.get("error"):
            raise ModelRequestFailed(f"Ollama error: {payload['error']}", model=model_name)
        text = payload.get("response")
        return text if isinstance(text, str) else ""

    def close(self) -> None:
        self._client.close()
