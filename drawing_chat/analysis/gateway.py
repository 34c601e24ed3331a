"""
Model Gateway
Common contract for the generation backends (Ollama, Gemini) plus model selection.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .matching import first_item_by_keyword, first_item_with_any
from .models import ModelDescriptor

logger = logging.getLogger(__name__)


class ModelGatewayError(RuntimeError):
    """Base class for failures talking to a generation backend."""


class ModelUnavailable(ModelGatewayError):
    """Raised when no usable model can be selected."""


class ModelRequestFailed(ModelGatewayError):
    """Raised when a backend call fails or returns no text."""

    def __init__(self, message: str, model: Optional[str] = None):
        super().__init__(message)
        self.model = model


class ModelGateway(ABC):
    """
    Text-in/text-out access to an external generative model.

    Subclasses provide the transport (`_fetch_models`, `_generate`) and the
    family tokens used to recognise vision and text models. Listing fails soft;
    generation raises ModelGatewayError so callers can apply their own fallback.
    """

    provider_label = "Generative model"
    vision_families: Sequence[str] = ()
    text_families: Sequence[str] = ()

    @abstractmethod
    def _fetch_models(self) -> List[ModelDescriptor]:
        """Return the models advertised by the backend, raising on failure."""

    @abstractmethod
    def _generate(self, model_name: str, prompt: str, images: Optional[List[str]]) -> str:
        """Run one generation call and return the raw text."""

    def list_models(self) -> List[ModelDescriptor]:
        """Return available models, or an empty list when the backend is unreachable."""
        try:
            return list(self._fetch_models())
        except ModelGatewayError as exc:
            logger.error("%s model listing failed: %s", self.provider_label, exc)
            return []

    def _resolve(self, descriptors: Optional[List[ModelDescriptor]]) -> List[ModelDescriptor]:
        return self.list_models() if descriptors is None else descriptors

    def is_usable(self, descriptors: Optional[List[ModelDescriptor]] = None) -> bool:
        """Return True when at least one recognised vision or text model is present."""
        families = tuple(self.vision_families) + tuple(self.text_families)
        return first_item_with_any(
            self._resolve(descriptors), families, key=lambda model: model.name
        ) is not None

    def select_vision_model(
        self, descriptors: Optional[List[ModelDescriptor]] = None
    ) -> Optional[ModelDescriptor]:
        """Return the first listed model that accepts images."""
        return first_item_with_any(
            self._resolve(descriptors), self.vision_families, key=lambda model: model.name
        )

    def select_text_model(
        self, descriptors: Optional[List[ModelDescriptor]] = None
    ) -> Optional[ModelDescriptor]:
        """Return a model from the most preferred text family available."""
        return first_item_by_keyword(
            self._resolve(descriptors), self.text_families, key=lambda model: model.name
        )

    def generate(self, model_name: str, prompt: str, images: Optional[List[str]] = None) -> str:
        """Generate text from *prompt* and optional base64 *images*.

        Raises ModelRequestFailed on transport errors or an empty response.
        """
        logger.info(
            "Requesting %s generation from %s%s",
            self.provider_label,
            model_name,
            f" with {len(images)} image(s)" if images else "",
        )
        text = self._generate(model_name, prompt, images)
        if not text or not text.strip():
            raise ModelRequestFailed(f"{model_name} returned an empty response", model=model_name)
        return text.strip()

    def describe(self, model_name: str) -> str:
        """Return the aiProvider label for responses produced by *model_name*."""
        return f"{self.provider_label} ({model_name})"


def create_gateway(provider: Optional[str] = None) -> ModelGateway:
    """Build the configured generation backend."""
    from .. import config

    selected = (provider or config.AI_PROVIDER or "").strip().lower()
    if selected == "ollama":
        from .ollama_gateway import OllamaGateway

        return OllamaGateway(host=config.OLLAMA_HOST, timeout=config.OLLAMA_TIMEOUT_SECONDS)
    if selected == "gemini":
        from .gemini_gateway import GeminiGateway

        return GeminiGateway(api_key=config.GEMINI_API_KEY, preferred_model=config.GEMINI_MODEL)

    raise ValueError(f"Unknown AI provider '{selected}'. Expected 'ollama' or 'gemini'.")
