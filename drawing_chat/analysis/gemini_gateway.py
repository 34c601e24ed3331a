"""Google Gemini backend for the model gateway."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, List, Optional

from google import genai
from google.genai import types

from .gateway import ModelGateway, ModelRequestFailed
from .models import ModelDescriptor

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_FAMILIES = ("gemini-2.5-flash", "gemini-2.0-flash", "gemini-2.5-pro")


class GeminiGateway(ModelGateway):
    """Gemini models through the google-genai SDK. Every Gemini chat model accepts images."""

    provider_label = "Google Gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        preferred_model: Optional[str] = None,
        client: Any = None,
    ):
        self.api_key = api_key
        self.initialization_error: Optional[str] = None
        self.client = client

        families: List[str] = []
        for family in (preferred_model, *DEFAULT_GEMINI_FAMILIES):
            if family and family not in families:
                families.append(family)
        self.vision_families = tuple(families)
        self.text_families = tuple(families)

        if self.client is None and self.api_key:
            try:
                self.client = genai.Client(api_key=self.api_key)
                logger.info("✅ Gemini client initialized")
            except Exception as exc:  # pragma: no cover - depends on runtime credentials
                self.client = None
                self.initialization_error = str(exc)
                logger.error("Failed to initialize Gemini: %s", self.initialization_error)
        elif self.client is None:
            self.initialization_error = "GEMINI_API_KEY not found. AI analysis will use fallbacks."
            logger.warning(self.initialization_error)

    def _exact_family_match(
        self, descriptors: Optional[List[ModelDescriptor]]
    ) -> Optional[ModelDescriptor]:
        """Return the listed model whose name equals the most preferred family."""
        by_name = {model.name.lower(): model for model in self._resolve(descriptors)}
        for family in self.text_families:
            if family.lower() in by_name:
                return by_name[family.lower()]
        return None

    # Family names are prefixes of variants such as "-lite" or "-preview-tts",
    # so an exact name wins over the substring scan.
    def select_vision_model(
        self, descriptors: Optional[List[ModelDescriptor]] = None
    ) -> Optional[ModelDescriptor]:
        descriptors = self._resolve(descriptors)
        return self._exact_family_match(descriptors) or super().select_vision_model(descriptors)

    def select_text_model(
        self, descriptors: Optional[List[ModelDescriptor]] = None
    ) -> Optional[ModelDescriptor]:
        descriptors = self._resolve(descriptors)
        return self._exact_family_match(descriptors) or super().select_text_model(descriptors)

    @staticmethod
    def _short_name(name: str) -> str:
        return name.split("/", 1)[1] if name.startswith("models/") else name

    def _fetch_models(self) -> List[ModelDescriptor]:
        if self.client is None:
            return []

        try:
            listed = list(self.client.models.list())
        except Exception as exc:  # pragma: no cover - relies on remote API
            raise ModelRequestFailed(f"Gemini model listing failed: {exc}") from exc

        descriptors = []
        for model in listed:
            name = getattr(model, "name", None)
            if not name:
                continue
            actions = getattr(model, "supported_actions", None)
            if actions and "generateContent" not in actions:
                continue
            descriptors.append(
                ModelDescriptor(
                    name=self._short_name(name),
                    details={"display_name": getattr(model, "display_name", None)},
                )
            )
        return descriptors

    def _generate(self, model_name: str, prompt: str, images: Optional[List[str]]) -> str:
        if self.client is None:
            raise ModelRequestFailed(
                self.initialization_error or "Gemini client is not initialized", model=model_name
            )

        contents: List[Any] = [prompt]
        for encoded in images or []:
            try:
                data = base64.b64decode(encoded)
            except (binascii.Error, ValueError) as exc:
                raise ModelRequestFailed(f"Invalid base64 image payload: {exc}", model=model_name) from exc
            contents.append(types.Part.from_bytes(data=data, mime_type="image/jpeg"))

        try:
            response = self.client.models.generate_content(
                model=model_name,
                contents=contents,
                config=types.GenerateContentConfig(candidate_count=1),
            )
        except Exception as exc:  # pragma: no cover - relies on remote API
            raise ModelRequestFailed(f"Gemini request failed: {exc}", model=model_name) from exc

        try:
            return response.text or ""
        except (AttributeError, ValueError):
            logger.warning("Gemini response carried no text (prompt_feedback=%s)",
                           getattr(response, "prompt_feedback", None))
            return ""
