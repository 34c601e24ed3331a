"""
Drawing Assistant
Coordinates one analysis job (model -> extractor -> store) and later questions about it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from .. import config
from .extractor import extract_analysis
from .fallback import fallback_analysis
from .gateway import ModelGateway, ModelGatewayError, ModelUnavailable, create_gateway
from .imaging import ImagePreparationError, encode_image_base64
from .models import AnalysisRecord
from .responder import Answer, QuestionResponder
from .store import AnalysisStore

logger = logging.getLogger(__name__)

VISION_ANALYSIS_PROMPT = """Analyze this architectural drawing in detail. Please provide a comprehensive analysis including:

1. **Document Type**: What type of architectural drawing is this?
2. **Project Information**: Any visible project details, titles, or identification
3. **Drawings/Plans**: List all elevations, plans, sections, or details shown
4. **General Notes**: Any construction notes, specifications, or requirements
5. **Key Features**: Important architectural elements and design features
6. **Materials**: Building materials mentioned or shown
7. **Structural Elements**: Number of floors, building type, structural system
8. **Readable Text**: Any text, labels, or dimensions you can identify

Please be specific about what you can observe in the drawing and focus on details that would help someone understand this architectural design."""

TEXT_ONLY_NOTE = (
    "Note: This is a general analysis. For detailed image analysis, please install "
    "a vision model (e.g. ollama pull llava)."
)

NOTE_FALLBACK_ANALYSIS = (
    "Using fallback analysis - please ensure the model service is running "
    "with a vision model for image analysis"
)


def build_text_only_prompt(original_file_name: str) -> str:
    return f"""I have an architectural drawing file named "{original_file_name}". Based on typical architectural drawings, please provide a general analysis that includes:

1. Common elements found in architectural drawings
2. Typical project information structure
3. Standard drawing types (elevations, plans, sections)
4. Common construction notes and specifications
5. Typical building materials
6. Standard structural elements

Please provide a comprehensive template analysis that would be typical for an architectural drawing."""


class AnalysisNotFound(LookupError):
    """Raised when a question refers to a document that was never analyzed."""

    def __init__(self, key: str):
        super().__init__(f"Document analysis not found: {key}")
        self.key = key


@dataclass
class AnalysisOutcome:
    """Result of analyzing one upload, as handed to the HTTP layer."""

    key: str
    record: AnalysisRecord
    ai_provider: Optional[str] = None
    note: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.ai_provider is None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'success': True,
            'fileName': self.key,
            'analysis': self.record.to_dict(),
        }
        if self.ai_provider is not None:
            data['aiProvider'] = self.ai_provider
        if self.note is not None:
            data['note'] = self.note
        return data


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DrawingAssistant:
    """Main entry point that ties the gateway, extractor, store and responder together."""

    def __init__(
        self,
        gateway: ModelGateway,
        store: Optional[AnalysisStore] = None,
        now: Callable[[], datetime] = _utc_now,
        image_max_dimension: int = 1600,
        image_jpeg_quality: int = 85,
    ):
        self.gateway = gateway
        self.store = store if store is not None else AnalysisStore()
        self.responder = QuestionResponder(gateway)
        self.now = now
        self.image_max_dimension = image_max_dimension
        self.image_jpeg_quality = image_jpeg_quality

    def _describe_image(self, image_path: str, original_file_name: str):
        """Return (raw_text, ai_provider) from the best available model."""

        descriptors = self.gateway.list_models()
        if not self.gateway.is_usable(descriptors):
            raise ModelUnavailable("No usable vision or text model is available")

        vision_model = self.gateway.select_vision_model(descriptors)
        if vision_model:
            logger.info("Using vision model: %s", vision_model.name)
            image_b64 = encode_image_base64(
                image_path,
                max_dimension=self.image_max_dimension,
                jpeg_quality=self.image_jpeg_quality,
            )
            text = self.gateway.generate(vision_model.name, VISION_ANALYSIS_PROMPT, [image_b64])
            return text, self.gateway.describe(vision_model.name)

        text_model = self.gateway.select_text_model(descriptors)
        if text_model:
            logger.info("Using text model: %s (limited analysis without vision)", text_model.name)
            text = self.gateway.generate(text_model.name, build_text_only_prompt(original_file_name))
            return f"{text}\n\n{TEXT_ONLY_NOTE}", self.gateway.describe(text_model.name)

        raise ModelUnavailable("No suitable model found")

    def analyze(self, image_path: str, original_file_name: str, key: str) -> AnalysisOutcome:
        """Analyze an uploaded drawing and cache the record under *key*."""

        upload_date = self.now().isoformat()
        try:
            raw_text, ai_provider = self._describe_image(image_path, original_file_name)
        except (ModelGatewayError, ImagePreparationError) as exc:
            logger.warning("⚠️ Falling back to synthetic analysis for %s: %s", key, exc)
            record = fallback_analysis(original_file_name, upload_date=upload_date)
            self.store.put(key, record)
            return AnalysisOutcome(key=key, record=record, note=NOTE_FALLBACK_ANALYSIS)

        record = extract_analysis(raw_text, original_file_name, upload_date=upload_date)
        self.store.put(key, record)
        logger.info("✅ Analysis for %s cached (%s)", key, record.document_type)
        return AnalysisOutcome(key=key, record=record, ai_provider=ai_provider)

    def ask(self, question: str, key: str) -> Answer:
        """Answer *question* about the document stored under *key*."""

        record = self.store.get(key)
        if record is None:
            raise AnalysisNotFound(key)
        return self.responder.answer(question, record)


def build_default_assistant() -> DrawingAssistant:
    """Create the assistant from environment configuration."""
    return DrawingAssistant(
        gateway=create_gateway(config.AI_PROVIDER),
        image_max_dimension=config.IMAGE_MAX_DIMENSION,
        image_jpeg_quality=config.IMAGE_JPEG_QUALITY,
    )
