"""
Q&A Responder
Answers follow-up questions about an analyzed drawing, grounded on its record.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .fallback import fallback_answer
from .gateway import ModelGateway, ModelGatewayError, ModelUnavailable
from .models import AnalysisRecord

logger = logging.getLogger(__name__)

NOTE_MODEL_UNAVAILABLE = "Using fallback response - AI model not available"
NOTE_MODEL_FAILED = "Using fallback response due to local AI limitations"


@dataclass
class Answer:
    """An answer plus the label that tells the UI where it came from."""

    text: str
    ai_provider: Optional[str] = None
    note: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.note is not None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'success': True, 'answer': self.text}
        if self.is_fallback:
            data['note'] = self.note
        else:
            data['aiProvider'] = self.ai_provider
        return data


def build_question_prompt(question: str, record: AnalysisRecord) -> str:
    """Embed the full analysis text and its key facts around the user's question."""

    return f"""You are an expert architectural analyst. Based on the following analysis of an architectural drawing, please answer the user's question accurately and specifically.

Document Analysis:
{record.extracted_text}

Key Information:
- Document Type: {record.document_type}
- Project: {record.project_info.title}
- Floors: {record.structural_elements.floors}
- Materials: {', '.join(record.materials_list)}
- Key Features: {', '.join(record.key_features)}

User Question: {question}

Please provide a detailed, specific answer based on the architectural drawing analysis above. Reference specific details from the drawing when possible."""


class QuestionResponder:
    """Answers questions with the preferred text model, falling back to canned answers."""

    def __init__(self, gateway: ModelGateway):
        self.gateway = gateway

    def answer(self, question: str, record: AnalysisRecord) -> Answer:
        """Always returns an Answer; gateway problems select the fallback path."""

        descriptors = self.gateway.list_models()
        if not self.gateway.is_usable(descriptors):
            logger.warning("No usable model for Q&A; answering from cached analysis")
            return Answer(text=fallback_answer(question, record), note=NOTE_MODEL_UNAVAILABLE)

        try:
            model = self.gateway.select_text_model(descriptors)
            if model is None:
                raise ModelUnavailable("No suitable text model found")

            text = self.gateway.generate(model.name, build_question_prompt(question, record))
            return Answer(text=text, ai_provider=self.gateway.describe(model.name))
        except ModelGatewayError as exc:
            logger.error("Q&A generation failed, using fallback answer: %s", exc)
            return Answer(text=fallback_answer(question, record), note=NOTE_MODEL_FAILED)
