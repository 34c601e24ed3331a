"""
Analysis Module - turns drawing descriptions into structured records and answers questions about them

Vision model output is parsed into an AnalysisRecord, cached per upload, and
used as grounding context for follow-up questions. Model-free fallbacks keep
both operations working when no generation backend is reachable.
"""

from .assistant import AnalysisNotFound, AnalysisOutcome, DrawingAssistant
from .extractor import extract_analysis
from .fallback import fallback_analysis, fallback_answer
from .gateway import (
    ModelGateway,
    ModelGatewayError,
    ModelRequestFailed,
    ModelUnavailable,
    create_gateway,
)
from .models import AnalysisRecord, ModelDescriptor, ProjectInfo, StructuralElements
from .responder import Answer, QuestionResponder
from .store import AnalysisStore


__all__ = [
    'AnalysisNotFound',
    'AnalysisOutcome',
    'AnalysisRecord',
    'AnalysisStore',
    'Answer',
    'DrawingAssistant',
    'ModelDescriptor',
    'ModelGateway',
    'ModelGatewayError',
    'ModelRequestFailed',
    'ModelUnavailable',
    'ProjectInfo',
    'QuestionResponder',
    'StructuralElements',
    'create_gateway',
    'extract_analysis',
    'fallback_analysis',
    'fallback_answer',
]
