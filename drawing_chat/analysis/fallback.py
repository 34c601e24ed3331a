"""
Fallback Generator
Model-free analysis and answers used when no generation backend is usable.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Sequence, Tuple

from .matching import first_rule
from .models import AnalysisRecord, ProjectInfo, StructuralElements

FALLBACK_EXTRACTED_TEXT = (
    "This architectural drawing shows a building design with multiple floors and "
    "standard construction details. The drawing includes floor plans, elevations, "
    "and construction specifications typical of architectural projects."
)

FLOORS_TOPIC = "floors"
MATERIALS_TOPIC = "materials"
LAYOUT_TOPIC = "layout"
DRAWINGS_TOPIC = "drawings"
SUMMARY_TOPIC = "summary"

QUESTION_TOPIC_RULES: Sequence[Tuple[Sequence[str], str]] = (
    (("floor", "story", "level"), FLOORS_TOPIC),
    (("material", "construction"), MATERIALS_TOPIC),
    (("room", "space", "layout"), LAYOUT_TOPIC),
    (("drawing", "plan"), DRAWINGS_TOPIC),
)


def fallback_analysis(file_name: str, upload_date: Optional[str] = None) -> AnalysisRecord:
    """Return the fixed synthetic record used when the model is unavailable."""

    return AnalysisRecord(
        document_type="Architectural Drawing",
        project_info=ProjectInfo(
            title="Architectural Project",
            file_name=file_name or "Unknown file",
            upload_date=upload_date or datetime.now(timezone.utc).isoformat(),
            scale="Various scales",
            sheet_number="Not specified",
        ),
        drawings=[
            "Floor plans and elevations",
            "Architectural details",
            "Construction drawings",
        ],
        general_notes=[
            "Construction to comply with local building codes",
            "All dimensions to be verified on site",
            "Materials subject to approval",
        ],
        key_features=[
            "Architectural structure",
            "Multiple rooms and spaces",
            "Standard construction details",
            "Building systems integration",
        ],
        materials_list=["Concrete", "Steel", "Wood", "Glass", "Brick"],
        structural_elements=StructuralElements(
            floors="Multiple levels",
            type="Building structure",
            foundation="Foundation system",
        ),
        extracted_text=FALLBACK_EXTRACTED_TEXT,
    )


def _join(values: Optional[Iterable[Any]], limit: Optional[int] = None) -> str:
    items = [str(value) for value in (values or [])]
    if limit is not None:
        items = items[:limit]
    return ", ".join(items) or "not specified"


def classify_question(question: str) -> str:
    """Route a question to one of the canned answer topics."""
    return first_rule(question or "", QUESTION_TOPIC_RULES, SUMMARY_TOPIC)


def fallback_answer(question: str, record: AnalysisRecord) -> str:
    """Answer *question* from the record alone, without any model call."""

    topic = classify_question(question)
    structure = record.structural_elements

    if topic == FLOORS_TOPIC:
        return (
            f"Based on the architectural drawing analysis, this building has "
            f"{structure.floors} floors. The structure is designed as a {structure.type}."
        )
    if topic == MATERIALS_TOPIC:
        return (
            f"The materials specified in this project include: {_join(record.materials_list)}. "
            f"The construction uses {structure.type} methods."
        )
    if topic == LAYOUT_TOPIC:
        return (
            f"The building layout includes: {_join(record.key_features)}. "
            f"The design shows {record.document_type} with various architectural spaces."
        )
    if topic == DRAWINGS_TOPIC:
        return (
            f"This document contains: {_join(record.drawings)}. "
            f"The main drawing type is {record.document_type}."
        )
    return (
        f"Based on the architectural drawing analysis, this is a {record.document_type}. "
        f"Key features include: {_join(record.key_features, 3)}. "
        f"The structure has {getattr(structure, 'floors', 'an unspecified number of')} floors "
        f"and uses materials like {_join(record.materials_list, 3)}."
    )
