"""
Analysis Extractor
Turns the free-text description returned by a vision model into an AnalysisRecord.

Everything here is pure and deterministic: the same text always yields the
same record, and every field is populated (missing signals become explicit
placeholders) so callers never have to branch on emptiness.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple, Union

from .matching import first_keyword, first_rule, lines_with_any
from .models import AnalysisRecord, ProjectInfo, StructuralElements

DEFAULT_DOCUMENT_TYPE = "Architectural Drawing"
DEFAULT_PROJECT_TITLE = "Architectural Project"
NOT_SPECIFIED = "Not specified"
DEFAULT_FILE_NAME = "Unknown file"
DEFAULT_EXTRACTED_TEXT = "No descriptive text was returned for this drawing."

DEFAULT_DRAWINGS = "Architectural drawings present"
DEFAULT_NOTES = "Construction notes may be present"
DEFAULT_FEATURES = "Architectural features identified"
DEFAULT_MATERIALS = "Building materials specified"
DEFAULT_BUILDING_TYPE = "Building structure"
FOUNDATION_SPECIFIED = "Foundation details specified"

DOCUMENT_TYPE_LABELS = ("document type", "type of drawing")
DOCUMENT_TYPE_RULES: Sequence[Tuple[Sequence[str], str]] = (
    (("floor plan",), "Floor Plan"),
    (("elevation",), "Building Elevation"),
    (("section",), "Building Section"),
)

PROJECT_TITLE_KEYWORDS = ("project", "title")

DRAWING_KEYWORDS = ("elevation", "plan", "section", "detail", "view", "drawing")
NOTE_KEYWORDS = ("note", "specification", "requirement", "code", "standard")
FEATURE_KEYWORDS = ("feature", "element", "room", "space", "area", "design")

MATERIAL_KEYWORDS = (
    "concrete", "steel", "wood", "brick", "stone", "glass", "metal",
    "granite", "copper", "aluminum", "vinyl", "ceramic", "tile",
    "drywall", "insulation", "roofing", "flooring", "siding",
)

BUILDING_TYPE_RULES: Sequence[Tuple[Sequence[str], str]] = (
    (("residential",), "Residential structure"),
    (("commercial",), "Commercial structure"),
    (("office",), "Office building"),
    (("house",), "House"),
)

# Markdown emphasis the models like to wrap labels and values in.
_LABEL_NOISE = " \t*_#`"

SCALE_PATTERN = re.compile(r"scale[*:\t ]*([0-9/\"'= \t-]+)", re.IGNORECASE)
SHEET_PATTERN = re.compile(
    r"\bsheet\b(?:[ \t]*(?:number|no\.?|#))?[*:#\t ]*([A-Z0-9][A-Z0-9.\-]*)",
    re.IGNORECASE,
)
FLOOR_PATTERN = re.compile(r"(\d+)[ \t-]*(?:floor|stor(?:ey|y|ies)|level)", re.IGNORECASE)


def _label_value(line: str) -> str:
    """Return the text after the first colon of *line*, without markdown noise."""
    if ":" not in line:
        return ""
    return line.split(":", 1)[1].strip(_LABEL_NOISE)


def _labelled_value(text: str, labels: Sequence[str]) -> str:
    """Return the value of the first line that carries one of *labels* and a value."""
    for line in (text or "").split("\n"):
        if first_keyword(line, labels) is not None:
            value = _label_value(line)
            if value:
                return value
    return ""


def extract_document_type(text: str) -> str:
    """Classify the drawing, preferring an explicit 'Document type:' label."""
    labelled = _labelled_value(text, DOCUMENT_TYPE_LABELS)
    if labelled:
        return labelled
    return first_rule(text or "", DOCUMENT_TYPE_RULES, DEFAULT_DOCUMENT_TYPE)


def extract_project_title(text: str) -> str:
    return _labelled_value(text, PROJECT_TITLE_KEYWORDS) or DEFAULT_PROJECT_TITLE


def extract_scale(text: str) -> str:
    """Return the first scale notation that carries at least one digit."""
    for match in SCALE_PATTERN.finditer(text or ""):
        value = match.group(1).strip()
        if any(char.isdigit() for char in value):
            return value
    return NOT_SPECIFIED


def extract_sheet_number(text: str) -> str:
    for match in SHEET_PATTERN.finditer(text or ""):
        value = match.group(1).rstrip(".-")
        if any(char.isdigit() for char in value):
            return value
    return NOT_SPECIFIED


def extract_drawings(text: str) -> List[str]:
    return lines_with_any(text, DRAWING_KEYWORDS) or [DEFAULT_DRAWINGS]


def extract_notes(text: str) -> List[str]:
    return lines_with_any(text, NOTE_KEYWORDS) or [DEFAULT_NOTES]


def extract_features(text: str) -> List[str]:
    return lines_with_any(text, FEATURE_KEYWORDS) or [DEFAULT_FEATURES]


def extract_materials(text: str) -> List[str]:
    """Return recognized materials in vocabulary order, each at most once."""
    lowered = (text or "").lower()
    materials = [
        material.capitalize() for material in MATERIAL_KEYWORDS if material in lowered
    ]
    return materials or [DEFAULT_MATERIALS]


def extract_structural_elements(text: str) -> StructuralElements:
    floor_match = FLOOR_PATTERN.search(text or "")
    floors: Union[int, str] = int(floor_match.group(1)) if floor_match else NOT_SPECIFIED

    foundation: Optional[str] = None
    if "foundation" in (text or "").lower():
        foundation = FOUNDATION_SPECIFIED

    return StructuralElements(
        floors=floors,
        type=first_rule(text or "", BUILDING_TYPE_RULES, DEFAULT_BUILDING_TYPE),
        foundation=foundation,
    )


def extract_analysis(
    raw_text: str,
    original_file_name: str,
    upload_date: Optional[str] = None,
) -> AnalysisRecord:
    """Build a complete AnalysisRecord from raw model output."""

    text = raw_text or ""
    return AnalysisRecord(
        document_type=extract_document_type(text),
        project_info=ProjectInfo(
            title=extract_project_title(text),
            file_name=original_file_name or DEFAULT_FILE_NAME,
            upload_date=upload_date or datetime.now(timezone.utc).isoformat(),
            scale=extract_scale(text),
            sheet_number=extract_sheet_number(text),
        ),
        drawings=extract_drawings(text),
        general_notes=extract_notes(text),
        key_features=extract_features(text),
        materials_list=extract_materials(text),
        structural_elements=extract_structural_elements(text),
        extracted_text=text if text.strip() else DEFAULT_EXTRACTED_TEXT,
    )
