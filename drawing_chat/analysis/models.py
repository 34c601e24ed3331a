"""
Data models for drawing analysis results
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class ProjectInfo:
    """Title block metadata recovered from the drawing"""
    title: str
    file_name: str
    upload_date: str
    scale: str
    sheet_number: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire format"""
        return {
            'title': self.title,
            'fileName': self.file_name,
            'uploadDate': self.upload_date,
            'scale': self.scale,
            'sheetNumber': self.sheet_number,
        }


@dataclass
class StructuralElements:
    """Building structure summary"""
    floors: Union[int, str]
    type: str
    foundation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting an unknown foundation"""
        data: Dict[str, Any] = {'floors': self.floors, 'type': self.type}
        if self.foundation is not None:
            data['foundation'] = self.foundation
        return data


@dataclass
class AnalysisRecord:
    """Structured result of analyzing one drawing"""
    document_type: str
    project_info: ProjectInfo
    drawings: List[str]
    general_notes: List[str]
    key_features: List[str]
    materials_list: List[str]
    structural_elements: StructuralElements
    extracted_text: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire format"""
        return {
            'documentType': self.document_type,
            'projectInfo': self.project_info.to_dict(),
            'drawings': list(self.drawings),
            'generalNotes': list(self.general_notes),
            'keyFeatures': list(self.key_features),
            'materialsList': list(self.materials_list),
            'structuralElements': self.structural_elements.to_dict(),
            'extractedText': self.extracted_text,
        }


@dataclass
class ModelDescriptor:
    """A model advertised by a generation backend"""
    name: str
    details: Dict[str, Any] = field(default_factory=dict)
