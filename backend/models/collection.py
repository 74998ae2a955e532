"""Collection input and analysis result models."""
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List


@dataclass
class CollectionInput:
    """One collection to analyze: a persona, a task and its PDFs."""
    name: str
    persona: str
    job_to_be_done: str
    pdf_paths: List[str] = field(default_factory=list)


@dataclass
class ExtractedSection:
    """A ranked section in the analysis output."""
    document: str
    page_number: int
    section_title: str
    importance_rank: int  # 1 = most relevant


@dataclass
class SubSectionAnalysis:
    """Extractive summary of one of the top sections."""
    document: str
    page_number: int
    refined_text: str


@dataclass
class ResultMetadata:
    collection_name: str
    input_documents: List[str]
    persona: str
    job_to_be_done: str
    processing_timestamp: str


@dataclass
class AnalysisResult:
    """Final ranked output for one collection."""
    metadata: ResultMetadata
    extracted_sections: List[ExtractedSection]
    sub_section_analysis: List[SubSectionAnalysis]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
