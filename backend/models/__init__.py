"""Data models for the Persona Section Ranker."""
from .document import Document, Page
from .chunk import Chunk, ScoredChunk, DOCUMENT_START_TITLE
from .collection import (
    CollectionInput,
    ExtractedSection,
    SubSectionAnalysis,
    ResultMetadata,
    AnalysisResult,
)

__all__ = [
    "Document",
    "Page",
    "Chunk",
    "ScoredChunk",
    "DOCUMENT_START_TITLE",
    "CollectionInput",
    "ExtractedSection",
    "SubSectionAnalysis",
    "ResultMetadata",
    "AnalysisResult",
]
