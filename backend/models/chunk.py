"""Chunk data models."""
from dataclasses import dataclass, replace

DOCUMENT_START_TITLE = "Document Start"


@dataclass(frozen=True)
class Chunk:
    """A titled span of document text produced by the segmenter."""
    title: str
    content: str
    page: int  # 1-based page where the heading (or document start) occurs
    document: str = ""  # Source document, assigned by the pipeline

    def with_document(self, document: str) -> "Chunk":
        """Return a copy of this chunk tagged with its source document."""
        return replace(self, document=document)


@dataclass(frozen=True)
class ScoredChunk:
    """Chunk with relevance score from ranking."""
    chunk: Chunk
    relevance_score: float  # Cosine similarity, -1.0 to 1.0
