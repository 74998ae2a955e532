"""Document data models."""
from dataclasses import dataclass, field
from typing import List


@dataclass
class Page:
    """Represents a single page from a document."""
    page_number: int
    lines: List[str] = field(default_factory=list)


@dataclass
class Document:
    """Represents a loaded PDF document."""
    filename: str
    pages: List[Page]
    total_pages: int
