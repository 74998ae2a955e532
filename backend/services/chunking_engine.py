"""Chunking engine that splits page text into titled sections."""
import logging
from typing import Callable, List, Sequence

from models.document import Document, Page
from models.chunk import Chunk, DOCUMENT_START_TITLE
from services.heading_classifier import is_heading

logger = logging.getLogger(__name__)


class ChunkingEngine:
    """Segments documents into heading-titled chunks using text heuristics."""

    def __init__(self, heading_detector: Callable[[str], bool] = is_heading):
        """
        Initialize ChunkingEngine.

        Args:
            heading_detector: Predicate deciding whether a line opens a new section
        """
        self.heading_detector = heading_detector

    def chunk_documents(self, documents: List[Document]) -> List[Chunk]:
        """
        Segment documents in order and tag every chunk with its document name.

        Args:
            documents: List of loaded documents

        Returns:
            Chunks of all documents, document order then page order
        """
        all_chunks = []

        for document in documents:
            chunks = [chunk.with_document(document.filename) for chunk in self.segment(document.pages)]
            logger.info(f"Segmented {document.filename}: {len(chunks)} chunks from {document.total_pages} pages")
            all_chunks.extend(chunks)

        logger.info(f"Created {len(all_chunks)} chunks from {len(documents)} documents")
        return all_chunks

    def segment(self, pages: Sequence[Page]) -> List[Chunk]:
        """
        Partition ordered page lines into chunks.

        A heading closes the running chunk and opens a new one titled by the
        heading. Chunks whose content is empty are dropped, so a heading
        directly followed by another heading produces nothing.

        Args:
            pages: Pages in reading order, each with its ordered lines

        Returns:
            Chunks without a document name, in source order
        """
        chunks: List[Chunk] = []
        if not pages:
            return chunks

        current_title = DOCUMENT_START_TITLE
        current_text = ""
        current_start_page = pages[0].page_number

        for page in pages:
            for line in page.lines:
                if self.heading_detector(line):
                    self._close_chunk(chunks, current_title, current_text, current_start_page)
                    current_title = line.strip()
                    current_text = ""
                    current_start_page = page.page_number
                else:
                    current_text += line + "\n"

        self._close_chunk(chunks, current_title, current_text, current_start_page)
        return chunks

    @staticmethod
    def _close_chunk(chunks: List[Chunk], title: str, text: str, page: int) -> None:
        content = text.strip()
        if content:
            chunks.append(Chunk(title=title, content=content, page=page))
        else:
            logger.debug(f"Dropping empty section '{title}' on page {page}")
