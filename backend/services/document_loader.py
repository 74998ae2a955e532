"""Document loading service for PDF processing."""
import logging
import os
from typing import List
import fitz  # PyMuPDF

from models.document import Document, Page

logger = logging.getLogger(__name__)


class DocumentLoadError(Exception):
    """Raised when a whole PDF cannot be opened or read."""


def find_pdf_files(directory: str) -> List[str]:
    """
    Recursively find PDF files under a directory.

    Args:
        directory: Root directory to search

    Returns:
        Sorted list of PDF paths, empty if the directory does not exist
    """
    pdf_paths = []

    if not os.path.isdir(directory):
        logger.warning(f"PDF directory not found: {directory}")
        return pdf_paths

    for root, _dirs, files in os.walk(directory):
        for filename in files:
            if filename.lower().endswith(".pdf"):
                pdf_paths.append(os.path.join(root, filename))

    return sorted(pdf_paths)


class DocumentLoader:
    """Loads PDF files and extracts their text page by page, line by line."""

    def load_documents(self, pdf_paths: List[str]) -> List[Document]:
        """
        Load every PDF in order.

        A document that cannot be opened is kept as an empty Document so it
        still counts as an input but contributes no chunks.

        Args:
            pdf_paths: Paths to PDF files

        Returns:
            List of Document objects, aligned with pdf_paths
        """
        documents = []

        for pdf_path in pdf_paths:
            filename = os.path.basename(pdf_path)
            try:
                document = self.load_document(pdf_path)
                logger.info(f"Loaded {filename}: {document.total_pages} pages")
            except DocumentLoadError as e:
                logger.error(f"Error loading {filename}: {str(e)}")
                document = Document(filename=filename, pages=[], total_pages=0)
            documents.append(document)

        return documents

    def load_document(self, pdf_path: str) -> Document:
        """
        Load a single PDF file and extract its non-blank lines per page.

        Args:
            pdf_path: Full path to PDF file

        Returns:
            Document object with one Page per PDF page (1-indexed)

        Raises:
            DocumentLoadError: If the PDF cannot be opened
        """
        filename = os.path.basename(pdf_path)

        try:
            pdf_document = fitz.open(pdf_path)
        except Exception as e:
            raise DocumentLoadError(f"Failed to open PDF {filename}: {str(e)}") from e

        try:
            pages = []
            for page_index in range(pdf_document.page_count):
                page_number = page_index + 1
                try:
                    text = pdf_document[page_index].get_text()
                except Exception as e:
                    logger.warning(
                        f"Could not get text content for page {page_number} of {filename}: {str(e)}"
                    )
                    text = ""

                lines = [line for line in text.splitlines() if line.strip()]
                pages.append(Page(page_number=page_number, lines=lines))
        finally:
            pdf_document.close()

        return Document(
            filename=filename,
            pages=pages,
            total_pages=len(pages)
        )
