"""Collection discovery and input parsing."""
import json
import logging
import os
from typing import Any, List

from models.collection import CollectionInput
from services.document_loader import find_pdf_files
from config import COLLECTION_INPUT_FILE, COLLECTION_PDF_DIR

logger = logging.getLogger(__name__)


class CollectionInputError(Exception):
    """Raised when a collection's input is missing or malformed."""


def discover_collections(input_dir: str) -> List[str]:
    """
    List collection directories under the input root.

    Args:
        input_dir: Root directory holding one sub-directory per collection

    Returns:
        Sorted collection directory paths, empty if input_dir does not exist
    """
    if not os.path.isdir(input_dir):
        logger.error(f"Input directory not found: {input_dir}")
        return []

    return sorted(
        os.path.join(input_dir, entry)
        for entry in os.listdir(input_dir)
        if os.path.isdir(os.path.join(input_dir, entry))
    )


def _text_field(data: dict, field: str, nested_key: str) -> str:
    # Accepts both "persona": "..." and "persona": {"role": "..."}
    value: Any = data.get(field)
    if isinstance(value, dict):
        value = value.get(nested_key)
    if not isinstance(value, str) or not value.strip():
        raise CollectionInputError(f"'{field}' is missing or empty")
    return value.strip()


def load_collection(
    collection_dir: str,
    input_file: str = COLLECTION_INPUT_FILE,
    pdf_dir: str = COLLECTION_PDF_DIR
) -> CollectionInput:
    """
    Read a collection's input.json and locate its PDFs.

    Args:
        collection_dir: Path to the collection directory
        input_file: Name of the JSON input file inside the collection
        pdf_dir: Name of the PDF sub-directory inside the collection

    Returns:
        CollectionInput with persona, task and sorted PDF paths

    Raises:
        CollectionInputError: If the input file is missing or invalid, or no PDFs are found
    """
    name = os.path.basename(os.path.normpath(collection_dir))
    input_path = os.path.join(collection_dir, input_file)

    try:
        with open(input_path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise CollectionInputError(f"Input file not found: {input_path}")
    except json.JSONDecodeError as e:
        raise CollectionInputError(f"Invalid JSON in {input_path}: {str(e)}") from e

    if not isinstance(data, dict):
        raise CollectionInputError(f"Expected a JSON object in {input_path}")

    persona = _text_field(data, "persona", "role")
    job_to_be_done = _text_field(data, "job_to_be_done", "task")

    pdf_paths = find_pdf_files(os.path.join(collection_dir, pdf_dir))
    if not pdf_paths:
        raise CollectionInputError(f"No PDFs found in '{os.path.join(name, pdf_dir)}'")

    logger.info(f"Collection {name}: {len(pdf_paths)} PDFs, persona '{persona}'")
    return CollectionInput(
        name=name,
        persona=persona,
        job_to_be_done=job_to_be_done,
        pdf_paths=pdf_paths
    )
