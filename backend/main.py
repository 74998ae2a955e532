"""
Command-line entry point for the Persona Section Ranker.

Processes every collection under the input directory:
1. Loads the embedding model once (falling back to a smaller model if needed)
2. Segments each collection's PDFs into titled sections
3. Ranks sections against the persona/task query
4. Summarizes the top sections
5. Writes <collection>_result.json to the output directory

Usage:
    python main.py [--input-dir /app/input] [--output-dir /app/output] [--backend local]
"""
import argparse
import logging
import sys
from typing import List, Optional

from config import (
    INPUT_DIR,
    OUTPUT_DIR,
    EMBEDDING_BACKEND,
    EMBEDDING_MODEL,
    FALLBACK_EMBEDDING_MODEL,
    LOG_LEVEL,
    LOG_FORMAT,
)
from logger import setup_logging
from services.embedding_model import EmbeddingContractError, EmbeddingError, load_embedding_model
from services.pipeline import AnalysisPipeline

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_COLLECTION_FAILED = 1
EXIT_FATAL = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Rank document sections for a persona and task, and summarize the best ones"
    )
    parser.add_argument(
        "--input-dir",
        default=INPUT_DIR,
        help=f"Directory with one sub-directory per collection (default: {INPUT_DIR})"
    )
    parser.add_argument(
        "--output-dir",
        default=OUTPUT_DIR,
        help=f"Directory for result JSON files (default: {OUTPUT_DIR})"
    )
    parser.add_argument(
        "--backend",
        choices=["local", "api"],
        default=EMBEDDING_BACKEND,
        help=f"Embedding backend (default: {EMBEDDING_BACKEND})"
    )
    parser.add_argument(
        "--model",
        default=EMBEDDING_MODEL,
        help=f"Preferred embedding model (default: {EMBEDDING_MODEL})"
    )
    parser.add_argument(
        "--fallback-model",
        default=FALLBACK_EMBEDDING_MODEL,
        help=f"Model used when the preferred one is unavailable (default: {FALLBACK_EMBEDDING_MODEL})"
    )
    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL,
        help=f"Logging level (default: {LOG_LEVEL})"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=LOG_FORMAT == "json",
        help="Emit logs as one JSON object per line"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the analysis over all collections and return the process exit status."""
    args = parse_args(argv)
    setup_logging(args.log_level, "json" if args.json_logs else "text")

    try:
        embedding_model = load_embedding_model(
            backend=args.backend,
            model_name=args.model,
            fallback_model_name=args.fallback_model
        )
    except (EmbeddingError, ValueError) as e:
        logger.critical(f"Could not initialize embedding model: {str(e)}")
        return EXIT_FATAL

    pipeline = AnalysisPipeline(embedding_model)

    try:
        report = pipeline.run(args.input_dir, args.output_dir)
    except EmbeddingContractError as e:
        logger.critical(f"Embedding backend broke its contract, aborting run: {str(e)}")
        return EXIT_FATAL

    for failure in report.failed:
        logger.error(f"Collection '{failure.collection_name}' failed: {failure.reason}")

    logger.info(f"--- All collections processed in {report.elapsed_seconds:.2f} seconds. ---")
    return EXIT_OK if report.ok else EXIT_COLLECTION_FAILED


if __name__ == "__main__":
    sys.exit(main())
