"""
Download and cache the embedding models for offline runs.

Run once at image build time; afterwards set MODEL_CACHE_DIR so the
pipeline loads models from the cache without network access.

Usage:
    python download_model.py [--cache-dir ./models]
"""
import argparse
import logging
import sys
from typing import List, Optional

from sentence_transformers import SentenceTransformer

from config import EMBEDDING_MODEL, FALLBACK_EMBEDDING_MODEL, MODEL_CACHE_DIR

logger = logging.getLogger(__name__)


def download(model_names: List[str], cache_dir: Optional[str]) -> List[str]:
    """
    Instantiate each model so sentence-transformers fetches it into cache_dir.

    Returns:
        Names of models that could not be downloaded
    """
    failed = []
    for model_name in model_names:
        logger.info(f"Downloading model: {model_name}...")
        try:
            SentenceTransformer(model_name, cache_folder=cache_dir)
            logger.info(f"Cached {model_name}")
        except Exception as e:
            logger.error(f"Could not download {model_name}: {str(e)}")
            failed.append(model_name)
    return failed


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Cache embedding models for offline use")
    parser.add_argument(
        "--cache-dir",
        default=MODEL_CACHE_DIR,
        help="Folder to store models in (default: MODEL_CACHE_DIR or the sentence-transformers default)"
    )
    args = parser.parse_args(argv)

    failed = download([EMBEDDING_MODEL, FALLBACK_EMBEDDING_MODEL], args.cache_dir)
    # The fallback alone is enough to run
    if FALLBACK_EMBEDDING_MODEL in failed:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
