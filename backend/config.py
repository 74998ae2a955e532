"""Configuration management for the Persona Section Ranker."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Input / Output Configuration
INPUT_DIR = os.getenv("INPUT_DIR", "/app/input")
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "/app/output")
COLLECTION_INPUT_FILE = os.getenv("COLLECTION_INPUT_FILE", "input.json")
COLLECTION_PDF_DIR = os.getenv("COLLECTION_PDF_DIR", "pdf")

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# Model Configuration
EMBEDDING_BACKEND = os.getenv("EMBEDDING_BACKEND", "local")  # "local" or "api"
EMBEDDING_MODEL = os.getenv("EMBEDDING_MODEL", "sentence-transformers/all-mpnet-base-v2")
FALLBACK_EMBEDDING_MODEL = os.getenv(
    "FALLBACK_EMBEDDING_MODEL",
    "sentence-transformers/all-MiniLM-L6-v2"
)
MODEL_CACHE_DIR = os.getenv("MODEL_CACHE_DIR") or None
HUGGINGFACE_API_KEY = os.getenv("HUGGINGFACE_API_KEY")

# Scoring Configuration
EMBEDDING_BATCH_SIZE = int(os.getenv("EMBEDDING_BATCH_SIZE", "64"))
EMBEDDING_TIMEOUT = float(os.getenv("EMBEDDING_TIMEOUT", "0"))  # seconds, 0 = no deadline

# Output Configuration
TOP_SECTIONS = int(os.getenv("TOP_SECTIONS", "10"))
TOP_SUBSECTIONS = int(os.getenv("TOP_SUBSECTIONS", "5"))
SUMMARY_MAX_SENTENCES = int(os.getenv("SUMMARY_MAX_SENTENCES", "5"))

# Query Configuration
DEFAULT_EXTRA_KEYWORDS = [
    "beach", "nightlife", "bar", "club", "adventure", "city", "coastal",
    "entertainment", "food", "wine", "water sports", "accommodation", "hotel",
    "restaurant", "transport", "travel", "budget", "culture", "history",
    "tradition", "tip", "trick", "thing to do",
]
EXTRA_KEYWORDS = [
    keyword.strip().lower()
    for keyword in os.getenv("EXTRA_KEYWORDS", ",".join(DEFAULT_EXTRA_KEYWORDS)).split(",")
    if keyword.strip()
]
QUERY_ELABORATION = os.getenv(
    "QUERY_ELABORATION",
    "Prioritize practical, specific sections that directly help accomplish this task."
)

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
