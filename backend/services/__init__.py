"""Services for the Persona Section Ranker."""
from .heading_classifier import is_heading
from .document_loader import DocumentLoader, DocumentLoadError, find_pdf_files
from .chunking_engine import ChunkingEngine
from .embedding_model import (
    BaseEmbeddingModel,
    EmbeddingModel,
    LocalEmbeddingModel,
    EmbeddingError,
    EmbeddingContractError,
    load_embedding_model,
)
from .relevance_scorer import RelevanceScorer, ScoringError, cosine_similarity
from .summarizer import ExtractiveSummarizer, summarize
from .query_builder import build_keywords, build_query
from .collection_loader import CollectionInputError, discover_collections, load_collection
from .pipeline import AnalysisPipeline, CollectionFailure, RunReport

__all__ = [
    'is_heading', 'DocumentLoader', 'DocumentLoadError', 'find_pdf_files', 'ChunkingEngine',
    'BaseEmbeddingModel', 'EmbeddingModel', 'LocalEmbeddingModel', 'EmbeddingError',
    'EmbeddingContractError', 'load_embedding_model', 'RelevanceScorer', 'ScoringError',
    'cosine_similarity', 'ExtractiveSummarizer', 'summarize', 'build_keywords', 'build_query',
    'CollectionInputError', 'discover_collections', 'load_collection', 'AnalysisPipeline',
    'CollectionFailure', 'RunReport',
]
