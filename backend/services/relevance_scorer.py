"""Relevance scoring of chunks against a persona/task query."""
import logging
import threading
from typing import List, Optional, Sequence
import numpy as np

from models.chunk import Chunk, ScoredChunk
from services.embedding_model import BaseEmbeddingModel, EmbeddingContractError, EmbeddingError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 64


class ScoringError(RuntimeError):
    """Raised when a query cannot be scored; fatal for the current collection."""


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity computed in float64.

    Returns 0.0 when either vector has zero norm.

    Raises:
        EmbeddingContractError: If the vectors differ in length
    """
    v1 = np.asarray(a, dtype=np.float64)
    v2 = np.asarray(b, dtype=np.float64)
    if v1.shape != v2.shape:
        raise EmbeddingContractError(f"Cannot compare vectors of shape {v1.shape} and {v2.shape}")

    norm1 = np.linalg.norm(v1)
    norm2 = np.linalg.norm(v2)
    if norm1 == 0 or norm2 == 0:
        return 0.0

    similarity = float(np.dot(v1, v2) / (norm1 * norm2))
    return min(1.0, max(-1.0, similarity))


class RelevanceScorer:
    """Embed a query and all chunk contents, then rank chunks by cosine similarity."""

    def __init__(
        self,
        embedding_model: BaseEmbeddingModel,
        batch_size: int = DEFAULT_BATCH_SIZE,
        timeout: Optional[float] = None
    ):
        """
        Initialize the relevance scorer.

        Args:
            embedding_model: Embedding gateway shared for the whole process
            batch_size: Number of chunk contents sent per embed_many call
            timeout: Deadline in seconds for each embed_many call (None disables it)
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")

        self.embedding_model = embedding_model
        self.batch_size = batch_size
        self.timeout = timeout or None
        self._pending_call: Optional[threading.Thread] = None
        logger.info(f"Initialized RelevanceScorer (batch size {batch_size})")

    def score(self, chunks: Sequence[Chunk], query: str) -> List[ScoredChunk]:
        """
        Score every chunk against the query and rank them.

        Steps:
        1. Embed the query
        2. Embed chunk contents in fixed-size batches, preserving order
        3. Compute cosine similarity per chunk
        4. Stable sort by descending score (ties keep input order)

        The input chunks are not modified.

        Args:
            chunks: Chunks to score
            query: Query text

        Returns:
            ScoredChunk list, most relevant first

        Raises:
            ScoringError: If any embedding call fails or times out
            EmbeddingContractError: If the backend breaks the vector contract
        """
        if not chunks:
            return []

        try:
            logger.info("Embedding the user query...")
            query_embedding = self._call(self.embedding_model.embed_one, query)

            logger.info(f"Embedding {len(chunks)} document chunks in batches...")
            chunk_embeddings = []
            for start in range(0, len(chunks), self.batch_size):
                batch = chunks[start:start + self.batch_size]
                vectors = self._call(self.embedding_model.embed_many, [chunk.content for chunk in batch])

                if len(vectors) != len(batch):
                    raise EmbeddingContractError(
                        f"Backend returned {len(vectors)} vectors for a batch of {len(batch)} chunks"
                    )

                chunk_embeddings.extend(vectors)
                logger.info(f"  Processed {min(start + self.batch_size, len(chunks))}/{len(chunks)} chunks...")

        except (EmbeddingError, ValueError) as e:
            error_msg = f"Failed to score chunks for query: {str(e)}"
            logger.error(error_msg)
            raise ScoringError(error_msg) from e

        scored = [
            ScoredChunk(chunk=chunk, relevance_score=cosine_similarity(query_embedding, embedding))
            for chunk, embedding in zip(chunks, chunk_embeddings)
        ]

        # sorted() is stable, so equal scores keep their input order
        ranked = sorted(scored, key=lambda item: item.relevance_score, reverse=True)
        logger.info(f"Relevance scoring completed (top score: {ranked[0].relevance_score:.3f})")
        return ranked

    def _call(self, method, argument):
        """Run one embedding call, enforcing the deadline when configured."""
        if self.timeout is None:
            return method(argument)

        # The backend is not safe for concurrent use while an abandoned call still runs
        if self._pending_call is not None and self._pending_call.is_alive():
            raise ScoringError("Embedding backend is still busy with a call that exceeded its deadline")
        self._pending_call = None

        outcome = {}

        def worker():
            try:
                outcome["result"] = method(argument)
            except Exception as e:
                outcome["error"] = e

        # Daemon thread so a hung backend call cannot keep the process alive
        thread = threading.Thread(target=worker, name="embedding-call", daemon=True)
        thread.start()
        thread.join(self.timeout)

        if thread.is_alive():
            self._pending_call = thread
            raise ScoringError(f"Embedding call exceeded deadline of {self.timeout}s")
        if "error" in outcome:
            raise outcome["error"]
        return outcome["result"]
