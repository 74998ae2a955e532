"""Embedding backends: local sentence-transformers and Hugging Face Inference API."""
import time
import logging
from typing import List, Optional, Sequence
import httpx
import numpy as np
from sentence_transformers import SentenceTransformer

from config import (
    HUGGINGFACE_API_KEY,
    EMBEDDING_MODEL,
    FALLBACK_EMBEDDING_MODEL,
    MODEL_CACHE_DIR,
)

logger = logging.getLogger(__name__)


class EmbeddingError(RuntimeError):
    """Raised when the embedding backend fails to produce vectors."""


class EmbeddingContractError(Exception):
    """Raised when the backend returns vectors that break the embedding contract."""


class BaseEmbeddingModel:
    """
    Shared embedding gateway behaviour.

    Subclasses implement ``_embed`` for a batch of texts. This class validates
    inputs, checks that one vector comes back per text with a consistent
    dimensionality, and L2-normalizes the result so callers never have to.
    """

    model_name: str = ""

    def __init__(self):
        self.dimension: Optional[int] = None

    def embed_one(self, text: str) -> np.ndarray:
        """
        Generate a unit-length embedding for a single text string.

        Args:
            text: Text to embed

        Returns:
            1-D float64 vector

        Raises:
            ValueError: If text is empty
            EmbeddingError: If the backend call fails
            EmbeddingContractError: If the backend returns malformed vectors
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        return self.embed_many([text])[0]

    def embed_many(self, texts: Sequence[str]) -> List[np.ndarray]:
        """
        Generate unit-length embeddings for multiple texts in one backend call.

        Args:
            texts: Texts to embed

        Returns:
            One vector per input text, in input order

        Raises:
            ValueError: If texts is empty or contains empty strings
            EmbeddingError: If the backend call fails
            EmbeddingContractError: If the backend returns malformed vectors
        """
        if not texts:
            raise ValueError("Texts list cannot be empty")

        # Empty strings are rejected rather than filtered so outputs stay aligned
        if any(not t or not t.strip() for t in texts):
            raise ValueError("Texts cannot contain empty strings")

        raw_vectors = self._embed(list(texts))
        matrix = self._check_contract(raw_vectors, len(texts))

        norms = np.linalg.norm(matrix, axis=1, keepdims=True)
        normalized = np.divide(matrix, norms, out=np.zeros_like(matrix), where=norms > 0)
        return list(normalized)

    def warmup(self) -> bool:
        """
        Warm up the model with a dummy query to avoid cold start delays.

        Returns:
            True if warmup successful, False otherwise
        """
        try:
            logger.info(f"Warming up embedding model {self.model_name}...")
            start_time = time.time()

            self.embed_one("warmup query")

            elapsed = time.time() - start_time
            logger.info(f"Model warmup completed in {elapsed:.1f}s")
            return True

        except Exception as e:
            logger.error(f"Model warmup failed: {str(e)}")
            return False

    def _embed(self, texts: List[str]) -> Sequence[Sequence[float]]:
        raise NotImplementedError

    def _check_contract(self, raw_vectors, expected_count: int) -> np.ndarray:
        try:
            matrix = np.asarray(raw_vectors, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise EmbeddingContractError(f"Backend returned non-numeric or ragged vectors: {str(e)}") from e

        if matrix.ndim != 2 or matrix.shape[0] != expected_count or matrix.shape[1] == 0:
            raise EmbeddingContractError(
                f"Expected {expected_count} vectors, backend returned array of shape {matrix.shape}"
            )

        if self.dimension is None:
            self.dimension = matrix.shape[1]
        elif matrix.shape[1] != self.dimension:
            raise EmbeddingContractError(
                f"Embedding dimension changed from {self.dimension} to {matrix.shape[1]}"
            )

        return matrix


class LocalEmbeddingModel(BaseEmbeddingModel):
    """Embedding model running in-process with sentence-transformers on CPU."""

    def __init__(
        self,
        model_name: str = EMBEDDING_MODEL,
        cache_dir: Optional[str] = MODEL_CACHE_DIR,
        device: str = "cpu"
    ):
        """
        Load a sentence-transformers model.

        Args:
            model_name: Model identifier or local path
            cache_dir: Folder holding pre-downloaded models (optional)
            device: Torch device to run on

        Raises:
            EmbeddingError: If the model cannot be loaded
        """
        super().__init__()
        self.model_name = model_name

        logger.info(f"Loading embedding model: {model_name}")
        try:
            self.model = SentenceTransformer(model_name, cache_folder=cache_dir, device=device)
        except Exception as e:
            raise EmbeddingError(f"Could not load embedding model {model_name}: {str(e)}") from e

        logger.info(f"Initialized LocalEmbeddingModel with model: {model_name}")

    def _embed(self, texts: List[str]) -> Sequence[Sequence[float]]:
        try:
            return self.model.encode(
                texts,
                batch_size=len(texts),
                normalize_embeddings=True,
                convert_to_numpy=True,
                show_progress_bar=False
            )
        except Exception as e:
            raise EmbeddingError(f"Embedding {len(texts)} texts failed: {str(e)}") from e


class EmbeddingModel(BaseEmbeddingModel):
    """Wrapper for Hugging Face Inference API embedding model."""

    def __init__(
        self,
        api_key: Optional[str] = HUGGINGFACE_API_KEY,
        model_name: str = EMBEDDING_MODEL,
        max_retries: int = 5,
        initial_delay: float = 5.0,
        timeout: float = 120.0
    ):
        """
        Initialize the embedding model client.

        Args:
            api_key: Hugging Face API key
            model_name: Model identifier (default: sentence-transformers/all-mpnet-base-v2)
            max_retries: Maximum number of retry attempts for 503 errors
            initial_delay: Initial delay in seconds for exponential backoff
            timeout: Request timeout in seconds
        """
        if not api_key:
            raise ValueError("HUGGINGFACE_API_KEY environment variable is required")

        super().__init__()
        self.api_key = api_key
        self.model_name = model_name
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.timeout = timeout
        self.api_url = f"https://api-inference.huggingface.co/models/{model_name}"

        logger.info(f"Initialized EmbeddingModel with model: {model_name}")

    def _embed(self, texts: List[str]) -> Sequence[Sequence[float]]:
        """
        Call HF API with exponential backoff retry strategy.

        HF free tier models "sleep" and take 15-20s to load on first query,
        so 503 responses, timeouts and network errors are retried.

        Raises:
            EmbeddingError: If API request fails after all retries
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        payload = {
            "inputs": texts,
            "options": {
                "wait_for_model": True  # Wait for model to load if sleeping
            }
        }

        delay = self.initial_delay
        last_error = None

        for attempt in range(self.max_retries):
            try:
                start_time = time.time()

                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(
                        self.api_url,
                        headers=headers,
                        json=payload
                    )

                elapsed = time.time() - start_time

                # Handle 503 Service Unavailable (model loading)
                if response.status_code == 503:
                    logger.warning(
                        f"Model loading (503) on attempt {attempt + 1}/{self.max_retries}. "
                        f"Retrying in {delay}s..."
                    )

                    if attempt < self.max_retries - 1:
                        time.sleep(delay)
                        delay = min(delay * 2, 60.0)  # Exponential backoff, max 60s
                        continue
                    else:
                        last_error = f"Model failed to load after {self.max_retries} attempts"
                        break

                if response.status_code == 429:
                    logger.error("Rate limit exceeded for Hugging Face API")
                    raise EmbeddingError("Rate limit exceeded. Please try again later.")

                if response.status_code == 401:
                    logger.error("Authentication failed for Hugging Face API")
                    raise EmbeddingError("Invalid API key")

                if response.status_code != 200:
                    error_msg = f"API request failed with status {response.status_code}: {response.text}"
                    logger.error(error_msg)
                    raise EmbeddingError(error_msg)

                logger.debug(f"Generated embeddings for {len(texts)} texts in {elapsed:.2f}s")
                return response.json()

            except httpx.TimeoutException:
                last_error = f"Request timeout after {self.timeout}s"
                logger.error(f"{last_error} on attempt {attempt + 1}/{self.max_retries}")

                if attempt < self.max_retries - 1:
                    time.sleep(delay)
                    delay = min(delay * 2, 60.0)
                    continue

            except httpx.RequestError as e:
                last_error = f"Network error: {str(e)}"
                logger.error(f"{last_error} on attempt {attempt + 1}/{self.max_retries}")

                if attempt < self.max_retries - 1:
                    time.sleep(delay)
                    delay = min(delay * 2, 60.0)
                    continue

        # All retries exhausted
        error_msg = f"Failed to generate embeddings after {self.max_retries} attempts. Last error: {last_error}"
        logger.error(error_msg)
        raise EmbeddingError(error_msg)


def load_embedding_model(
    backend: str = "local",
    model_name: str = EMBEDDING_MODEL,
    fallback_model_name: Optional[str] = FALLBACK_EMBEDDING_MODEL,
    api_key: Optional[str] = HUGGINGFACE_API_KEY,
    cache_dir: Optional[str] = MODEL_CACHE_DIR
) -> BaseEmbeddingModel:
    """
    Build the process-wide embedding model, falling back once if needed.

    The preferred model is tried first. If it is unavailable (cannot be
    loaded locally, or fails warmup against the API) the fallback model is
    used for the rest of the process.

    Args:
        backend: "local" (sentence-transformers) or "api" (Hugging Face Inference API)
        model_name: Preferred model
        fallback_model_name: Lower-capacity model used when the preferred one is unavailable
        api_key: Hugging Face API key (api backend only)
        cache_dir: Local model cache folder (local backend only)

    Returns:
        Ready-to-use embedding model

    Raises:
        ValueError: If backend is unknown
        EmbeddingError: If neither model can be loaded locally
    """
    if backend == "local":
        try:
            return LocalEmbeddingModel(model_name=model_name, cache_dir=cache_dir)
        except EmbeddingError as e:
            if not fallback_model_name:
                raise
            logger.warning(f"{str(e)}. Falling back to {fallback_model_name}")
            return LocalEmbeddingModel(model_name=fallback_model_name, cache_dir=cache_dir)

    if backend == "api":
        model = EmbeddingModel(api_key=api_key, model_name=model_name)
        if model.warmup() or not fallback_model_name:
            return model
        logger.warning(f"Model {model_name} unavailable via API. Falling back to {fallback_model_name}")
        fallback = EmbeddingModel(api_key=api_key, model_name=fallback_model_name)
        fallback.warmup()
        return fallback

    raise ValueError(f"Unknown embedding backend: {backend}")
