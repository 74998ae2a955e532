"""Collection analysis pipeline: segment, score, summarize, assemble."""
import json
import logging
import os
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from models.collection import (
    AnalysisResult,
    CollectionInput,
    ExtractedSection,
    ResultMetadata,
    SubSectionAnalysis,
)
from services.chunking_engine import ChunkingEngine
from services.collection_loader import CollectionInputError, discover_collections, load_collection
from services.document_loader import DocumentLoader
from services.embedding_model import BaseEmbeddingModel, EmbeddingContractError
from services.query_builder import build_keywords, build_query
from services.relevance_scorer import RelevanceScorer, ScoringError
from services.summarizer import ExtractiveSummarizer
from config import (
    EMBEDDING_BATCH_SIZE,
    EMBEDDING_TIMEOUT,
    EXTRA_KEYWORDS,
    QUERY_ELABORATION,
    SUMMARY_MAX_SENTENCES,
    TOP_SECTIONS,
    TOP_SUBSECTIONS,
)

logger = logging.getLogger(__name__)


@dataclass
class CollectionFailure:
    """A collection that could not be processed, and why."""
    collection_name: str
    reason: str


@dataclass
class RunReport:
    """Outcome of processing every collection under an input root."""
    succeeded: List[str] = field(default_factory=list)
    failed: List[CollectionFailure] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.failed


class AnalysisPipeline:
    """Rank the sections of a document collection for a persona and task."""

    def __init__(
        self,
        embedding_model: BaseEmbeddingModel,
        document_loader: Optional[DocumentLoader] = None,
        chunking_engine: Optional[ChunkingEngine] = None,
        top_sections: int = TOP_SECTIONS,
        top_subsections: int = TOP_SUBSECTIONS,
        max_sentences: int = SUMMARY_MAX_SENTENCES,
        extra_keywords: Iterable[str] = EXTRA_KEYWORDS,
        query_elaboration: str = QUERY_ELABORATION,
        batch_size: int = EMBEDDING_BATCH_SIZE,
        timeout: Optional[float] = EMBEDDING_TIMEOUT
    ):
        """
        Initialize the pipeline.

        Args:
            embedding_model: Embedding gateway, loaded once per process
            document_loader: PDF page text source (default: DocumentLoader)
            chunking_engine: Segmenter (default: ChunkingEngine)
            top_sections: Number of ranked sections in extracted_sections
            top_subsections: Number of top sections summarized in sub_section_analysis
            max_sentences: Maximum sentences per summary
            extra_keywords: Domain keywords added to every collection's keyword set
            query_elaboration: Text appended to the persona/task query
            batch_size: Chunks per embedding call
            timeout: Deadline in seconds per embedding call (0 or None disables it)
        """
        self.document_loader = document_loader or DocumentLoader()
        self.chunking_engine = chunking_engine or ChunkingEngine()
        self.scorer = RelevanceScorer(embedding_model, batch_size=batch_size, timeout=timeout)
        self.top_sections = top_sections
        self.top_subsections = top_subsections
        self.max_sentences = max_sentences
        self.extra_keywords = frozenset(extra_keywords)
        self.query_elaboration = query_elaboration

    def analyze(self, collection: CollectionInput) -> AnalysisResult:
        """
        Produce the ranked analysis for one collection.

        Args:
            collection: Persona, task and PDF paths

        Returns:
            AnalysisResult with the top sections and their summaries

        Raises:
            ScoringError: If relevance scoring fails
            EmbeddingContractError: If the embedding backend breaks its contract
        """
        log_extra = {"collection": collection.name}

        documents = self.document_loader.load_documents(collection.pdf_paths)
        chunks = self.chunking_engine.chunk_documents(documents)
        logger.info(f"Collected {len(chunks)} chunks from {len(documents)} documents", extra=log_extra)

        keywords = build_keywords(collection.persona, collection.job_to_be_done, self.extra_keywords)
        query = build_query(collection.persona, collection.job_to_be_done, self.query_elaboration)
        logger.debug(f"Query: {query}", extra=log_extra)

        ranked = self.scorer.score(chunks, query)

        extracted_sections = [
            ExtractedSection(
                document=scored.chunk.document,
                page_number=scored.chunk.page,
                section_title=scored.chunk.title,
                importance_rank=rank
            )
            for rank, scored in enumerate(ranked[:self.top_sections], start=1)
        ]

        summarizer = ExtractiveSummarizer(keywords, max_sentences=self.max_sentences)
        sub_section_analysis = [
            SubSectionAnalysis(
                document=scored.chunk.document,
                page_number=scored.chunk.page,
                refined_text=summarizer.summarize(scored.chunk.content)
            )
            for scored in ranked[:self.top_subsections]
        ]

        metadata = ResultMetadata(
            collection_name=collection.name,
            input_documents=[document.filename for document in documents],
            persona=collection.persona,
            job_to_be_done=collection.job_to_be_done,
            processing_timestamp=datetime.now(timezone.utc).isoformat()
        )

        return AnalysisResult(
            metadata=metadata,
            extracted_sections=extracted_sections,
            sub_section_analysis=sub_section_analysis
        )

    def run(self, input_dir: str, output_dir: str) -> RunReport:
        """
        Process every collection under input_dir, one after another.

        A failing collection is recorded and the run moves on; only an
        embedding contract violation stops the run.

        Args:
            input_dir: Root directory with one sub-directory per collection
            output_dir: Directory receiving <collection>_result.json files

        Returns:
            RunReport listing succeeded and failed collections
        """
        start_time = time.time()
        report = RunReport()

        collection_dirs = discover_collections(input_dir)
        if not collection_dirs:
            logger.warning(f"No collection directories found in {input_dir}")

        for collection_dir in collection_dirs:
            name = os.path.basename(os.path.normpath(collection_dir))
            log_extra = {"collection": name}
            logger.info(f"--- Starting processing for collection: {name} ---", extra=log_extra)

            try:
                collection = load_collection(collection_dir)
                result = self.analyze(collection)
                output_path = self._write_result(result, output_dir)
                report.succeeded.append(name)
                logger.info(f"Output for {name} written to {output_path}", extra=log_extra)

            except EmbeddingContractError:
                raise

            except (CollectionInputError, ScoringError, OSError) as e:
                logger.error(f"Failed to process collection '{name}': {str(e)}", extra=log_extra)
                report.failed.append(CollectionFailure(collection_name=name, reason=str(e)))

            except Exception as e:
                logger.error(f"Unexpected error processing collection '{name}': {str(e)}", exc_info=True, extra=log_extra)
                report.failed.append(CollectionFailure(collection_name=name, reason=str(e)))

        report.elapsed_seconds = time.time() - start_time
        logger.info(
            f"Processed {len(collection_dirs)} collections in {report.elapsed_seconds:.2f}s "
            f"({len(report.succeeded)} succeeded, {len(report.failed)} failed)"
        )
        return report

    @staticmethod
    def _write_result(result: AnalysisResult, output_dir: str) -> str:
        os.makedirs(output_dir, exist_ok=True)
        output_path = os.path.join(output_dir, f"{result.metadata.collection_name}_result.json")
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
        return output_path
