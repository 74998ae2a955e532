"""Unit tests for ChunkingEngine."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from models.document import Document, Page
from models.chunk import Chunk, DOCUMENT_START_TITLE
from services.chunking_engine import ChunkingEngine


@pytest.fixture
def engine():
    return ChunkingEngine()


@pytest.fixture
def two_section_pages():
    return [
        Page(page_number=1, lines=[
            "Introduction To Provence",
            "The region is known for its lavender fields and sunny weather.",
            "Visitors come from all over the world to see it.",
        ]),
        Page(page_number=2, lines=[
            "Best Beaches",
            "The coast near Nice has pebble beaches that are popular in summer.",
        ]),
    ]


class TestSegment:
    """Test suite for ChunkingEngine.segment."""

    def test_splits_on_headings(self, engine, two_section_pages):
        """Test each heading opens a chunk with the following body lines."""
        chunks = engine.segment(two_section_pages)

        assert chunks == [
            Chunk(
                title="Introduction To Provence",
                content=(
                    "The region is known for its lavender fields and sunny weather.\n"
                    "Visitors come from all over the world to see it."
                ),
                page=1
            ),
            Chunk(
                title="Best Beaches",
                content="The coast near Nice has pebble beaches that are popular in summer.",
                page=2
            ),
        ]
        assert all(chunk.document == "" for chunk in chunks)

    def test_no_headings_yields_document_start_chunk(self, engine):
        """Test a document without headings becomes one chunk starting on page 1."""
        pages = [
            Page(page_number=1, lines=["The first page has a single plain sentence in it."]),
            Page(page_number=2, lines=["The second page continues the story with more words."]),
            Page(page_number=3, lines=["The final page wraps everything up nicely for us."]),
        ]

        chunks = engine.segment(pages)

        assert len(chunks) == 1
        assert chunks[0].title == DOCUMENT_START_TITLE
        assert chunks[0].page == 1
        assert chunks[0].content.count("\n") == 2

    def test_content_before_first_heading(self, engine):
        """Test text preceding the first heading is kept under Document Start."""
        pages = [Page(page_number=1, lines=[
            "This preface explains how the guide is organised for readers.",
            "Budget Travel Tips",
            "Book trains early to get the cheapest fares across the region.",
        ])]

        chunks = engine.segment(pages)

        assert [chunk.title for chunk in chunks] == [DOCUMENT_START_TITLE, "Budget Travel Tips"]

    def test_consecutive_headings_drop_empty_chunk(self, engine):
        """Test a heading immediately followed by another heading produces no chunk."""
        pages = [Page(page_number=1, lines=[
            "Table of Contents",
            "Chapter 1",
            "The journey begins in a small village near the sea.",
        ])]

        chunks = engine.segment(pages)

        assert len(chunks) == 1
        assert chunks[0].title == "Chapter 1"

    def test_trailing_heading_is_dropped(self, engine):
        """Test a heading at the very end of the document emits nothing."""
        pages = [Page(page_number=1, lines=[
            "Budget Travel Tips",
            "Book trains early to get the cheapest fares across the region.",
            "Further Reading",
        ])]

        chunks = engine.segment(pages)

        assert [chunk.title for chunk in chunks] == ["Budget Travel Tips"]

    def test_heading_only_document_yields_nothing(self, engine):
        """Test a document with headings but no body text yields no chunks."""
        pages = [Page(page_number=1, lines=["CHAPTER 1", "CHAPTER 2", "Appendix A"])]

        assert engine.segment(pages) == []

    def test_empty_input(self, engine):
        """Test no pages and pages without lines both yield no chunks."""
        assert engine.segment([]) == []
        assert engine.segment([Page(page_number=1), Page(page_number=2)]) == []

    def test_chunk_spans_pages_and_keeps_start_page(self, engine):
        """Test a chunk continuing onto later pages keeps the page of its heading."""
        pages = [
            Page(page_number=1, lines=["Budget Travel Tips", "Book trains early to get the cheapest fares."]),
            Page(page_number=2, lines=[]),  # page whose text could not be extracted
            Page(page_number=3, lines=["Local buses are slower but cost far less than taxis."]),
            Page(page_number=4, lines=["Where To Stay", "Hostels in the old town fill up quickly in August."]),
        ]

        chunks = engine.segment(pages)

        assert [(chunk.title, chunk.page) for chunk in chunks] == [
            ("Budget Travel Tips", 1),
            ("Where To Stay", 4),
        ]
        assert "Local buses" in chunks[0].content

    def test_pages_are_non_decreasing(self, engine, two_section_pages):
        """Test chunk pages follow source order."""
        pages = [chunk.page for chunk in engine.segment(two_section_pages)]
        assert pages == sorted(pages)

    def test_deterministic(self, engine, two_section_pages):
        """Test segmenting the same input twice gives the same chunks."""
        assert engine.segment(two_section_pages) == engine.segment(two_section_pages)

    def test_custom_heading_detector(self):
        """Test the heading predicate can be swapped."""
        engine = ChunkingEngine(heading_detector=lambda line: line.startswith("#"))
        pages = [Page(page_number=1, lines=["# Intro", "some text", "# Next", "more text"])]

        chunks = engine.segment(pages)

        assert [(chunk.title, chunk.content) for chunk in chunks] == [
            ("# Intro", "some text"),
            ("# Next", "more text"),
        ]


class TestChunkDocuments:
    """Test suite for ChunkingEngine.chunk_documents."""

    def test_tags_chunks_with_document_name(self, engine, two_section_pages):
        """Test chunks of each document carry that document's filename, in document order."""
        documents = [
            Document(filename="provence.pdf", pages=two_section_pages, total_pages=2),
            Document(filename="empty.pdf", pages=[], total_pages=0),
            Document(filename="tips.pdf", pages=[
                Page(page_number=1, lines=["Budget Travel Tips", "Book trains early to get the cheapest fares."]),
            ], total_pages=1),
        ]

        chunks = engine.chunk_documents(documents)

        assert [(chunk.document, chunk.title) for chunk in chunks] == [
            ("provence.pdf", "Introduction To Provence"),
            ("provence.pdf", "Best Beaches"),
            ("tips.pdf", "Budget Travel Tips"),
        ]
