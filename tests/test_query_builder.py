"""Unit tests for query and keyword derivation."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from config import DEFAULT_EXTRA_KEYWORDS
from services.query_builder import build_keywords, build_query, keywords_from_text


class TestKeywords:
    """Test suite for keyword derivation."""

    def test_keywords_from_persona(self):
        """Test persona text becomes lowercase tokens."""
        assert keywords_from_text("Travel Planner") == ["travel", "planner"]

    def test_stop_words_and_short_tokens_removed(self):
        """Test stop words and tokens of two characters or fewer are dropped."""
        assert keywords_from_text("Plan a 3-day trip to go see the Old Port") == ["3-day", "see", "old", "port"]

    def test_build_keywords_unions_sources(self):
        """Test persona, task and extra keywords are merged."""
        keywords = build_keywords("Travel Planner", "Plan a 3-day trip", extra_keywords=["Beach", " coast "])

        assert keywords == frozenset({"travel", "planner", "3-day", "beach", "coast"})

    def test_build_keywords_extra_keywords_injectable(self):
        """Test the domain keyword list can be replaced entirely."""
        keywords = build_keywords("HR Professional", "Create onboarding forms", extra_keywords=[])

        assert keywords == frozenset({"professional", "create", "onboarding", "forms"})

    def test_default_extra_keywords(self):
        """Test the default domain list is the travel keyword list."""
        assert "beach" in DEFAULT_EXTRA_KEYWORDS
        assert "thing to do" in DEFAULT_EXTRA_KEYWORDS


class TestBuildQuery:
    """Test suite for build_query."""

    def test_query_with_elaboration(self):
        """Test persona, task and elaboration are combined."""
        query = build_query("Travel Planner", "Plan a 3-day trip.", "Focus on beaches and nightlife.")

        assert query == "As a Travel Planner, I need to Plan a 3-day trip. Focus on beaches and nightlife."

    def test_task_trailing_periods_normalized(self):
        """Test a task written as a sentence does not end the query clause with '..'."""
        assert build_query("Travel Planner", "  Plan a 3-day trip...  ", "") == \
            "As a Travel Planner, I need to Plan a 3-day trip."

    def test_query_without_elaboration(self):
        """Test a blank elaboration is left out."""
        assert build_query(" Travel Planner ", "Plan a 3-day trip", "  ") == \
            "As a Travel Planner, I need to Plan a 3-day trip."
