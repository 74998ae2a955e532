"""Unit tests for the extractive summarizer."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from services.summarizer import ExtractiveSummarizer, score_sentences, split_sentences, summarize


EIGHT_SENTENCES = (
    "Provence is a region in the south of France. "
    "It has many small villages and old towns. "
    "The weather is usually warm in the summer. "
    "The beach bars and clubs of Nice are famous for nightlife. "
    "Local wine is served in almost every restaurant. "
    "Trains connect the larger cities several times a day. "
    "Markets sell lavender soap and olive oil. "
    "Hotels near the coast fill up early in July."
)


class TestSplitSentences:
    """Test suite for split_sentences."""

    def test_splits_on_punctuation_and_newlines(self):
        """Test boundaries after . ! ? and at newlines, dropping short pieces."""
        content = "First sentence is long enough. Second one also here! Short. Third line\nFourth line is also long"

        assert split_sentences(content) == [
            "First sentence is long enough.",
            "Second one also here!",
            "Fourth line is also long",
        ]

    def test_question_marks(self):
        """Test question marks end sentences too."""
        content = "Where should we stay tonight? Somewhere close to the old harbour."
        assert split_sentences(content) == ["Where should we stay tonight?", "Somewhere close to the old harbour."]


class TestScoreSentences:
    """Test suite for score_sentences."""

    def test_position_bonus(self):
        """Test the first three sentences get a decreasing bonus."""
        sentences = ["sentence number zero", "sentence number one", "sentence number two", "sentence number three"]

        scores = [score for _, score in score_sentences(sentences, [])]

        assert scores == pytest.approx([2.1, 1.4, 0.7, 0.0])

    def test_each_keyword_counts_once(self):
        """Test every distinct matching keyword adds one point."""
        sentences = ["padding sentence one", "padding sentence two", "padding sentence three",
                     "The beach bar near the beach club"]

        scored = score_sentences(sentences, ["beach", "bar", "club", "wine"])

        assert scored[3] == ("The beach bar near the beach club", 3.0)

    def test_keywords_are_substrings_and_case_insensitive(self):
        """Test keywords match inside words regardless of case."""
        sentences = ["x", "y", "z", "BARBECUE ON THE BEACH"]

        scored = score_sentences(sentences, ["Bar", "beach"])

        assert scored[3][1] == 2.0


class TestSummarize:
    """Test suite for summarize."""

    def test_orders_by_score_not_position(self):
        """Test a keyword-rich later sentence is selected first."""
        keywords = {"beach", "bar", "club", "nightlife"}

        result = summarize(EIGHT_SENTENCES, keywords, max_sentences=2)

        assert result == (
            "The beach bars and clubs of Nice are famous for nightlife.. "
            "Provence is a region in the south of France."
        )

    def test_joins_with_period_and_terminates(self):
        """Test sentences are joined with '. ' and a final period is added."""
        content = "Beach bars open late in summer\nMuseums close early on Sundays"

        result = summarize(content, {"beach", "bar"})

        assert result == "Beach bars open late in summer. Museums close early on Sundays."

    def test_bounds_on_eight_sentences(self):
        """Test at most max_sentences sentences of at least 20 characters are returned."""
        result = summarize(EIGHT_SENTENCES, {"wine", "hotel", "coast"}, max_sentences=5)

        parts = [part for part in result.split(". ") if part]
        assert len(parts) <= 5
        assert all(len(part.strip()) >= 20 for part in parts)
        assert result.endswith((".", "!", "?"))

    def test_short_sentences_scored_but_not_selected(self):
        """Test sentences of 16-19 characters take a position but are never selected."""
        content = "Too short to use.\nThis sentence is definitely long enough."

        assert summarize(content, set()) == "This sentence is definitely long enough."

    def test_no_extra_period_after_other_punctuation(self):
        """Test a summary ending in ! or ? is left as is."""
        assert summarize("What a wonderful view from the top!", set()) == "What a wonderful view from the top!"

    def test_nothing_long_enough(self):
        """Test an empty string is returned when no sentence qualifies."""
        assert summarize("Tiny. Also tiny.", {"tiny"}) == ""
        assert summarize("", {"beach"}) == ""

    def test_ties_keep_document_order(self):
        """Test sentences with equal scores keep their original order."""
        content = "\n".join(f"Plain sentence number {i} without keywords" for i in range(6))

        result = summarize(content, set(), max_sentences=5)

        assert result == ". ".join(f"Plain sentence number {i} without keywords" for i in range(5)) + "."


class TestExtractiveSummarizer:
    """Test suite for ExtractiveSummarizer."""

    def test_binds_lowercased_keywords(self):
        """Test keywords are stored lowercase and used for every call."""
        summarizer = ExtractiveSummarizer({"Beach", "BAR", "Nightlife"}, max_sentences=1)

        assert summarizer.keywords == frozenset({"beach", "bar", "nightlife"})
        assert summarizer.summarize(EIGHT_SENTENCES) == "The beach bars and clubs of Nice are famous for nightlife."
