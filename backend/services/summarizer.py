"""Extractive summarizer that picks representative sentences from a chunk."""
import re
from typing import Iterable, List, Tuple

SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+|\n")
TERMINAL_PUNCTUATION = (".", "!", "?")

# Sentences this short or shorter are dropped before scoring
MIN_SENTENCE_LENGTH = 15
# Sentences must be at least this long to be selected
MIN_SELECTED_LENGTH = 20
# The first POSITION_WINDOW sentences get (POSITION_WINDOW - index) * POSITION_BONUS
POSITION_WINDOW = 3
POSITION_BONUS = 0.7

DEFAULT_MAX_SENTENCES = 5


def split_sentences(content: str) -> List[str]:
    """Split text after ., ! or ? plus whitespace, and at newlines."""
    return [s for s in SENTENCE_BOUNDARY.split(content) if len(s.strip()) > MIN_SENTENCE_LENGTH]


def score_sentences(sentences: List[str], keywords: Iterable[str]) -> List[Tuple[str, float]]:
    """
    Score sentences by keyword hits plus a bonus for appearing early.

    Every keyword found as a substring of the lowercased sentence adds 1.
    """
    lowered_keywords = [keyword.lower() for keyword in keywords]
    scored = []

    for index, sentence in enumerate(sentences):
        lower_sentence = sentence.lower()
        score = float(sum(1 for keyword in lowered_keywords if keyword in lower_sentence))
        if index < POSITION_WINDOW:
            score += (POSITION_WINDOW - index) * POSITION_BONUS
        scored.append((sentence, score))

    return scored


def summarize(content: str, keywords: Iterable[str], max_sentences: int = DEFAULT_MAX_SENTENCES) -> str:
    """
    Build a short extractive summary of a chunk.

    Selected sentences are returned in score order, not document order.

    Args:
        content: Chunk content
        keywords: Keyword set for the current collection
        max_sentences: Maximum number of sentences to keep

    Returns:
        Selected sentences joined with ". ", ending in terminal punctuation,
        or "" if no sentence is long enough
    """
    scored = score_sentences(split_sentences(content), keywords)
    scored.sort(key=lambda item: item[1], reverse=True)

    selected = []
    for sentence, _score in scored:
        if len(selected) >= max_sentences:
            break
        if len(sentence.strip()) >= MIN_SELECTED_LENGTH:
            selected.append(sentence.strip())

    refined_text = ". ".join(selected)
    if refined_text and not refined_text.endswith(TERMINAL_PUNCTUATION):
        refined_text += "."
    return refined_text


class ExtractiveSummarizer:
    """Summarizer bound to one collection's keyword set."""

    def __init__(self, keywords: Iterable[str], max_sentences: int = DEFAULT_MAX_SENTENCES):
        self.keywords = frozenset(keyword.lower() for keyword in keywords)
        self.max_sentences = max_sentences

    def summarize(self, content: str) -> str:
        return summarize(content, self.keywords, self.max_sentences)
