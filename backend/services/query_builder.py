"""Query and keyword derivation from persona and task text."""
from typing import FrozenSet, Iterable, List

from config import EXTRA_KEYWORDS, QUERY_ELABORATION

# Words that carry no signal for persona/task keyword matching
STOP_WORDS = frozenset([
    "a", "an", "the", "of", "for", "in", "to", "and", "is", "i",
    "need", "plan", "trip", "group", "friends", "college", "day", "days",
])
MIN_KEYWORD_LENGTH = 3


def keywords_from_text(text: str) -> List[str]:
    """Lowercase whitespace tokens longer than two characters, stop words removed."""
    return [
        word for word in text.lower().split()
        if len(word) >= MIN_KEYWORD_LENGTH and word not in STOP_WORDS
    ]


def build_keywords(
    persona: str,
    job_to_be_done: str,
    extra_keywords: Iterable[str] = EXTRA_KEYWORDS
) -> FrozenSet[str]:
    """
    Derive the summarizer keyword set for a collection.

    Args:
        persona: Persona role text
        job_to_be_done: Task text
        extra_keywords: Domain keywords added regardless of persona/task

    Returns:
        Lowercase keyword set
    """
    keywords = set(keywords_from_text(persona))
    keywords.update(keywords_from_text(job_to_be_done))
    keywords.update(keyword.strip().lower() for keyword in extra_keywords if keyword.strip())
    return frozenset(keywords)


def build_query(persona: str, job_to_be_done: str, elaboration: str = QUERY_ELABORATION) -> str:
    """Combine persona, task and elaboration into the relevance query."""
    task = job_to_be_done.strip().rstrip(".")
    query = f"As a {persona.strip()}, I need to {task}."
    if elaboration and elaboration.strip():
        query += f" {elaboration.strip()}"
    return query
