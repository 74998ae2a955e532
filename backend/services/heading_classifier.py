"""Text-only heading detection.

Headings are recognized without layout metadata (no font size or position),
so the classifier combines structural, casing and length signals. Each rule
is a small predicate that returns ``True`` (heading), ``False`` (not a
heading) or ``None`` (no opinion). Rules run in order and the first opinion
wins; a line nobody claims is not a heading.
"""
import re
from typing import Callable, List, Optional, Tuple

MIN_HEADING_LENGTH = 3
MAX_HEADING_LENGTH = 150
TITLE_CASE_MIN_WORDS = 2
TITLE_CASE_MAX_WORDS = 14
TITLE_CASE_RATIO = 0.7
SHORT_LINE_MAX_WORDS = 6

SECTION_MARKER_PATTERN = re.compile(
    r"^(\d+(\.\d+)*\s+)?"
    r"(CHAPTER|SECTION|APPENDIX|TABLE OF CONTENTS|ACKNOWLEDGEMENTS|REFERENCES|BIBLIOGRAPHY|INDEX)\b",
    re.IGNORECASE,
)
SENTENCE_PUNCTUATION = (".", ",", ";", "!", "?")

HeadingRule = Callable[[str, List[str]], Optional[bool]]


def _reject_bad_length(line: str, words: List[str]) -> Optional[bool]:
    if len(line) < MIN_HEADING_LENGTH or len(line) > MAX_HEADING_LENGTH:
        return False
    return None


def _accept_section_marker(line: str, words: List[str]) -> Optional[bool]:
    # e.g. "CHAPTER 1", "2.3 Appendix B", "Table of Contents"
    if SECTION_MARKER_PATTERN.match(line):
        return True
    return None


def _accept_all_caps(line: str, words: List[str]) -> Optional[bool]:
    if line.upper() == line and len(words) >= 2 and not line.endswith(SENTENCE_PUNCTUATION):
        return True
    return None


def _accept_title_case(line: str, words: List[str]) -> Optional[bool]:
    if not TITLE_CASE_MIN_WORDS <= len(words) <= TITLE_CASE_MAX_WORDS:
        return None
    # Words starting with a digit or symbol count as capitalized ("1.2", "3-Day").
    capitalized = [word for word in words if word[0] == word[0].upper()]
    if len(capitalized) / len(words) > TITLE_CASE_RATIO and not line.endswith(SENTENCE_PUNCTUATION):
        return True
    return None


def _accept_short_line(line: str, words: List[str]) -> Optional[bool]:
    if TITLE_CASE_MIN_WORDS <= len(words) <= SHORT_LINE_MAX_WORDS and not line.endswith("."):
        return True
    return None


def _reject_sentence_shape(line: str, words: List[str]) -> Optional[bool]:
    if line.endswith((".", ",")) and len(words) > 3:
        return False
    return None


HEADING_RULES: Tuple[HeadingRule, ...] = (
    _reject_bad_length,
    _accept_section_marker,
    _accept_all_caps,
    _accept_title_case,
    _accept_short_line,
    _reject_sentence_shape,
)


def is_heading(line: str) -> bool:
    """
    Decide whether a single line of page text is a section heading.

    Args:
        line: Raw line of text (surrounding whitespace is ignored)

    Returns:
        True if the first rule with an opinion accepts the line
    """
    trimmed = line.strip()
    # Words are separated by plain spaces only; tabs and NBSP stay inside a word
    words = [word for word in trimmed.split(" ") if word]
    for rule in HEADING_RULES:
        verdict = rule(trimmed, words)
        if verdict is not None:
            return verdict
    return False
