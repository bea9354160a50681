"""Keyword tables for the languages the story format can be written in.

Story headers are recognized in five languages. Section markers
(``+Vocabulary``, ``+Comprehension Questions``, ...) are recognized in
English and Spanish, which is how the bilingual input is written in
practice: ``+Vocabulario / Vocabulary``.

To support another language add a row here; the parsers build all their
patterns and keyword sets from these tables.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

MARKER_PREFIX = "+"

STORY_HEADERS = {
    "en": "Story",
    "es": "Cuento",
    "fr": "Histoire",
    "de": "Geschichte",
    "it": "Storia",
}


@dataclass(frozen=True)
class SectionKeywords:
    vocabulary: str
    questions: str
    answers: str
    illustration: str
    # Single words that, anywhere in a line, mark it as section furniture
    # rather than story prose.
    question_hints: tuple[str, ...] = ()
    answer_hints: tuple[str, ...] = ()
    illustration_hints: tuple[str, ...] = ()


SECTION_KEYWORDS = {
    "en": SectionKeywords(
        vocabulary="vocabulary",
        questions="comprehension questions",
        answers="correct answers",
        illustration="illustration prompt",
        question_hints=("comprehension",),
        answer_hints=("answers",),
        illustration_hints=("illustration", "prompt"),
    ),
    "es": SectionKeywords(
        vocabulary="vocabulario",
        questions="preguntas de comprensión",
        answers="respuestas correctas",
        illustration="prompt de ilustración",
        question_hints=("preguntas",),
        answer_hints=("respuestas",),
        illustration_hints=("prompt",),
    ),
}


def _collect(attr: str) -> tuple[str, ...]:
    seen: list[str] = []
    for kw in SECTION_KEYWORDS.values():
        value = getattr(kw, attr)
        for word in (value,) if isinstance(value, str) else value:
            if word not in seen:
                seen.append(word)
    return tuple(seen)


VOCABULARY_KEYWORDS = _collect("vocabulary")
QUESTION_KEYWORDS = _collect("questions")
ANSWER_KEYWORDS = _collect("answers")
ILLUSTRATION_KEYWORDS = _collect("illustration")
QUESTION_HINTS = _collect("question_hints")
ANSWER_HINTS = _collect("answer_hints")
ILLUSTRATION_HINTS = _collect("illustration_hints")

HEADER_WORDS_PATTERN = "|".join(re.escape(w) for w in STORY_HEADERS.values())

# "Story 3:" / "cuento 12:", but not "History 3:"
STORY_HEADER_LINE_RE = re.compile(rf"^(?:{HEADER_WORDS_PATTERN}) \d+:", re.IGNORECASE)
STORY_SPLIT_RE = re.compile(rf"(?=\b(?:{HEADER_WORDS_PATTERN}) \d+:)", re.IGNORECASE)


def contains_any(line: str, keywords: tuple[str, ...]) -> bool:
    lowered = line.lower()
    return any(k in lowered for k in keywords)


def is_marker(line: str) -> bool:
    return line.startswith(MARKER_PREFIX)


def is_section_marker(line: str, keywords: tuple[str, ...]) -> bool:
    return is_marker(line) and contains_any(line, keywords)


def is_story_header(line: str) -> bool:
    return STORY_HEADER_LINE_RE.match(line) is not None


def describe() -> dict:
    """Plain-data view of the tables, for the CLI and the API."""
    return {
        "marker_prefix": MARKER_PREFIX,
        "story_headers": dict(STORY_HEADERS),
        "sections": {
            code: {
                "vocabulary": kw.vocabulary,
                "questions": kw.questions,
                "answers": kw.answers,
                "illustration": kw.illustration,
            }
            for code, kw in SECTION_KEYWORDS.items()
        },
    }
