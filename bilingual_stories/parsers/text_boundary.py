"""Line classification for the story text section.

The input gives no explicit separator between the original story and its
translation: the translated title is the only boundary, and it looks like
any other short line. These predicates decide which lines are titles and
which are prose. They are heuristics and occasionally misfire on a short
declarative sentence; the tests pin down the cases they are expected to
get right.

The boundary itself is decided by ``TRANSLATED_TITLE_RULES``, checked in
order; the first rule that accepts a line ends the original text there.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Sequence

from bilingual_stories.locales import (
    ANSWER_HINTS,
    ILLUSTRATION_HINTS,
    MARKER_PREFIX,
    QUESTION_HINTS,
    VOCABULARY_KEYWORDS,
    contains_any,
    is_marker,
)

ARROW = "→"
EM_DASH = "—"
QUOTE = '"'

REDUNDANT_TITLE_MAX = 50
TITLE_MAX = 100
LOOKAHEAD = 5

_NUMBERED_LINE_RE = re.compile(r"^\d+\.")

# Lines containing these are section furniture, never the start of prose.
_SECTION_HINTS = QUESTION_HINTS + ANSWER_HINTS
# A marker line whose text contains any of these is a real section header.
_MARKER_SECTION_WORDS = VOCABULARY_KEYWORDS + QUESTION_HINTS + ANSWER_HINTS + ILLUSTRATION_HINTS


def starts_capitalized(line: str) -> bool:
    return bool(line) and line[0] == line[0].upper()


def _has_sentence_punctuation(line: str) -> bool:
    return "." in line or "," in line


def ends_vocabulary(line: str) -> bool:
    """A non-blank line in the vocabulary section that looks like a heading."""
    return (
        ARROW not in line
        and len(line) > 3
        and starts_capitalized(line)
        and not _NUMBERED_LINE_RE.match(line)
    )


def starts_story_text(line: str) -> bool:
    return (
        starts_capitalized(line)
        and not is_marker(line)
        and not contains_any(line, _SECTION_HINTS)
        and len(line) > 3
        and ARROW not in line
    )


def is_redundant_title(line: str) -> bool:
    """The first story line repeats the title instead of starting the prose."""
    return len(line) < REDUNDANT_TITLE_MAX and not _has_sentence_punctuation(line)


def _is_marker_title(lines: Sequence[str], index: int) -> bool:
    line = lines[index]
    if not is_marker(line):
        return False
    title = line[len(MARKER_PREFIX):].strip()
    return (
        starts_capitalized(title)
        and not _has_sentence_punctuation(title)
        and not contains_any(title, _MARKER_SECTION_WORDS)
        and 3 < len(title) < TITLE_MAX
    )


def _prose_follows(lines: Sequence[str], index: int) -> bool:
    """Look a few lines ahead for prose before any section header."""
    found = False
    for nxt in lines[index + 1:index + 1 + LOOKAHEAD]:
        if not nxt:
            continue
        if is_marker(nxt) or contains_any(nxt, QUESTION_HINTS):
            return False
        if "." in nxt or EM_DASH in nxt or QUOTE in nxt:
            found = True
    return found


def _is_title_before_prose(lines: Sequence[str], index: int) -> bool:
    line = lines[index]
    return (
        starts_capitalized(line)
        and not line.startswith((EM_DASH, QUOTE, MARKER_PREFIX))
        and not _has_sentence_punctuation(line)
        and ":" not in line
        and 3 < len(line) < TITLE_MAX
        and _prose_follows(lines, index)
    )


@dataclass(frozen=True)
class BoundaryRule:
    name: str
    description: str
    applies: Callable[[Sequence[str], int], bool]


TRANSLATED_TITLE_RULES = (
    BoundaryRule(
        name="marker-title",
        description="a '+' line whose text is a clean title and not a section keyword",
        applies=_is_marker_title,
    ),
    BoundaryRule(
        name="title-before-prose",
        description=(
            "a short capitalized line without sentence punctuation or colon, "
            "not opening dialogue, followed within five lines by prose and no section header"
        ),
        applies=_is_title_before_prose,
    ),
)


def match_translated_title(lines: Sequence[str], index: int, has_original: bool) -> BoundaryRule | None:
    """Return the rule identifying ``lines[index]`` as the translated title.

    Nothing counts as the translated title until some original text has
    been collected.
    """
    if not has_original or not lines[index]:
        return None
    for rule in TRANSLATED_TITLE_RULES:
        if rule.applies(lines, index):
            return rule
    return None
