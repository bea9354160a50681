"""Checks over a whole collection of stories.

``validate_stories`` repeats several of the parser's per-story checks. The
parser never returns a story that fails them, but stories can also be built
by hand (see ``models.story_from_dict``) and those only pass through here.
"""
from __future__ import annotations

import logging
from typing import Iterable

from bilingual_stories.models import ERROR, WARNING, ParseResult, Story, ValidationError
from bilingual_stories.parsers.story_parser import OPTION_LETTERS, VOCABULARY_SIZE, parse_stories

_log = logging.getLogger("bilingual_stories.validator")


def _check_numbering(stories: list[Story]) -> ValidationError | None:
    numbers = sorted(s.number for s in stories)
    for expected, found in enumerate(numbers, 1):
        if found != expected:
            return ValidationError(
                message=f"Story numbers are not sequential. Expected {expected}, found {found}",
                severity=WARNING,
            )
    return None


def _check_story(story: Story) -> list[ValidationError]:
    errors: list[ValidationError] = []
    n = story.number

    if len(story.vocabulary) != VOCABULARY_SIZE:
        errors.append(ValidationError(f"Story {n}: Must have exactly {VOCABULARY_SIZE} vocabulary words"))

    if not story.questions:
        errors.append(ValidationError(f"Story {n}: Must have at least one comprehension question"))

    if len(story.answers) != len(story.questions):
        errors.append(ValidationError(
            f"Story {n}: Number of answers ({len(story.answers)}) must match "
            f"number of questions ({len(story.questions)})"
        ))

    for q in story.questions:
        if len(q.options) != len(OPTION_LETTERS):
            errors.append(ValidationError(
                f"Story {n}, Question {q.number}: Must have exactly {len(OPTION_LETTERS)} options"
            ))

    if not story.text_original or not story.text_translated:
        errors.append(ValidationError(f"Story {n}: Story text cannot be empty"))

    return errors


def validate_stories(stories: Iterable[Story]) -> list[ValidationError]:
    stories = list(stories)
    if not stories:
        return [ValidationError("No stories found. Please add at least one story.", severity=WARNING)]

    errors: list[ValidationError] = []
    numbering = _check_numbering(stories)
    if numbering is not None:
        errors.append(numbering)
    for story in stories:
        errors.extend(_check_story(story))

    _log.debug(
        "Validated %d stories: %d errors, %d warnings",
        len(stories),
        sum(1 for e in errors if e.severity == ERROR),
        sum(1 for e in errors if e.severity == WARNING),
    )
    return errors


def check_stories(text: str) -> ParseResult:
    """Parse and validate ``text``; the result carries both sets of diagnostics.

    Blank input is not an error: it yields an empty result with no diagnostics.
    """
    if not text.strip():
        return ParseResult()
    parsed = parse_stories(text)
    return ParseResult(
        stories=parsed.stories,
        errors=parsed.errors + tuple(validate_stories(parsed.stories)),
    )
