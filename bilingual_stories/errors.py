"""Errors raised while parsing a single story block.

Each one is caught at the block boundary by ``parse_stories`` and turned
into an error-severity diagnostic; none of them escapes a parse pass.
"""
from __future__ import annotations

TITLE_FORMATS = (
    "Story [number]: Title / Translated Title",
    "Story [number]: Title (Translated Title)",
    "Story [number]: Title - Translated Title",
    "Story [number]: Title",
)


class StoryParseError(ValueError):
    """Base class. ``line`` is the 0-based index within the story block."""

    def __init__(self, message: str, story_number: int | None = None, line: int | None = None):
        super().__init__(message)
        self.story_number = story_number
        self.line = line


class MalformedTitle(StoryParseError):
    def __init__(self, block_index: int):
        formats = "\n".join(f"- {f}" for f in TITLE_FORMATS)
        super().__init__(
            f"Story block {block_index}: Invalid story title format. Supported formats:\n{formats}",
            line=0,
        )
        self.block_index = block_index


class MissingSection(StoryParseError):
    pass


class WrongVocabularyCount(StoryParseError):
    def __init__(self, story_number: int, found: int, expected: int, line: int | None = None):
        super().__init__(
            f"Story {story_number}: Expected {expected} vocabulary words, found {found}",
            story_number=story_number,
            line=line,
        )
        self.expected = expected
        self.found = found


class MissingStoryText(StoryParseError):
    def __init__(self, story_number: int):
        super().__init__(f"Story {story_number}: Missing story text section", story_number=story_number)


class MissingBilingualText(StoryParseError):
    def __init__(self, story_number: int):
        super().__init__(
            f"Story {story_number}: Story text must include both original and translated versions",
            story_number=story_number,
        )


class NoQuestionsFound(StoryParseError):
    def __init__(self, story_number: int, line: int | None = None):
        super().__init__(
            f"Story {story_number}: No comprehension questions found",
            story_number=story_number,
            line=line,
        )


class AnswerCountMismatch(StoryParseError):
    def __init__(self, story_number: int, questions: int, answers: int, line: int | None = None):
        super().__init__(
            f"Story {story_number}: Expected {questions} answers (found {questions} questions), "
            f"but found {answers} answers",
            story_number=story_number,
            line=line,
        )
        self.questions = questions
        self.answers = answers
