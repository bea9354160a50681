"""Parse story blocks into Story objects.

Each block is read top to bottom by a fixed sequence of section parsers:

  title -> vocabulary -> story text -> questions -> answers -> illustration prompt

Every section parser takes the block's lines and the current position and
returns what it parsed together with the position where the next section
starts. A section that cannot be parsed raises a ``StoryParseError``;
``parse_stories`` turns that into a diagnostic and moves on to the next
block.

Expected block layout::

  Story 1: El gato negro / The Black Cat
  +Vocabulario / Vocabulary
  gato → /ˈɡa.to/ → GAH-toh → cat
  ... (ten entries)
  El gato negro
  Había una vez un gato negro.
  +The Black Cat
  Once upon a time there was a black cat.
  +Preguntas de Comprensión / Comprehension Questions
  ¿De qué color es el gato? / What color is the cat?
  a) Negro / Black
  b) Blanco / White
  c) Gris / Gray
  +Respuestas Correctas / Correct Answers
  a) Negro / Black
  +Illustration Prompt / Prompt de Ilustración
  A black cat sitting on a windowsill.
"""
from __future__ import annotations

import logging
import re

from bilingual_stories.errors import (
    AnswerCountMismatch,
    MalformedTitle,
    MissingBilingualText,
    MissingSection,
    MissingStoryText,
    NoQuestionsFound,
    StoryParseError,
    WrongVocabularyCount,
)
from bilingual_stories.locales import (
    ANSWER_KEYWORDS,
    HEADER_WORDS_PATTERN,
    ILLUSTRATION_KEYWORDS,
    QUESTION_KEYWORDS,
    VOCABULARY_KEYWORDS,
    is_marker,
    is_section_marker,
    is_story_header,
)
from bilingual_stories.models import (
    ERROR,
    ParseResult,
    Question,
    QuestionOption,
    Story,
    ValidationError,
    VocabularyWord,
)
from bilingual_stories.parsers.segmenter import locate_story_blocks
from bilingual_stories.parsers.text_boundary import (
    ends_vocabulary,
    is_redundant_title,
    match_translated_title,
    starts_story_text,
)

_log = logging.getLogger("bilingual_stories.parser")

VOCABULARY_SIZE = 10
OPTION_LETTERS = ("a", "b", "c")

_HEADER = rf"\b(?:{HEADER_WORDS_PATTERN}) (\d+):"

# Tried in order; the first match wins.
TITLE_GRAMMARS = (
    ("slash", re.compile(_HEADER + r"\s*(.+?)\s*/\s*(.+)", re.IGNORECASE)),
    ("parentheses", re.compile(_HEADER + r"\s*(.+?)\s*\(\s*(.+?)\s*\)", re.IGNORECASE)),
    ("dash", re.compile(_HEADER + r"\s*(.+?)\s*-\s*(.+)", re.IGNORECASE)),
    ("single", re.compile(_HEADER + r"\s*(.+)", re.IGNORECASE)),
)

# word → /ipa/ → pronunciation → translation
VOCAB_ENTRY_RE = re.compile(r"^(.+?)\s*→\s*/(.+?)/\s*→\s*(.+?)\s*→\s*(.+)")
QUESTION_RE = re.compile(r"^¿?(.+?)\s*/\s*(.+?)$")
OPTION_RE = re.compile(r"^([a-c])\)\s*(.+?)\s*/\s*(.+)")
OPTION_PREFIX_RE = re.compile(r"^([a-c])\)")

MISSING_VOCABULARY = "Missing +Vocabulario / +Vocabulary section"
MISSING_QUESTIONS = "Missing +Preguntas de Comprensión / +Comprehension Questions section"


def parse_title(line: str, block_index: int = 1) -> tuple[int, str, str]:
    """Return (story number, original title, translated title)."""
    for name, pattern in TITLE_GRAMMARS:
        m = pattern.search(line)
        if not m:
            continue
        original = m.group(2).strip()
        translated = m.group(3).strip() if m.lastindex >= 3 else original
        _log.debug("Title matched %s grammar: %r", name, line)
        return int(m.group(1)), original, translated
    raise MalformedTitle(block_index)


def _find_marker(lines: list[str], start: int, keywords: tuple[str, ...]) -> int | None:
    for i in range(start, len(lines)):
        if is_section_marker(lines[i], keywords):
            return i
    return None


def parse_vocabulary(lines: list[str], pos: int, number: int) -> tuple[list[VocabularyWord], int]:
    marker = _find_marker(lines, pos, VOCABULARY_KEYWORDS)
    if marker is None:
        raise MissingSection(f"Story {number}: {MISSING_VOCABULARY}", story_number=number)

    words: list[VocabularyWord] = []
    pos = marker + 1
    while pos < len(lines):
        line = lines[pos]
        if is_marker(line) or (not line and pos + 1 < len(lines) and is_marker(lines[pos + 1])):
            break
        if not line:
            pos += 1
            continue
        if ends_vocabulary(line):
            break

        # Lines that are not entries are skipped without complaint
        m = VOCAB_ENTRY_RE.match(line)
        if m:
            words.append(VocabularyWord(
                word=m.group(1).strip(),
                ipa=m.group(2).strip(),
                pronunciation=m.group(3).strip(),
                translation=m.group(4).strip(),
            ))
        pos += 1

    if len(words) != VOCABULARY_SIZE:
        raise WrongVocabularyCount(number, found=len(words), expected=VOCABULARY_SIZE, line=marker)
    return words, pos


def parse_story_text(lines: list[str], pos: int, number: int) -> tuple[str, str, int]:
    """Return (original text, translated text, position of the questions marker)."""
    start = next((i for i in range(pos, len(lines)) if starts_story_text(lines[i])), None)
    if start is None:
        raise MissingStoryText(number)

    pos = start + 1 if is_redundant_title(lines[start]) else start

    original: list[str] = []
    while pos < len(lines):
        rule = match_translated_title(lines, pos, bool(original))
        if rule is not None:
            _log.debug("Story %d: translated title at line %d (%s)", number, pos, rule.name)
            break
        if lines[pos]:
            original.append(lines[pos])
        pos += 1

    # The translated title itself is not kept
    pos += 1

    translated: list[str] = []
    while pos < len(lines):
        line = lines[pos]
        if is_section_marker(line, QUESTION_KEYWORDS):
            break
        if line:
            translated.append(line)
        pos += 1

    text_original = "\n".join(original).strip()
    text_translated = "\n".join(translated).strip()
    if not text_original or not text_translated:
        raise MissingBilingualText(number)
    return text_original, text_translated, pos


def _parse_options(lines: list[str], pos: int) -> tuple[list[QuestionOption], int]:
    options: list[QuestionOption] = []
    while pos < len(lines) and len(options) < len(OPTION_LETTERS):
        m = OPTION_RE.match(lines[pos])
        if not m or m.group(1) != OPTION_LETTERS[len(options)]:
            break
        options.append(QuestionOption(
            letter=m.group(1),
            text_original=m.group(2).strip(),
            text_translated=m.group(3).strip(),
        ))
        pos += 1
    return options, pos


def parse_questions(lines: list[str], pos: int, number: int) -> tuple[list[Question], int]:
    marker = _find_marker(lines, pos, QUESTION_KEYWORDS)
    if marker is None:
        raise MissingSection(f"Story {number}: {MISSING_QUESTIONS}", story_number=number)

    questions: list[Question] = []
    pos = marker + 1
    while pos < len(lines) and not is_marker(lines[pos]):
        line = lines[pos]
        m = QUESTION_RE.match(line)
        if m and not OPTION_PREFIX_RE.match(line):
            options, pos = _parse_options(lines, pos + 1)
            # Questions without all three options are dropped
            if len(options) == len(OPTION_LETTERS):
                questions.append(Question(
                    number=len(questions) + 1,
                    question_original=m.group(1).strip(),
                    question_translated=m.group(2).strip(),
                    options=tuple(options),
                ))
            else:
                _log.debug("Story %d: dropping question with %d options: %r", number, len(options), line)
            continue
        pos += 1

    if not questions:
        raise NoQuestionsFound(number, line=marker)
    return questions, pos


def _section_lines(lines: list[str], marker: int) -> list[str]:
    """Non-blank lines after a marker, up to the next marker or story header."""
    collected: list[str] = []
    for line in lines[marker + 1:]:
        if is_marker(line) or is_story_header(line):
            break
        if line:
            collected.append(line)
    return collected


def parse_answers(lines: list[str], pos: int, number: int, question_count: int) -> list[str]:
    marker = _find_marker(lines, pos, ANSWER_KEYWORDS)
    answers: list[str] = []
    if marker is not None:
        for line in _section_lines(lines, marker):
            m = OPTION_PREFIX_RE.match(line)
            if m:
                answers.append(m.group(1))

    if len(answers) != question_count:
        raise AnswerCountMismatch(number, questions=question_count, answers=len(answers), line=marker)
    return answers


def parse_illustration_prompt(lines: list[str], pos: int) -> str | None:
    marker = _find_marker(lines, pos, ILLUSTRATION_KEYWORDS)
    if marker is None:
        return None
    return "\n".join(_section_lines(lines, marker)).strip()


def parse_story_block(block: str, block_index: int = 1) -> Story:
    """Parse one story block. Raises StoryParseError on the first defect."""
    lines = [line.strip() for line in block.split("\n")]

    number, title_original, title_translated = parse_title(lines[0], block_index)
    vocabulary, pos = parse_vocabulary(lines, 1, number)
    text_original, text_translated, pos = parse_story_text(lines, pos, number)
    questions, pos = parse_questions(lines, pos, number)
    answers = parse_answers(lines, pos, number, len(questions))
    illustration_prompt = parse_illustration_prompt(lines, pos)

    return Story(
        number=number,
        title_original=title_original,
        title_translated=title_translated,
        vocabulary=tuple(vocabulary),
        text_original=text_original,
        text_translated=text_translated,
        questions=tuple(questions),
        answers=tuple(answers),
        illustration_prompt=illustration_prompt,
    )


def parse_stories(text: str) -> ParseResult:
    """Parse every story in ``text``.

    A block that fails to parse contributes one error diagnostic and no
    story; the remaining blocks are parsed regardless.
    """
    stories: list[Story] = []
    errors: list[ValidationError] = []

    blocks = locate_story_blocks(text)
    for index, block in enumerate(blocks, 1):
        try:
            story = parse_story_block(block.text, index)
        except StoryParseError as e:
            offset = e.line if e.line is not None else 0
            _log.info("Block %d (line %d) rejected: %s", index, block.line, str(e).splitlines()[0])
            errors.append(ValidationError(message=str(e), severity=ERROR, line=block.line + offset))
            continue
        except Exception:
            _log.exception("Unexpected failure parsing block %d (line %d)", index, block.line)
            errors.append(ValidationError(message="Failed to parse story", severity=ERROR, line=block.line))
            continue
        _log.debug(
            "Parsed story %d: %d words, %d questions",
            story.number, len(story.vocabulary), len(story.questions),
        )
        stories.append(story)

    if blocks:
        _log.info("Parsed %d/%d story blocks, %d errors", len(stories), len(blocks), len(errors))
    return ParseResult(stories=tuple(stories), errors=tuple(errors))
