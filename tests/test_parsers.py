"""Tests for the segmenter and the story block parser."""
from __future__ import annotations

import json

import pytest

from bilingual_stories.errors import (
    AnswerCountMismatch,
    MalformedTitle,
    MissingBilingualText,
    MissingSection,
    MissingStoryText,
    NoQuestionsFound,
    WrongVocabularyCount,
)
from bilingual_stories.parsers.segmenter import locate_story_blocks, split_story_blocks
from bilingual_stories.parsers.story_parser import (
    parse_questions,
    parse_stories,
    parse_story_block,
    parse_title,
    parse_vocabulary,
)

from story_samples import (
    GOLDEN_DASH,
    GOLDEN_PARENTHESES,
    GOLDEN_SINGLE,
    GOLDEN_SLASH,
    QUESTIONS,
    VOCABULARY,
)


class TestSegmenter:
    def test_empty_input(self):
        assert split_story_blocks("") == []
        assert split_story_blocks("   \n\n\t\n") == []

    def test_three_blocks_with_surrounding_blank_lines(self):
        text = "\n\n" + GOLDEN_SLASH + "\n" + GOLDEN_DASH + "\n\n" + GOLDEN_SINGLE + "\n\n\n"
        blocks = split_story_blocks(text)
        assert len(blocks) == 3
        assert blocks[0].startswith("Story 1:")
        assert blocks[1].startswith("Histoire 3:")
        assert blocks[2].startswith("Story 4:")

    def test_header_belongs_to_following_block(self):
        blocks = split_story_blocks("Story 1: A\nbody one\nStory 2: B\nbody two\n")
        assert blocks == ["Story 1: A\nbody one\n", "Story 2: B\nbody two\n"]

    def test_all_header_languages(self):
        text = "\n".join(f"{h} {i}: Title" for i, h in enumerate(
            ["Story", "Cuento", "Histoire", "Geschichte", "Storia"], 1))
        blocks = split_story_blocks(text)
        assert len(blocks) == 5
        assert blocks[3].startswith("Geschichte 4:")

    def test_header_case_insensitive(self):
        blocks = split_story_blocks("STORY 1: A\nx\nstory 2: B\ny")
        assert len(blocks) == 2

    def test_header_word_inside_another_word(self):
        blocks = split_story_blocks("Story 1: A\nHistory 2: a note\nStory 2: B\n")
        assert blocks == ["Story 1: A\nHistory 2: a note\n", "Story 2: B\n"]

    def test_text_before_first_header_is_a_block(self):
        blocks = split_story_blocks("Some notes\n\nStory 1: A\n")
        assert blocks == ["Some notes\n\n", "Story 1: A\n"]

    def test_block_lines(self):
        text = "\n\nStory 1: A\nx\nStory 2: B\n"
        blocks = locate_story_blocks(text)
        assert [b.line for b in blocks] == [3, 5]


class TestTitle:
    @pytest.mark.parametrize("line,expected", [
        ("Story 1: El gato / The Cat", (1, "El gato", "The Cat")),
        ("Story 2: El gato (The Cat)", (2, "El gato", "The Cat")),
        ("Story 3: El gato - The Cat", (3, "El gato", "The Cat")),
        ("Story 4: El gato", (4, "El gato", "El gato")),
        ("Cuento 12:La casa/The House", (12, "La casa", "The House")),
        ("storia 7: Il gatto ( The Cat )", (7, "Il gatto", "The Cat")),
    ])
    def test_grammars(self, line, expected):
        assert parse_title(line) == expected

    def test_slash_wins_over_dash(self):
        assert parse_title("Story 1: Semi-final / Semifinal") == (1, "Semi-final", "Semifinal")

    def test_malformed_lists_all_formats(self):
        with pytest.raises(MalformedTitle) as exc:
            parse_title("Chapter 1: The Cat", block_index=3)
        msg = str(exc.value)
        assert msg.startswith("Story block 3: Invalid story title format")
        assert "- Story [number]: Title / Translated Title" in msg
        assert "- Story [number]: Title (Translated Title)" in msg
        assert "- Story [number]: Title - Translated Title" in msg
        assert "- Story [number]: Title\n" in msg + "\n"

    def test_missing_title_text(self):
        with pytest.raises(MalformedTitle):
            parse_title("Story 1:")

    def test_header_word_must_stand_alone(self):
        with pytest.raises(MalformedTitle):
            parse_title("History 2: The Cat")


class TestGoldenFixtures:
    @pytest.mark.parametrize("text,number,original,translated", [
        (GOLDEN_SLASH, 1, "El gato negro", "The Black Cat"),
        (GOLDEN_PARENTHESES, 2, "La luna feliz", "The Happy Moon"),
        (GOLDEN_DASH, 3, "La casa", "The House"),
        (GOLDEN_SINGLE, 4, "El árbol", "El árbol"),
    ])
    def test_each_grammar_parses(self, text, number, original, translated):
        result = parse_stories(text)
        assert result.errors == ()
        assert len(result.stories) == 1
        story = result.stories[0]
        assert story.number == number
        assert story.title_original == original
        assert story.title_translated == translated
        assert len(story.vocabulary) == 10
        assert len(story.questions) == 2
        assert story.answers == ("a", "b")

    def test_all_together(self, golden_text):
        result = parse_stories(golden_text)
        assert result.errors == ()
        assert [s.number for s in result.stories] == [1, 2, 3, 4]

    def test_idempotent(self, golden_text):
        first = parse_stories(golden_text)
        second = parse_stories(golden_text)
        assert first == second
        assert json.dumps(first.to_dict(), ensure_ascii=False) == json.dumps(second.to_dict(), ensure_ascii=False)


class TestVocabulary:
    def test_entries(self):
        story = parse_story_block(GOLDEN_SLASH)
        first = story.vocabulary[0]
        assert first.word == "gato"
        assert first.ipa == "ˈɡa.to"
        assert first.pronunciation == "GAH-toh"
        assert first.translation == "cat"
        assert story.vocabulary[-1].word == "feliz"

    def test_nine_entries(self):
        text = GOLDEN_SLASH.replace("feliz → /feˈlis/ → feh-LEES → happy\n", "")
        result = parse_stories(text)
        assert result.stories == ()
        assert len(result.errors) == 1
        assert result.errors[0].message == "Story 1: Expected 10 vocabulary words, found 9"
        assert result.errors[0].severity == "error"

    def test_eleven_entries(self):
        text = GOLDEN_SLASH.replace(VOCABULARY, VOCABULARY + "sol → /sol/ → sohl → sun\n")
        result = parse_stories(text)
        assert result.stories == ()
        assert len(result.errors) == 1
        assert "found 11" in result.errors[0].message

    def test_wrong_count_exception(self):
        text = GOLDEN_SLASH.replace("feliz → /feˈlis/ → feh-LEES → happy\n", "")
        with pytest.raises(WrongVocabularyCount) as exc:
            parse_story_block(text)
        assert exc.value.found == 9
        assert exc.value.expected == 10

    def test_unmatched_lines_skipped(self):
        text = GOLDEN_SLASH.replace(
            "casa → /ˈka.sa/ → KAH-sah → house\n",
            "casa → /ˈka.sa/ → KAH-sah → house\nnota sin flechas\n\n",
        )
        story = parse_story_block(text)
        assert len(story.vocabulary) == 10

    def test_missing_section(self):
        text = GOLDEN_SLASH.replace("+Vocabulario / Vocabulary\n", "")
        with pytest.raises(MissingSection) as exc:
            parse_story_block(text)
        assert str(exc.value) == "Story 1: Missing +Vocabulario / +Vocabulary section"

    def test_marker_case_insensitive(self):
        story = parse_story_block(GOLDEN_SLASH.replace("+Vocabulario / Vocabulary", "+VOCABULARIO"))
        assert len(story.vocabulary) == 10

    def test_ends_at_marker(self):
        text = GOLDEN_DASH.replace(VOCABULARY + "\n", VOCABULARY + "+La casa\n")
        result = parse_stories(text)
        assert result.errors == ()
        story = result.stories[0]
        assert len(story.vocabulary) == 10
        assert story.text_original.startswith("La casa es grande")

        lines = [line.strip() for line in text.split("\n")]
        words, pos = parse_vocabulary(lines, 1, 3)
        assert len(words) == 10
        assert lines[pos] == "+La casa"

    def test_ends_at_blank_line_before_marker(self):
        text = GOLDEN_DASH.replace(VOCABULARY + "\n", VOCABULARY + "\n+La casa\n")
        result = parse_stories(text)
        assert result.errors == ()
        assert len(result.stories[0].vocabulary) == 10

        lines = [line.strip() for line in text.split("\n")]
        words, pos = parse_vocabulary(lines, 1, 3)
        assert len(words) == 10
        assert lines[pos] == ""
        assert lines[pos + 1] == "+La casa"


class TestStoryText:
    def test_marker_title_boundary(self):
        story = parse_story_block(GOLDEN_SLASH)
        assert story.text_original == (
            "Había una vez un gato negro.\n"
            "El gato vive en una casa con un jardín.\n"
            "Cada noche, mira la luna desde la ventana."
        )
        assert story.text_translated.startswith("Once upon a time")
        assert "The Black Cat" not in story.text_translated

    def test_plain_title_boundary(self):
        story = parse_story_block(GOLDEN_PARENTHESES)
        assert story.text_original.splitlines() == [
            "La luna brilla sobre el jardín.",
            "—Estoy feliz —dice la luna.",
            "El gato duerme bajo un árbol.",
        ]
        assert story.text_translated.splitlines()[0] == "The moon shines over the garden."
        assert len(story.text_translated.splitlines()) == 5

    def test_first_line_with_punctuation_is_body(self):
        story = parse_story_block(GOLDEN_DASH)
        assert story.text_original.startswith("La casa es grande y vieja.")

    def test_short_sentence_before_marker_title_stays_in_original(self):
        text = GOLDEN_SLASH.replace("+The Black Cat\n", "Fin del cuento\n+The Black Cat\n")
        story = parse_story_block(text)
        assert story.text_original.endswith("Fin del cuento")

    def test_dialogue_line_never_a_title(self):
        text = GOLDEN_PARENTHESES.replace(
            "El gato duerme bajo un árbol.\n",
            "El gato duerme bajo un árbol.\n—Buenas noches gato\n",
        )
        story = parse_story_block(text)
        assert "—Buenas noches gato" in story.text_original
        assert "The Happy Moon" not in story.text_original

    def test_short_title_without_prose_after_is_not_a_boundary(self):
        # The translated title has too little text after it before the
        # questions marker, so it is read as part of the original story.
        text = GOLDEN_PARENTHESES.replace("The night is calm.\nEveryone is happy.\n", "")
        with pytest.raises(MissingBilingualText):
            parse_story_block(text)

    def test_missing_story_text(self):
        text = f"Story 1: El gato / The Cat\n+Vocabulario / Vocabulary\n{VOCABULARY}"
        with pytest.raises(MissingStoryText) as exc:
            parse_story_block(text)
        assert str(exc.value) == "Story 1: Missing story text section"

    def test_missing_translation(self):
        text = GOLDEN_DASH.replace("+The House\nThe house is big and old.\nIt has a blue window.\n", "")
        with pytest.raises(MissingBilingualText) as exc:
            parse_story_block(text)
        assert "both original and translated versions" in str(exc.value)


class TestQuestions:
    def test_parsed(self):
        story = parse_story_block(GOLDEN_SLASH)
        q1, q2 = story.questions
        assert q1.number == 1
        assert q1.question_original == "De qué color es el gato?"
        assert q1.question_translated == "What color is the cat?"
        assert [o.letter for o in q1.options] == ["a", "b", "c"]
        assert q1.options[1].text_original == "Blanco"
        assert q1.options[1].text_translated == "White"
        assert q2.number == 2

    def test_incomplete_question_dropped(self):
        lines = [line.strip() for line in QUESTIONS.split("\n")]
        complete, _ = parse_questions(lines, 0, 1)
        lines.remove("b) Blanco / White")
        partial, _ = parse_questions(lines, 0, 1)
        assert len(partial) == len(complete) - 1
        assert partial[0].number == 1
        assert partial[0].question_translated == "Where does the cat live?"

    def test_incomplete_question_in_story(self):
        text = GOLDEN_SLASH.replace("b) Blanco / White\n", "").replace("a) Negro / Black\nb) En una casa", "b) En una casa")
        result = parse_stories(text)
        assert result.errors == ()
        story = result.stories[0]
        assert len(story.questions) == 1
        assert story.answers == ("b",)

    def test_no_questions(self):
        text = GOLDEN_DASH.replace(
            QUESTIONS,
            "+Preguntas de Comprensión / Comprehension Questions\n+Respuestas Correctas / Correct Answers\n",
        )
        with pytest.raises(NoQuestionsFound) as exc:
            parse_story_block(text)
        assert str(exc.value) == "Story 3: No comprehension questions found"

    def test_missing_questions_section(self):
        text = GOLDEN_DASH.replace(QUESTIONS, "")
        with pytest.raises(MissingSection) as exc:
            parse_story_block(text)
        assert "Comprehension Questions section" in str(exc.value)


class TestAnswers:
    def test_missing_answer_section(self):
        text = GOLDEN_DASH.replace(
            "+Respuestas Correctas / Correct Answers\na) Negro / Black\nb) En una casa / In a house\n", ""
        )
        result = parse_stories(text)
        assert result.stories == ()
        assert len(result.errors) == 1
        assert result.errors[0].message == (
            "Story 3: Expected 2 answers (found 2 questions), but found 0 answers"
        )

    def test_too_many_answers(self):
        text = GOLDEN_DASH + "c) Gris / Gray\n"
        with pytest.raises(AnswerCountMismatch) as exc:
            parse_story_block(text)
        assert exc.value.questions == 2
        assert exc.value.answers == 3

    def test_only_letter_kept(self):
        story = parse_story_block(GOLDEN_SINGLE.replace("a) Negro / Black\nb) En", "a)\n\nb) En"))
        assert story.answers == ("a", "b")


class TestIllustrationPrompt:
    def test_present(self):
        story = parse_story_block(GOLDEN_SLASH)
        assert story.illustration_prompt == "A black cat looking at the moon\nfrom a window at night."

    def test_absent(self):
        story = parse_story_block(GOLDEN_DASH)
        assert story.illustration_prompt is None

    def test_spanish_marker(self):
        text = GOLDEN_DASH + "+Prompt de Ilustración\nUna casa vieja.\n"
        story = parse_story_block(text)
        assert story.illustration_prompt == "Una casa vieja."


class TestParseStories:
    def test_empty(self):
        result = parse_stories("  \n")
        assert result.stories == ()
        assert result.errors == ()

    def test_failure_isolated(self):
        broken = GOLDEN_PARENTHESES.replace("feliz → /feˈlis/ → feh-LEES → happy\n", "")
        text = "\n".join([GOLDEN_SLASH, broken, GOLDEN_DASH])
        result = parse_stories(text)
        assert [s.number for s in result.stories] == [1, 3]
        assert len(result.errors) == 1
        assert result.errors[0].message.startswith("Story 2:")

    def test_error_line_points_into_input(self):
        broken = GOLDEN_DASH.replace("feliz → /feˈlis/ → feh-LEES → happy\n", "")
        text = GOLDEN_SLASH + "\n" + broken
        result = parse_stories(text)
        lines = text.split("\n")
        header_line = lines.index("Histoire 3: La casa - The House") + 1
        # Reported at the vocabulary marker, one line below the header
        assert result.errors[0].line == header_line + 1

    def test_preamble_reported_as_malformed_title(self):
        result = parse_stories("Mis cuentos\n\n" + GOLDEN_SLASH)
        assert len(result.stories) == 1
        assert len(result.errors) == 1
        assert result.errors[0].line == 1
        assert "Story block 1: Invalid story title format" in result.errors[0].message

    def test_unexpected_exception_contained(self, monkeypatch):
        from bilingual_stories.parsers import story_parser

        def boom(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(story_parser, "parse_vocabulary", boom)
        result = parse_stories(GOLDEN_SLASH)
        assert result.stories == ()
        assert result.errors[0].message == "Failed to parse story"
