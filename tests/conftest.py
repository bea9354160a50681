"""Shared test fixtures."""
from __future__ import annotations

import pytest

from bilingual_stories.models import Question, QuestionOption, Story, VocabularyWord

from story_samples import GOLDEN_ALL


@pytest.fixture
def golden_text():
    return GOLDEN_ALL


@pytest.fixture
def sample_vocabulary():
    return tuple(
        VocabularyWord(f"word{i}", f"ipa{i}", f"pron{i}", f"translation{i}")
        for i in range(10)
    )


def _options() -> tuple[QuestionOption, ...]:
    return (
        QuestionOption("a", "Negro", "Black"),
        QuestionOption("b", "Blanco", "White"),
        QuestionOption("c", "Gris", "Gray"),
    )


@pytest.fixture
def make_story(sample_vocabulary):
    """Factory for hand-built stories that bypass the parser."""
    def _make(number: int = 1, **overrides) -> Story:
        fields = dict(
            number=number,
            title_original="El gato",
            title_translated="The Cat",
            vocabulary=sample_vocabulary,
            text_original="Había una vez un gato.",
            text_translated="Once upon a time there was a cat.",
            questions=(Question(1, "¿De qué color es el gato?", "What color is the cat?", _options()),),
            answers=("a",),
            illustration_prompt=None,
        )
        fields.update(overrides)
        return Story(**fields)
    return _make
