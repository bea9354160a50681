from __future__ import annotations

from dataclasses import asdict, dataclass

ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class VocabularyWord:
    word: str
    ipa: str
    pronunciation: str
    translation: str


@dataclass(frozen=True)
class QuestionOption:
    letter: str  # a | b | c
    text_original: str
    text_translated: str


@dataclass(frozen=True)
class Question:
    number: int  # 1-based, assigned by the parser
    question_original: str
    question_translated: str
    options: tuple[QuestionOption, ...]


@dataclass(frozen=True)
class Story:
    number: int
    title_original: str
    title_translated: str
    vocabulary: tuple[VocabularyWord, ...]
    text_original: str
    text_translated: str
    questions: tuple[Question, ...]
    answers: tuple[str, ...]
    illustration_prompt: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ValidationError:
    message: str
    severity: str = ERROR  # error | warning
    line: int | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR

    def to_dict(self) -> dict:
        return {"line": self.line, "message": self.message, "severity": self.severity}


ParseError = ValidationError


@dataclass(frozen=True)
class ParseResult:
    stories: tuple[Story, ...] = ()
    errors: tuple[ValidationError, ...] = ()

    @property
    def errors_only(self) -> list[ValidationError]:
        return [e for e in self.errors if e.severity == ERROR]

    @property
    def warnings_only(self) -> list[ValidationError]:
        return [e for e in self.errors if e.severity == WARNING]

    @property
    def is_valid(self) -> bool:
        return bool(self.stories) and not self.errors_only

    def to_dict(self) -> dict:
        return {
            "stories": [s.to_dict() for s in self.stories],
            "errors": [e.to_dict() for e in self.errors],
            "is_valid": self.is_valid,
        }


def story_from_dict(data: dict) -> Story:
    """Build a Story from a plain mapping, e.g. a JSON request body.

    No parse-time checks run here: counts are taken as given, so the
    result may violate the invariants the validator looks for.
    Raises KeyError / TypeError / ValueError on structurally unusable input.
    """
    questions = []
    for i, q in enumerate(data.get("questions", []), 1):
        options = tuple(
            QuestionOption(
                letter=str(o["letter"]),
                text_original=str(o["text_original"]),
                text_translated=str(o["text_translated"]),
            )
            for o in q.get("options", [])
        )
        questions.append(Question(
            number=int(q.get("number", i)),
            question_original=str(q["question_original"]),
            question_translated=str(q["question_translated"]),
            options=options,
        ))

    vocabulary = tuple(
        VocabularyWord(
            word=str(v["word"]),
            ipa=str(v.get("ipa", "")),
            pronunciation=str(v.get("pronunciation", "")),
            translation=str(v.get("translation", "")),
        )
        for v in data.get("vocabulary", [])
    )

    prompt = data.get("illustration_prompt")
    return Story(
        number=int(data["number"]),
        title_original=str(data.get("title_original", "")),
        title_translated=str(data.get("title_translated", data.get("title_original", ""))),
        vocabulary=vocabulary,
        text_original=str(data.get("text_original", "")),
        text_translated=str(data.get("text_translated", "")),
        questions=tuple(questions),
        answers=tuple(str(a) for a in data.get("answers", [])),
        illustration_prompt=None if prompt is None else str(prompt),
    )
