"""
models.py
=========
Pydantic models for selector configurations and extracted questions.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class AnswerSelectors(BaseModel):
    """CSS selectors for the answer fragments inside one question block.

    Attributes:
        correct: Selector matching every correct answer
        incorrect: Selector matching every incorrect answer
    """

    model_config = ConfigDict(frozen=True)

    correct: str = Field(default='.correctAnswer', description='Selector for correct answers')
    incorrect: str = Field(default='.answer:not(.correctAnswer)', description='Selector for incorrect answers')

    @field_validator('correct', 'incorrect', mode='before')
    @classmethod
    def _blank_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return value.strip() if isinstance(value, str) else value


class SelectorConfig(BaseModel):
    """Complete set of CSS selectors describing one quiz page layout.

    Accepts both the camelCase keys used in stored JSON files
    (``questionText``) and the Python attribute names. Blank strings are
    treated as "not configured".

    Attributes:
        container: Selector for one question block
        question_text: Selector for the question prose inside a block
        answers: Selectors for correct and incorrect answers
        explanation: Selector for the explanation text
        paragraph: Selector for supplementary body text
        image: Selector for an illustration
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    container: str = Field(default='.question', description='Selector for one question block')
    question_text: str | None = Field(default=None, alias='questionText', description='Question prose selector')
    answers: AnswerSelectors = Field(default_factory=AnswerSelectors, description='Answer selectors')
    explanation: str | None = Field(default=None, description='Explanation selector')
    paragraph: str | None = Field(default=None, description='Supplementary paragraph selector')
    image: str | None = Field(default=None, description='Illustration selector')

    @field_validator('container', mode='before')
    @classmethod
    def _container_default(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields['container'].default
        return value.strip() if isinstance(value, str) else value

    @field_validator('question_text', 'explanation', 'paragraph', 'image', mode='before')
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator('answers', mode='before')
    @classmethod
    def _answers_default(cls, value: Any) -> Any:
        return AnswerSelectors() if value is None else value

    def to_dict(self) -> dict[str, Any]:
        """Return the config in its stored JSON shape (camelCase, unset fields omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Answer(BaseModel):
    """A single labelled answer of a question."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    label: str = Field(description='Letter label (A, B, C, ...)')
    text: str = Field(description='Normalized answer markup')
    is_correct: bool = Field(alias='isCorrect', description='Whether the answer is correct')


class Question(BaseModel):
    """One extracted question, built once per matched container.

    Attributes:
        id: 1-based position within one extraction call
        question_number: Human readable ordinal label
        question_text: Sanitized question markup
        answers: Correct answers first, then incorrect ones
        explanation: Sanitized explanation, if any
        paragraph: Sanitized supplementary paragraph, if any
        image: Data URI or address of the illustration, if any
        has_multiple_correct: True if the block had more than one correct match
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    question_number: str = Field(alias='questionNumber')
    question_text: str = Field(alias='questionText')
    answers: tuple[Answer, ...] = ()
    explanation: str | None = None
    paragraph: str | None = None
    image: str | None = None
    has_multiple_correct: bool = Field(default=False, alias='hasMultipleCorrect')

    @property
    def correct_answers(self) -> list[Answer]:
        """Answers flagged as correct, in label order."""
        return [answer for answer in self.answers if answer.is_correct]

    def to_export(self) -> dict[str, Any]:
        """Flatten the question into the import/export JSON shape.

        Returns:
            ``{text, explanation, paragraph: {text}, image, answers: [{text, correct}]}``
        """
        return {
            'text': self.question_text,
            'explanation': self.explanation,
            'paragraph': {'text': self.paragraph},
            'image': self.image,
            'answers': [{'text': answer.text, 'correct': answer.is_correct} for answer in self.answers],
        }
