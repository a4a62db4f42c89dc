"""Result models for the study assistant.

Models accept the camelCase names the prompts ask for (``breakSuggestions``,
``correctAnswerIndex``) as well as the Python field names.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

QUIZ_OPTIONS = 4
MIN_QUESTIONS = 1
MAX_QUESTIONS = 10


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SummaryResult(_WireModel):
    """Summary and flashcards generated from study text."""

    summary: str
    flashcards: str
    progress: str


class BreakSchedule(_WireModel):
    """Suggested breaks for a study session, as sentences."""

    break_suggestions: list[str] = Field(alias="breakSuggestions")

    @field_validator("break_suggestions")
    @classmethod
    def _strip_blank(cls, value: list[str]) -> list[str]:
        return [s.strip() for s in value if s.strip()]


class QuizQuestion(_WireModel):
    """Multiple-choice question with exactly four options."""

    question_text: str = Field(alias="questionText", min_length=1)
    options: list[str] = Field(min_length=QUIZ_OPTIONS, max_length=QUIZ_OPTIONS)
    correct_answer_index: int = Field(alias="correctAnswerIndex", ge=0, le=QUIZ_OPTIONS - 1)
    explanation: str

    @property
    def correct_answer(self) -> str:
        return self.options[self.correct_answer_index]


class PracticeQuiz(_WireModel):
    """Generated practice quiz."""

    topic: str = ""
    questions: list[QuizQuestion]
