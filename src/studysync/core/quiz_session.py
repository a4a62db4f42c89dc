"""Answer tracking and scoring for a generated practice quiz."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from studysync.ai.schemas import PracticeQuiz


@dataclass(frozen=True)
class AnswerResult:
    """Outcome of one answered question."""

    selected_index: int
    correct_index: int

    @property
    def is_correct(self) -> bool:
        return self.selected_index == self.correct_index


@dataclass(frozen=True)
class QuizScore:
    score: int
    total: int
    percentage: float


class QuizSession:
    """One pass through a quiz.

    Each question holds at most one answer; answering again replaces it
    until the session is finished.
    """

    def __init__(self, quiz: PracticeQuiz):
        self.quiz = quiz
        self.results: list[AnswerResult | None] = [None] * len(quiz.questions)
        self.finished = False

    def answer(self, question_index: int, selected_index: int) -> AnswerResult:
        """Record the selected option for a question.

        Raises:
            ValueError: If the session is finished or an index is out of range
        """
        if self.finished:
            raise ValueError("Quiz already finished")
        if not 0 <= question_index < len(self.quiz.questions):
            raise ValueError(f"Question index out of range: {question_index}")

        question = self.quiz.questions[question_index]
        if not 0 <= selected_index < len(question.options):
            raise ValueError(f"Option index out of range: {selected_index}")

        result = AnswerResult(
            selected_index=selected_index,
            correct_index=question.correct_answer_index,
        )
        self.results[question_index] = result
        return result

    @property
    def all_answered(self) -> bool:
        return all(r is not None for r in self.results)

    def finish(self) -> QuizScore:
        """Lock the answers and return the score."""
        self.finished = True
        return self.score()

    def score(self) -> QuizScore:
        total = len(self.quiz.questions)
        correct = sum(1 for r in self.results if r is not None and r.is_correct)
        percentage = correct / total * 100 if total > 0 else 0.0
        return QuizScore(score=correct, total=total, percentage=percentage)
