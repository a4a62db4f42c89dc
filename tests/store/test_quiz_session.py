"""Tests for quiz answering and scoring."""

import pytest

from studysync.core.quiz_session import QuizSession


class TestQuizSession:
    def test_perfect_score(self, quiz_factory):
        session = QuizSession(quiz_factory(5))
        for i in range(5):
            session.answer(i, 1)

        score = session.finish()

        assert (score.score, score.total, score.percentage) == (5, 5, 100.0)

    def test_partial_score(self, quiz_factory):
        """Score counts correct answers only."""
        session = QuizSession(quiz_factory(4))
        session.answer(0, 1)
        session.answer(1, 0)
        session.answer(2, 1)
        session.answer(3, 3)

        score = session.finish()

        assert score.score == 2
        assert score.percentage == 50.0

    def test_unanswered_count_as_wrong(self, quiz_factory):
        session = QuizSession(quiz_factory(2))
        session.answer(0, 1)

        assert session.all_answered is False
        assert session.score().score == 1

    def test_answer_result(self, quiz_factory):
        session = QuizSession(quiz_factory(1))

        result = session.answer(0, 2)

        assert result.is_correct is False
        assert result.correct_index == 1

    def test_reanswer_replaces(self, quiz_factory):
        session = QuizSession(quiz_factory(1))
        session.answer(0, 0)
        session.answer(0, 1)

        assert session.score().score == 1

    def test_finished_session_is_locked(self, quiz_factory):
        session = QuizSession(quiz_factory(1))
        session.finish()

        with pytest.raises(ValueError, match="already finished"):
            session.answer(0, 1)

    @pytest.mark.parametrize("question, option", [(-1, 0), (3, 0), (0, 4), (0, -1)])
    def test_out_of_range(self, quiz_factory, question, option):
        session = QuizSession(quiz_factory(3))

        with pytest.raises(ValueError, match="out of range"):
            session.answer(question, option)
