"""Tests for the LLM-backed study assistant."""

from unittest.mock import MagicMock, patch

import pytest

from studysync.ai.assistant import (
    AIInputError,
    AIResponseError,
    AIServiceError,
    MAX_SUMMARY_CHARS,
    LLMStudyAssistant,
    build_assistant,
)
from studysync.llm.client import LLMConnectionError, LLMResponseError

LONG_TEXT = (
    "Photosynthesis is the process by which green plants use sunlight, water and "
    "carbon dioxide to produce glucose and oxygen."
)


def _question(i: int) -> dict:
    return {
        "questionText": f"What is step {i} of photosynthesis?",
        "options": ["Light absorption", "Respiration", "Digestion", "Fermentation"],
        "correctAnswerIndex": 0,
        "explanation": "Chlorophyll absorbs light first.",
    }


@pytest.fixture
def mock_llm_client():
    """Mock LLM client; tests set simple_json's return value."""
    client = MagicMock()
    client.config.provider = "googleai"
    client.is_available.return_value = True
    return client


@pytest.fixture
def assistant(mock_llm_client) -> LLMStudyAssistant:
    return LLMStudyAssistant(mock_llm_client)


class TestSummarize:
    def test_summary_result(self, assistant, mock_llm_client):
        mock_llm_client.simple_json.return_value = {
            "summary": "Plants make glucose from light.",
            "flashcards": "Q: Inputs? | A: Light, water, CO2",
            "progress": "Generated a summary and one flashcard.",
        }

        result = assistant.summarize(LONG_TEXT)

        assert result.summary == "Plants make glucose from light."
        assert "Q: Inputs?" in result.flashcards
        user_message = mock_llm_client.simple_json.call_args.kwargs["user_message"]
        assert LONG_TEXT in user_message

    def test_short_text_rejected_without_calling_model(self, assistant, mock_llm_client):
        with pytest.raises(AIInputError, match="at least 50 characters"):
            assistant.summarize("   too short   ")

        mock_llm_client.simple_json.assert_not_called()

    def test_long_text_cut_and_logged(self, assistant, mock_llm_client):
        mock_llm_client.simple_json.return_value = {
            "summary": "s",
            "flashcards": "f",
            "progress": "p",
        }
        text = "a" * MAX_SUMMARY_CHARS + "TAILMARK"

        with patch("studysync.ai.assistant.logger") as mock_logger:
            assistant.summarize(text)

        user_message = mock_llm_client.simple_json.call_args.kwargs["user_message"]
        assert "a" * MAX_SUMMARY_CHARS in user_message
        assert "TAILMARK" not in user_message
        mock_logger.warning.assert_called_once_with(
            "summary_text_truncated", chars=len(text), limit=MAX_SUMMARY_CHARS
        )

    def test_missing_field_is_response_error(self, assistant, mock_llm_client):
        """A result without flashcards is a wrong shape."""
        mock_llm_client.simple_json.return_value = {"summary": "x", "progress": "y"}

        with pytest.raises(AIResponseError):
            assistant.summarize(LONG_TEXT)


class TestScheduleBreaks:
    def test_break_suggestions(self, assistant, mock_llm_client):
        """camelCase wire name maps to break_suggestions."""
        mock_llm_client.simple_json.return_value = {
            "breakSuggestions": [
                "Take a 5-minute break at the 25-minute mark.",
                "  ",
                "Take a 10-minute break at the 50-minute mark.",
            ]
        }

        schedule = assistant.schedule_breaks(60)

        assert schedule.break_suggestions == [
            "Take a 5-minute break at the 25-minute mark.",
            "Take a 10-minute break at the 50-minute mark.",
        ]
        assert "60 minutes" in mock_llm_client.simple_json.call_args.kwargs["user_message"]

    def test_empty_list_allowed(self, assistant, mock_llm_client):
        mock_llm_client.simple_json.return_value = {"breakSuggestions": []}

        assert assistant.schedule_breaks(15).break_suggestions == []

    @pytest.mark.parametrize("minutes", [0, -5, 12.5, True, "60"])
    def test_invalid_duration(self, assistant, minutes):
        with pytest.raises(AIInputError):
            assistant.schedule_breaks(minutes)

    def test_wrong_shape(self, assistant, mock_llm_client):
        mock_llm_client.simple_json.return_value = {"breakSuggestions": "take a break"}

        with pytest.raises(AIResponseError):
            assistant.schedule_breaks(60)


class TestGenerateQuiz:
    def test_photosynthesis_five_questions(self, assistant, mock_llm_client):
        """Exactly the requested number of questions, each with four options."""
        mock_llm_client.simple_json.return_value = {
            "questions": [_question(i) for i in range(5)]
        }

        quiz = assistant.generate_quiz("Photosynthesis", 5)

        assert quiz.topic == "Photosynthesis"
        assert len(quiz.questions) == 5
        for q in quiz.questions:
            assert len(q.options) == 4
            assert 0 <= q.correct_answer_index <= 3
        assert quiz.questions[0].correct_answer == "Light absorption"

    def test_too_few_questions(self, assistant, mock_llm_client):
        mock_llm_client.simple_json.return_value = {
            "questions": [_question(i) for i in range(3)]
        }

        with pytest.raises(AIResponseError, match="expected 5"):
            assistant.generate_quiz("Photosynthesis", 5)

    def test_extra_questions_truncated(self, assistant, mock_llm_client):
        mock_llm_client.simple_json.return_value = {
            "questions": [_question(i) for i in range(7)]
        }

        quiz = assistant.generate_quiz("Photosynthesis", 5)

        assert len(quiz.questions) == 5

    @pytest.mark.parametrize(
        "bad_field, value",
        [
            ("options", ["A", "B", "C"]),
            ("correctAnswerIndex", 4),
            ("correctAnswerIndex", -1),
            ("questionText", ""),
        ],
    )
    def test_malformed_question(self, assistant, mock_llm_client, bad_field, value):
        question = _question(0)
        question[bad_field] = value
        mock_llm_client.simple_json.return_value = {"questions": [question]}

        with pytest.raises(AIResponseError):
            assistant.generate_quiz("Photosynthesis", 1)

    @pytest.mark.parametrize("topic, n", [("ab", 5), ("   ", 5), ("Photosynthesis", 0), ("Photosynthesis", 11)])
    def test_invalid_request(self, assistant, mock_llm_client, topic, n):
        with pytest.raises(AIInputError):
            assistant.generate_quiz(topic, n)

        mock_llm_client.simple_json.assert_not_called()


class TestFailures:
    def test_connection_error_wrapped(self, assistant, mock_llm_client):
        """Client errors surface as AIServiceError, not LLMError."""
        mock_llm_client.simple_json.side_effect = LLMConnectionError("Could not connect")

        with pytest.raises(AIServiceError, match="Could not connect"):
            assistant.schedule_breaks(60)

    def test_invalid_json_wrapped(self, assistant, mock_llm_client):
        mock_llm_client.simple_json.side_effect = LLMResponseError("Could not obtain valid JSON")

        with pytest.raises(AIServiceError):
            assistant.generate_quiz("Photosynthesis", 3)


class TestBuildAssistant:
    def test_build_from_config(self):
        with patch("studysync.llm.client.OpenAI"):
            assistant = build_assistant(provider="lmstudio", model="local-model")

        assert assistant.client.config.provider == "lmstudio"
        assert assistant.client.config.model == "local-model"
