"""AI study assistant.

Three independent request/response operations:
- summarize: summary + flashcards from study text
- schedule_breaks: break suggestions for a study duration
- generate_quiz: multiple-choice practice quiz on a topic

Each call returns a fully validated result or raises an AIServiceError.
There are no partial results.
"""

from __future__ import annotations

import time
from typing import Any, Protocol, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from studysync.ai.prompts import (
    SYSTEM_PROMPT_BREAKS,
    SYSTEM_PROMPT_QUIZ,
    SYSTEM_PROMPT_SUMMARY,
    USER_PROMPT_BREAKS,
    USER_PROMPT_QUIZ,
    USER_PROMPT_SUMMARY,
)
from studysync.ai.schemas import (
    MAX_QUESTIONS,
    MIN_QUESTIONS,
    BreakSchedule,
    PracticeQuiz,
    SummaryResult,
)
from studysync.llm.client import LLMClient, LLMConfig, LLMError

logger = structlog.get_logger(__name__)

MIN_SUMMARY_CHARS = 50
MIN_TOPIC_CHARS = 3
# Long inputs are cut before prompting
MAX_SUMMARY_CHARS = 15000

ModelT = TypeVar("ModelT", bound=BaseModel)


class AIServiceError(Exception):
    """AI request failed (network, model or validation)."""

    pass


class AIInputError(AIServiceError):
    """Caller input is unusable for the request."""

    pass


class AIResponseError(AIServiceError):
    """Model output does not match the expected result."""

    pass


class StudyAssistant(Protocol):
    """Capability implemented by any hosted-model backend."""

    def summarize(self, text: str) -> SummaryResult: ...

    def schedule_breaks(self, study_duration_minutes: int) -> BreakSchedule: ...

    def generate_quiz(self, topic: str, num_questions: int) -> PracticeQuiz: ...


# =============================================================================
# INPUT CHECKS
# =============================================================================


def _check_summary_text(text: str) -> str:
    stripped = text.strip()
    if len(stripped) < MIN_SUMMARY_CHARS:
        raise AIInputError(
            f"Please enter at least {MIN_SUMMARY_CHARS} characters to generate a summary."
        )
    return stripped


def _check_duration(study_duration_minutes: Any) -> int:
    if isinstance(study_duration_minutes, bool) or not isinstance(study_duration_minutes, int):
        raise AIInputError("Study duration must be a whole number of minutes.")
    if study_duration_minutes < 1:
        raise AIInputError("Study duration must be at least 1 minute.")
    return study_duration_minutes


def _check_quiz_request(topic: str, num_questions: Any) -> tuple[str, int]:
    stripped = topic.strip()
    if len(stripped) < MIN_TOPIC_CHARS:
        raise AIInputError(f"Topic must be at least {MIN_TOPIC_CHARS} characters.")
    if isinstance(num_questions, bool) or not isinstance(num_questions, int):
        raise AIInputError("Number of questions must be a whole number.")
    if not MIN_QUESTIONS <= num_questions <= MAX_QUESTIONS:
        raise AIInputError(
            f"Number of questions must be between {MIN_QUESTIONS} and {MAX_QUESTIONS}."
        )
    return stripped, num_questions


# =============================================================================
# LLM-BACKED ASSISTANT
# =============================================================================


class LLMStudyAssistant:
    """StudyAssistant that prompts a chat model for JSON."""

    def __init__(self, client: LLMClient, temperature: float | None = None):
        self.client = client
        self.temperature = temperature

    def _request(
        self,
        operation: str,
        system_prompt: str,
        user_prompt: str,
        result_type: type[ModelT],
    ) -> ModelT:
        start_time = time.time()
        try:
            raw = self.client.simple_json(
                system_prompt=system_prompt,
                user_message=user_prompt,
                temperature=self.temperature,
            )
        except LLMError as e:
            logger.error("ai_request_failed", operation=operation, error=str(e))
            raise AIServiceError(f"AI request failed: {e}") from e

        try:
            result = result_type.model_validate(raw)
        except ValidationError as e:
            logger.error(
                "ai_response_invalid",
                operation=operation,
                errors=e.error_count(),
            )
            raise AIResponseError(f"AI response has an unexpected shape: {e}") from e

        logger.info(
            "ai_request_completed",
            operation=operation,
            time_ms=int((time.time() - start_time) * 1000),
        )
        return result

    def summarize(self, text: str) -> SummaryResult:
        text = _check_summary_text(text)
        if len(text) > MAX_SUMMARY_CHARS:
            logger.warning("summary_text_truncated", chars=len(text), limit=MAX_SUMMARY_CHARS)
        return self._request(
            "summarize",
            SYSTEM_PROMPT_SUMMARY,
            USER_PROMPT_SUMMARY.format(text=text[:MAX_SUMMARY_CHARS]),
            SummaryResult,
        )

    def schedule_breaks(self, study_duration_minutes: int) -> BreakSchedule:
        minutes = _check_duration(study_duration_minutes)
        return self._request(
            "schedule_breaks",
            SYSTEM_PROMPT_BREAKS,
            USER_PROMPT_BREAKS.format(study_duration_minutes=minutes),
            BreakSchedule,
        )

    def generate_quiz(self, topic: str, num_questions: int) -> PracticeQuiz:
        topic, num_questions = _check_quiz_request(topic, num_questions)
        quiz = self._request(
            "generate_quiz",
            SYSTEM_PROMPT_QUIZ,
            USER_PROMPT_QUIZ.format(topic=topic, num_questions=num_questions),
            PracticeQuiz,
        )

        count = len(quiz.questions)
        if count < num_questions:
            raise AIResponseError(
                f"AI returned {count} questions, expected {num_questions}"
            )
        if count > num_questions:
            logger.warning("quiz_extra_questions_dropped", requested=num_questions, got=count)

        return PracticeQuiz(topic=topic, questions=quiz.questions[:num_questions])


def build_assistant(
    provider: str | None = None,
    model: str | None = None,
) -> LLMStudyAssistant:
    """Create the assistant from application config.

    Args:
        provider: Override LLM provider
        model: Override LLM model
    """
    config = LLMConfig.from_app_config(provider=provider, model=model)
    return LLMStudyAssistant(LLMClient(config=config))
