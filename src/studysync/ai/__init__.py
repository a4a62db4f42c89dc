"""AI study assistant boundary."""

from studysync.ai.assistant import (
    AIInputError,
    AIResponseError,
    AIServiceError,
    LLMStudyAssistant,
    StudyAssistant,
    build_assistant,
)
from studysync.ai.schemas import (
    BreakSchedule,
    PracticeQuiz,
    QuizQuestion,
    SummaryResult,
)

__all__ = [
    "AIInputError",
    "AIResponseError",
    "AIServiceError",
    "LLMStudyAssistant",
    "StudyAssistant",
    "build_assistant",
    "BreakSchedule",
    "PracticeQuiz",
    "QuizQuestion",
    "SummaryResult",
]
