"""Shared fixtures for StudySync tests.

Tests are organized by area:
- store/: data model, store, progress, storage, timer, quiz scoring
- ai/: LLM client, study assistant, app config
- cli/: typer commands
- web/: FastAPI routes
"""

from unittest.mock import MagicMock

import pytest

from studysync.ai.schemas import BreakSchedule, PracticeQuiz, QuizQuestion, SummaryResult
from studysync.config.app_config import clear_config_cache
from studysync.core.models import Priority, ReferenceType
from studysync.core.storage import MemoryStorage
from studysync.core.study_store import StudyDataStore


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run every test against built-in config defaults."""
    monkeypatch.setenv("STUDYSYNC_CONFIG", str(tmp_path / "no_config.yaml"))
    monkeypatch.delenv("STUDYSYNC_DATA_DIR", raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def memory_storage() -> MemoryStorage:
    """Empty in-memory storage backend."""
    return MemoryStorage()


@pytest.fixture
def store(memory_storage) -> StudyDataStore:
    """Loaded store over empty memory storage."""
    store = StudyDataStore(memory_storage)
    store.load()
    return store


@pytest.fixture
def seeded_store(store) -> StudyDataStore:
    """Store with one subject, one chapter, four sub-topics and a reference.

    Mathematics
      Algebra
        Linear equations (high), Quadratics, Polynomials, Inequalities (low)
        [link] Khan Academy
    """
    subject = store.add_subject("Mathematics", "#3b82f6")
    chapter = store.add_chapter(subject.id, "Algebra")
    store.add_sub_topic(subject.id, chapter.id, "Linear equations", Priority.HIGH)
    store.add_sub_topic(subject.id, chapter.id, "Quadratics")
    store.add_sub_topic(subject.id, chapter.id, "Polynomials")
    store.add_sub_topic(subject.id, chapter.id, "Inequalities", Priority.LOW)
    store.add_reference(
        subject.id,
        chapter.id,
        "Khan Academy",
        ReferenceType.LINK,
        "https://www.khanacademy.org/math/algebra",
    )
    return store


def make_quiz(num_questions: int, topic: str = "Photosynthesis") -> PracticeQuiz:
    """Quiz whose correct answer is always option 1."""
    return PracticeQuiz(
        topic=topic,
        questions=[
            QuizQuestion(
                question_text=f"Question {i + 1} about {topic}?",
                options=["A", "B", "C", "D"],
                correct_answer_index=1,
                explanation=f"B is right for question {i + 1}.",
            )
            for i in range(num_questions)
        ],
    )


@pytest.fixture
def mock_assistant():
    """Study assistant returning fixed results without calling an LLM."""
    assistant = MagicMock()
    assistant.client.is_available.return_value = True
    assistant.client.config.provider = "googleai"

    assistant.summarize.return_value = SummaryResult(
        summary="Plants turn light into chemical energy.",
        flashcards="Q: What do plants produce? | A: Glucose and oxygen",
        progress="Generated a summary and one flashcard.",
    )
    assistant.schedule_breaks.return_value = BreakSchedule(
        break_suggestions=[
            "Take a 5-minute break at the 25-minute mark.",
            "Take a 10-minute break at the 50-minute mark.",
        ]
    )
    assistant.generate_quiz.side_effect = lambda topic, n: make_quiz(n, topic)
    return assistant


@pytest.fixture
def quiz_factory():
    """Build a PracticeQuiz with N questions (correct answer: option 1)."""
    return make_quiz
