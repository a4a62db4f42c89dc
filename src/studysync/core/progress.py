"""Progress computations over the subject tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from studysync.core.models import Subject


@dataclass(frozen=True)
class OverallProgress:
    """Completion across every subject."""

    total: int
    completed: int
    percentage: float


@dataclass(frozen=True)
class NextUp:
    """First sub-topic still pending."""

    subject_id: str
    subject_title: str
    chapter_id: str
    chapter_title: str
    sub_topic_id: str
    sub_topic_title: str


def subject_progress(subject: Subject) -> float:
    """Percentage (0-100) of completed sub-topics in a subject.

    A subject without sub-topics reports 0.
    """
    sub_topics = subject.sub_topics
    if not sub_topics:
        return 0.0
    completed = sum(1 for st in sub_topics if st.completed)
    return completed / len(sub_topics) * 100


def overall_progress(subjects: Iterable[Subject]) -> OverallProgress:
    total = 0
    completed = 0
    for subject in subjects:
        for sub_topic in subject.sub_topics:
            total += 1
            if sub_topic.completed:
                completed += 1

    if total == 0:
        return OverallProgress(total=0, completed=0, percentage=0.0)

    return OverallProgress(
        total=total,
        completed=completed,
        percentage=completed / total * 100,
    )


def next_sub_topic(subjects: Iterable[Subject]) -> NextUp | None:
    """Find the first uncompleted sub-topic in insertion order."""
    for subject in subjects:
        for chapter in subject.chapters:
            for sub_topic in chapter.sub_topics:
                if not sub_topic.completed:
                    return NextUp(
                        subject_id=subject.id,
                        subject_title=subject.title,
                        chapter_id=chapter.id,
                        chapter_title=chapter.title,
                        sub_topic_id=sub_topic.id,
                        sub_topic_title=sub_topic.title,
                    )
    return None
