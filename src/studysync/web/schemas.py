"""Pydantic schemas for the Web API.

Request bodies for the subject tree and AI endpoints, and response models
built from the core dataclasses.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from studysync.core.models import Chapter, Priority, Reference, ReferenceType, Subject, SubTopic
from studysync.core.progress import OverallProgress, subject_progress
from studysync.utils.validators import (
    DEFAULT_SUBJECT_COLOR,
    MIN_TITLE_CHARS,
    validate_color,
    validate_title,
)


class _TitledBody(BaseModel):
    @field_validator("title", check_fields=False)
    @classmethod
    def _check_title(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return validate_title(value)


# =============================================================================
# SUBJECT SCHEMAS
# =============================================================================


class SubjectCreate(_TitledBody):
    """Request body for creating a subject."""

    title: str = Field(..., min_length=MIN_TITLE_CHARS, max_length=200)
    color: str = Field(default=DEFAULT_SUBJECT_COLOR)

    @field_validator("color")
    @classmethod
    def _check_color(cls, value: str) -> str:
        return validate_color(value)


class SubjectPatch(_TitledBody):
    """Partial update for a subject. Omitted fields are unchanged."""

    title: str | None = Field(default=None, max_length=200)
    color: str | None = None

    @field_validator("color")
    @classmethod
    def _check_color(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return validate_color(value)


class SubTopicResponse(BaseModel):
    id: str
    title: str
    completed: bool
    priority: Priority

    @classmethod
    def from_entity(cls, sub_topic: SubTopic) -> SubTopicResponse:
        return cls(
            id=sub_topic.id,
            title=sub_topic.title,
            completed=sub_topic.completed,
            priority=sub_topic.priority,
        )


class ReferenceResponse(BaseModel):
    id: str
    title: str
    type: ReferenceType
    content: str

    @classmethod
    def from_entity(cls, reference: Reference) -> ReferenceResponse:
        return cls(
            id=reference.id,
            title=reference.title,
            type=reference.type,
            content=reference.content,
        )


class ChapterResponse(BaseModel):
    id: str
    title: str
    sub_topics: list[SubTopicResponse]
    references: list[ReferenceResponse]

    @classmethod
    def from_entity(cls, chapter: Chapter) -> ChapterResponse:
        return cls(
            id=chapter.id,
            title=chapter.title,
            sub_topics=[SubTopicResponse.from_entity(st) for st in chapter.sub_topics],
            references=[ReferenceResponse.from_entity(r) for r in chapter.references],
        )


class SubjectResponse(BaseModel):
    """Response for a subject, with its completion percentage."""

    id: str
    title: str
    color: str
    progress: float
    chapters: list[ChapterResponse]

    @classmethod
    def from_entity(cls, subject: Subject) -> SubjectResponse:
        return cls(
            id=subject.id,
            title=subject.title,
            color=subject.color,
            progress=subject_progress(subject),
            chapters=[ChapterResponse.from_entity(c) for c in subject.chapters],
        )


class OverallProgressResponse(BaseModel):
    total: int
    completed: int
    percentage: float

    @classmethod
    def from_progress(cls, progress: OverallProgress) -> OverallProgressResponse:
        return cls(
            total=progress.total,
            completed=progress.completed,
            percentage=progress.percentage,
        )


class SubjectListResponse(BaseModel):
    """Response for list of subjects."""

    subjects: list[SubjectResponse]
    count: int
    overall: OverallProgressResponse


# =============================================================================
# CHAPTER / SUB-TOPIC / REFERENCE SCHEMAS
# =============================================================================


class ChapterCreate(_TitledBody):
    title: str = Field(..., min_length=MIN_TITLE_CHARS, max_length=200)


class ChapterPatch(_TitledBody):
    title: str | None = Field(default=None, max_length=200)


class SubTopicCreate(_TitledBody):
    title: str = Field(..., min_length=MIN_TITLE_CHARS, max_length=200)
    priority: Priority = Priority.MEDIUM


class SubTopicPatch(_TitledBody):
    """Partial update for a sub-topic, e.g. ``{"completed": true}``."""

    title: str | None = Field(default=None, max_length=200)
    completed: bool | None = None
    priority: Priority | None = None


class ReferenceCreate(_TitledBody):
    title: str = Field(..., min_length=MIN_TITLE_CHARS, max_length=200)
    type: ReferenceType = ReferenceType.LINK
    content: str = Field(..., min_length=2)


class ReferencePatch(_TitledBody):
    title: str | None = Field(default=None, max_length=200)
    type: ReferenceType | None = None
    content: str | None = Field(default=None, min_length=2)


# =============================================================================
# AI SCHEMAS
# =============================================================================


class SummaryRequest(BaseModel):
    """Request body for summary + flashcards."""

    text: str = Field(..., min_length=50)


class BreaksRequest(BaseModel):
    """Request body for break scheduling."""

    study_duration_minutes: int = Field(..., ge=10, le=360)


class QuizRequest(BaseModel):
    """Request body for a practice quiz."""

    topic: str = Field(..., min_length=3, max_length=200)
    num_questions: int = Field(default=5, ge=1, le=10)


# =============================================================================
# HEALTH SCHEMA
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
