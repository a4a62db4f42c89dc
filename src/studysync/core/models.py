"""Study data model.

The subject tree is four levels deep and strictly owned top-down:

    Subject -> Chapter -> SubTopic
                       -> Reference

All entities are frozen dataclasses and child sequences are tuples, so a
tree value never changes once built. Mutations produce new trees
(see StudyDataStore).

Partial updates go through explicit update-request types (SubjectUpdate,
ChapterUpdate, ...). A field left as None keeps its current value.

JSON mapping uses camelCase keys (subTopics, references) to stay
compatible with records written by the web client.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

# =============================================================================
# ENUMS
# =============================================================================


class Priority(str, Enum):
    """Priority of a sub-topic."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReferenceType(str, Enum):
    """Kind of reference attached to a chapter."""

    LINK = "link"
    NOTE = "note"


class StudyDataFormatError(ValueError):
    """Serialized study data does not have the expected shape."""

    pass


def new_id() -> str:
    """Generate a fresh entity id."""
    return str(uuid.uuid4())


# =============================================================================
# FIELD HELPERS
# =============================================================================


def _require(data: Any, key: str, kind: type, where: str) -> Any:
    if not isinstance(data, dict):
        raise StudyDataFormatError(f"{where}: expected object, got {type(data).__name__}")
    if key not in data:
        raise StudyDataFormatError(f"{where}: missing '{key}'")
    value = data[key]
    if not isinstance(value, kind):
        raise StudyDataFormatError(f"{where}: '{key}' has invalid type {type(value).__name__}")
    return value


def _enum(enum_cls: type[Enum], value: Any, where: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError as e:
        raise StudyDataFormatError(f"{where}: {e}") from e


# =============================================================================
# ENTITIES
# =============================================================================


@dataclass(frozen=True)
class SubTopic:
    """A trackable unit of study within a chapter."""

    id: str
    title: str
    completed: bool = False
    priority: Priority = Priority.MEDIUM

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "priority": self.priority.value,
        }

    @classmethod
    def from_dict(cls, data: Any) -> SubTopic:
        where = "subTopic"
        return cls(
            id=_require(data, "id", str, where),
            title=_require(data, "title", str, where),
            completed=_require(data, "completed", bool, where),
            priority=_enum(Priority, _require(data, "priority", str, where), where),
        )


@dataclass(frozen=True)
class Reference:
    """A link or a note attached to a chapter."""

    id: str
    title: str
    type: ReferenceType
    content: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type.value,
            "content": self.content,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Reference:
        where = "reference"
        return cls(
            id=_require(data, "id", str, where),
            title=_require(data, "title", str, where),
            type=_enum(ReferenceType, _require(data, "type", str, where), where),
            content=_require(data, "content", str, where),
        )


@dataclass(frozen=True)
class Chapter:
    """A subdivision of a subject."""

    id: str
    title: str
    sub_topics: tuple[SubTopic, ...] = field(default_factory=tuple)
    references: tuple[Reference, ...] = field(default_factory=tuple)

    def find_sub_topic(self, sub_topic_id: str) -> SubTopic | None:
        """Get sub-topic by ID."""
        for sub_topic in self.sub_topics:
            if sub_topic.id == sub_topic_id:
                return sub_topic
        return None

    def find_reference(self, reference_id: str) -> Reference | None:
        """Get reference by ID."""
        for reference in self.references:
            if reference.id == reference_id:
                return reference
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "subTopics": [st.to_dict() for st in self.sub_topics],
            "references": [r.to_dict() for r in self.references],
        }

    @classmethod
    def from_dict(cls, data: Any) -> Chapter:
        where = "chapter"
        return cls(
            id=_require(data, "id", str, where),
            title=_require(data, "title", str, where),
            sub_topics=tuple(
                SubTopic.from_dict(st) for st in _require(data, "subTopics", list, where)
            ),
            references=tuple(
                Reference.from_dict(r) for r in _require(data, "references", list, where)
            ),
        )


@dataclass(frozen=True)
class Subject:
    """Top-level study area, e.g. a course."""

    id: str
    title: str
    color: str
    chapters: tuple[Chapter, ...] = field(default_factory=tuple)

    def find_chapter(self, chapter_id: str) -> Chapter | None:
        """Get chapter by ID."""
        for chapter in self.chapters:
            if chapter.id == chapter_id:
                return chapter
        return None

    @property
    def sub_topics(self) -> list[SubTopic]:
        """All sub-topics across chapters, in order."""
        return [st for chapter in self.chapters for st in chapter.sub_topics]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "color": self.color,
            "chapters": [c.to_dict() for c in self.chapters],
        }

    @classmethod
    def from_dict(cls, data: Any) -> Subject:
        where = "subject"
        return cls(
            id=_require(data, "id", str, where),
            title=_require(data, "title", str, where),
            color=_require(data, "color", str, where),
            chapters=tuple(
                Chapter.from_dict(c) for c in _require(data, "chapters", list, where)
            ),
        )


# =============================================================================
# STUDY DATA RECORD
# =============================================================================


def subjects_to_record(subjects: tuple[Subject, ...] | list[Subject]) -> dict[str, Any]:
    """Build the durable record ``{"subjects": [...]}``."""
    return {"subjects": [s.to_dict() for s in subjects]}


def subjects_from_record(data: Any) -> tuple[Subject, ...]:
    """Parse the durable record.

    Raises:
        StudyDataFormatError: If the record does not have the expected shape
    """
    raw_subjects = _require(data, "subjects", list, "record")
    return tuple(Subject.from_dict(s) for s in raw_subjects)


# =============================================================================
# UPDATE REQUESTS
# =============================================================================


def _changes(update: Any) -> dict[str, Any]:
    return {
        name: value
        for name, value in vars(update).items()
        if value is not None
    }


@dataclass(frozen=True)
class SubjectUpdate:
    """Partial update for a subject."""

    title: str | None = None
    color: str | None = None

    def apply(self, subject: Subject) -> Subject:
        return replace(subject, **_changes(self))


@dataclass(frozen=True)
class ChapterUpdate:
    """Partial update for a chapter."""

    title: str | None = None

    def apply(self, chapter: Chapter) -> Chapter:
        return replace(chapter, **_changes(self))


@dataclass(frozen=True)
class SubTopicUpdate:
    """Partial update for a sub-topic.

    Most commonly used to flip ``completed``.
    """

    title: str | None = None
    completed: bool | None = None
    priority: Priority | None = None

    def apply(self, sub_topic: SubTopic) -> SubTopic:
        changes = _changes(self)
        if "priority" in changes:
            changes["priority"] = Priority(changes["priority"])
        return replace(sub_topic, **changes)


@dataclass(frozen=True)
class ReferenceUpdate:
    """Partial update for a reference."""

    title: str | None = None
    type: ReferenceType | None = None
    content: str | None = None

    def apply(self, reference: Reference) -> Reference:
        changes = _changes(self)
        if "type" in changes:
            changes["type"] = ReferenceType(changes["type"])
        return replace(reference, **changes)
