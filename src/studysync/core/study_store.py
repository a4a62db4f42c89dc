"""Study data store.

Responsibilities:
- Own the subject tree (the only component that mutates it)
- Load the tree once from durable storage, failing soft on bad data
- Persist the whole tree after every successful mutation

Every mutation builds a new immutable tree and rebinds ``subjects``; a
tuple obtained earlier stays a valid snapshot.

Update/delete on an unknown id is a silent no-op: nothing changes, nothing
is written, nothing is raised. The return value (False) lets callers detect
it if they care.

Durable record (one key, ``studySyncData``):
    {"subjects": [Subject, ...]}
"""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Iterable, TypeVar

import structlog

from studysync.core.models import (
    Chapter,
    ChapterUpdate,
    Priority,
    Reference,
    ReferenceType,
    ReferenceUpdate,
    Subject,
    SubjectUpdate,
    SubTopic,
    SubTopicUpdate,
    new_id,
    subjects_from_record,
    subjects_to_record,
)
from studysync.core.storage import JsonFileStorage, StorageBackend

logger = structlog.get_logger(__name__)

STORAGE_KEY = "studySyncData"

T = TypeVar("T", Subject, Chapter, SubTopic, Reference)


# =============================================================================
# TREE HELPERS
# =============================================================================


def _update_in(
    items: tuple[T, ...],
    item_id: str,
    fn: Callable[[T], T | None],
) -> tuple[T, ...] | None:
    """Replace the item with ``fn(item)``. None if not found or fn gave None."""
    for index, item in enumerate(items):
        if item.id == item_id:
            updated = fn(item)
            if updated is None:
                return None
            return items[:index] + (updated,) + items[index + 1:]
    return None


def _remove_from(items: tuple[T, ...], item_id: str) -> tuple[T, ...] | None:
    """Drop the item by id. None if not found."""
    kept = tuple(item for item in items if item.id != item_id)
    if len(kept) == len(items):
        return None
    return kept


def _with(entity: Any, field_name: str, value: tuple | None) -> Any:
    if value is None:
        return None
    return replace(entity, **{field_name: value})


# =============================================================================
# STORE
# =============================================================================


class StudyDataStore:
    """Owner of the subject tree with CRUD operations.

    Construct explicitly and pass to consumers; call ``load()`` once before
    use. Mutations made before ``load()`` are kept in memory but not
    persisted, so an empty default never overwrites durable data.
    """

    def __init__(self, storage: StorageBackend, key: str = STORAGE_KEY):
        self._storage = storage
        self.key = key
        self._subjects: tuple[Subject, ...] = ()
        self._is_loaded = False

    @property
    def subjects(self) -> tuple[Subject, ...]:
        """Current tree snapshot."""
        return self._subjects

    @property
    def is_loaded(self) -> bool:
        """True once the initial load finished (success or fallback)."""
        return self._is_loaded

    # -------------------------------------------------------------------------
    # Load / persist
    # -------------------------------------------------------------------------

    def load(self) -> None:
        """Read the durable record.

        Absent record -> empty. Unparseable or malformed record -> logged,
        empty. Never raises for bad data.
        """
        try:
            raw = self._storage.read(self.key)
            if raw:
                self._subjects = subjects_from_record(json.loads(raw))
            else:
                self._subjects = ()
        except (ValueError, OSError, RecursionError) as e:
            # JSONDecodeError and StudyDataFormatError are ValueErrors; deep nesting recurses
            logger.error("study_data_load_failed", key=self.key, error=str(e))
            self._subjects = ()
        finally:
            self._is_loaded = True

        logger.debug("study_data_loaded", key=self.key, subjects=len(self._subjects))

    def _persist(self) -> None:
        if not self._is_loaded:
            logger.debug("study_data_save_skipped", key=self.key, reason="not_loaded")
            return

        try:
            data = json.dumps(subjects_to_record(self._subjects), indent=2, ensure_ascii=False)
            self._storage.write(self.key, data)
        except (OSError, TypeError, ValueError) as e:
            # In-memory state stays authoritative for the session
            logger.error("study_data_save_failed", key=self.key, error=str(e))
            return

        logger.debug("study_data_saved", key=self.key, subjects=len(self._subjects))

    def _commit(self, subjects: tuple[Subject, ...], event: str, **context: Any) -> None:
        self._subjects = subjects
        logger.debug(event, **context)
        self._persist()

    def replace_subjects(self, subjects: Iterable[Subject]) -> None:
        """Replace the whole collection."""
        self._commit(tuple(subjects), "subjects_replaced")

    # -------------------------------------------------------------------------
    # Subjects
    # -------------------------------------------------------------------------

    def add_subject(self, title: str, color: str) -> Subject:
        subject = Subject(id=new_id(), title=title, color=color)
        self._commit(self._subjects + (subject,), "subject_added", subject_id=subject.id)
        return subject

    def update_subject(self, subject_id: str, update: SubjectUpdate) -> bool:
        subjects = _update_in(self._subjects, subject_id, update.apply)
        if subjects is None:
            return False
        self._commit(subjects, "subject_updated", subject_id=subject_id)
        return True

    def delete_subject(self, subject_id: str) -> bool:
        """Delete a subject and everything under it."""
        subjects = _remove_from(self._subjects, subject_id)
        if subjects is None:
            return False
        self._commit(subjects, "subject_deleted", subject_id=subject_id)
        return True

    def get_subject(self, subject_id: str) -> Subject | None:
        for subject in self._subjects:
            if subject.id == subject_id:
                return subject
        return None

    # -------------------------------------------------------------------------
    # Chapters
    # -------------------------------------------------------------------------

    def _edit_subject(
        self, subject_id: str, fn: Callable[[Subject], Subject | None]
    ) -> tuple[Subject, ...] | None:
        return _update_in(self._subjects, subject_id, fn)

    def _edit_chapter(
        self,
        subject_id: str,
        chapter_id: str,
        fn: Callable[[Chapter], Chapter | None],
    ) -> tuple[Subject, ...] | None:
        return self._edit_subject(
            subject_id,
            lambda s: _with(s, "chapters", _update_in(s.chapters, chapter_id, fn)),
        )

    def get_chapter(self, subject_id: str, chapter_id: str) -> Chapter | None:
        subject = self.get_subject(subject_id)
        if subject is None:
            return None
        return subject.find_chapter(chapter_id)

    def add_chapter(self, subject_id: str, title: str) -> Chapter | None:
        """Append a chapter. None (and no change) if the subject is unknown."""
        chapter = Chapter(id=new_id(), title=title)
        subjects = self._edit_subject(
            subject_id, lambda s: replace(s, chapters=s.chapters + (chapter,))
        )
        if subjects is None:
            return None
        self._commit(subjects, "chapter_added", subject_id=subject_id, chapter_id=chapter.id)
        return chapter

    def update_chapter(self, subject_id: str, chapter_id: str, update: ChapterUpdate) -> bool:
        subjects = self._edit_chapter(subject_id, chapter_id, update.apply)
        if subjects is None:
            return False
        self._commit(subjects, "chapter_updated", subject_id=subject_id, chapter_id=chapter_id)
        return True

    def delete_chapter(self, subject_id: str, chapter_id: str) -> bool:
        """Delete a chapter with its sub-topics and references."""
        subjects = self._edit_subject(
            subject_id,
            lambda s: _with(s, "chapters", _remove_from(s.chapters, chapter_id)),
        )
        if subjects is None:
            return False
        self._commit(subjects, "chapter_deleted", subject_id=subject_id, chapter_id=chapter_id)
        return True

    # -------------------------------------------------------------------------
    # Sub-topics
    # -------------------------------------------------------------------------

    def add_sub_topic(
        self,
        subject_id: str,
        chapter_id: str,
        title: str,
        priority: Priority | str = Priority.MEDIUM,
    ) -> SubTopic | None:
        sub_topic = SubTopic(id=new_id(), title=title, completed=False, priority=Priority(priority))
        subjects = self._edit_chapter(
            subject_id,
            chapter_id,
            lambda c: replace(c, sub_topics=c.sub_topics + (sub_topic,)),
        )
        if subjects is None:
            return None
        self._commit(
            subjects,
            "sub_topic_added",
            subject_id=subject_id,
            chapter_id=chapter_id,
            sub_topic_id=sub_topic.id,
        )
        return sub_topic

    def update_sub_topic(
        self,
        subject_id: str,
        chapter_id: str,
        sub_topic_id: str,
        update: SubTopicUpdate,
    ) -> bool:
        subjects = self._edit_chapter(
            subject_id,
            chapter_id,
            lambda c: _with(c, "sub_topics", _update_in(c.sub_topics, sub_topic_id, update.apply)),
        )
        if subjects is None:
            return False
        self._commit(subjects, "sub_topic_updated", sub_topic_id=sub_topic_id)
        return True

    def delete_sub_topic(self, subject_id: str, chapter_id: str, sub_topic_id: str) -> bool:
        subjects = self._edit_chapter(
            subject_id,
            chapter_id,
            lambda c: _with(c, "sub_topics", _remove_from(c.sub_topics, sub_topic_id)),
        )
        if subjects is None:
            return False
        self._commit(subjects, "sub_topic_deleted", sub_topic_id=sub_topic_id)
        return True

    # -------------------------------------------------------------------------
    # References
    # -------------------------------------------------------------------------

    def add_reference(
        self,
        subject_id: str,
        chapter_id: str,
        title: str,
        type: ReferenceType | str,
        content: str,
    ) -> Reference | None:
        reference = Reference(
            id=new_id(),
            title=title,
            type=ReferenceType(type),
            content=content,
        )
        subjects = self._edit_chapter(
            subject_id,
            chapter_id,
            lambda c: replace(c, references=c.references + (reference,)),
        )
        if subjects is None:
            return None
        self._commit(
            subjects,
            "reference_added",
            subject_id=subject_id,
            chapter_id=chapter_id,
            reference_id=reference.id,
        )
        return reference

    def update_reference(
        self,
        subject_id: str,
        chapter_id: str,
        reference_id: str,
        update: ReferenceUpdate,
    ) -> bool:
        subjects = self._edit_chapter(
            subject_id,
            chapter_id,
            lambda c: _with(c, "references", _update_in(c.references, reference_id, update.apply)),
        )
        if subjects is None:
            return False
        self._commit(subjects, "reference_updated", reference_id=reference_id)
        return True

    def delete_reference(self, subject_id: str, chapter_id: str, reference_id: str) -> bool:
        subjects = self._edit_chapter(
            subject_id,
            chapter_id,
            lambda c: _with(c, "references", _remove_from(c.references, reference_id)),
        )
        if subjects is None:
            return False
        self._commit(subjects, "reference_deleted", reference_id=reference_id)
        return True


def open_store(state_dir: Path | None = None, key: str = STORAGE_KEY) -> StudyDataStore:
    """Build a file-backed store and load it.

    Args:
        state_dir: Directory holding the record (default: data/state)
        key: Record key

    Returns:
        Loaded StudyDataStore
    """
    store = StudyDataStore(JsonFileStorage(state_dir), key=key)
    store.load()
    return store
