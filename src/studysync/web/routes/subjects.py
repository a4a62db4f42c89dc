"""Subject tree endpoints.

Every mutation goes through the store. Unknown ids are a silent no-op in
the store; here they become 404 responses.
"""

from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Response, status

from studysync.core.models import ChapterUpdate, ReferenceUpdate, SubjectUpdate, SubTopicUpdate
from studysync.core.progress import overall_progress
from studysync.core.study_store import StudyDataStore
from studysync.web.deps import get_store
from studysync.web.schemas import (
    ChapterCreate,
    ChapterPatch,
    ChapterResponse,
    OverallProgressResponse,
    ReferenceCreate,
    ReferencePatch,
    ReferenceResponse,
    SubjectCreate,
    SubjectListResponse,
    SubjectPatch,
    SubjectResponse,
    SubTopicCreate,
    SubTopicPatch,
    SubTopicResponse,
)

router = APIRouter(prefix="/api/subjects", tags=["subjects"])

CHAPTER_PATH = "/{subject_id}/chapters/{chapter_id}"


def _not_found(detail: str) -> NoReturn:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _subject_response(store: StudyDataStore, subject_id: str) -> SubjectResponse:
    subject = store.get_subject(subject_id)
    if subject is None:
        _not_found(f"Subject '{subject_id}' not found")
    return SubjectResponse.from_entity(subject)


# =============================================================================
# SUBJECTS
# =============================================================================


@router.get("", response_model=SubjectListResponse)
def list_subjects(store: StudyDataStore = Depends(get_store)) -> SubjectListResponse:
    """List all subjects with progress."""
    subjects = [SubjectResponse.from_entity(s) for s in store.subjects]
    return SubjectListResponse(
        subjects=subjects,
        count=len(subjects),
        overall=OverallProgressResponse.from_progress(overall_progress(store.subjects)),
    )


@router.post("", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
def create_subject(
    body: SubjectCreate,
    store: StudyDataStore = Depends(get_store),
) -> SubjectResponse:
    """Create a new subject."""
    subject = store.add_subject(body.title, body.color)
    return SubjectResponse.from_entity(subject)


@router.get("/{subject_id}", response_model=SubjectResponse)
def get_subject(subject_id: str, store: StudyDataStore = Depends(get_store)) -> SubjectResponse:
    """Get a subject with its full tree."""
    return _subject_response(store, subject_id)


@router.patch("/{subject_id}", response_model=SubjectResponse)
def update_subject(
    subject_id: str,
    body: SubjectPatch,
    store: StudyDataStore = Depends(get_store),
) -> SubjectResponse:
    """Rename or recolor a subject."""
    if not store.update_subject(subject_id, SubjectUpdate(title=body.title, color=body.color)):
        _not_found(f"Subject '{subject_id}' not found")
    return _subject_response(store, subject_id)


@router.delete("/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subject(subject_id: str, store: StudyDataStore = Depends(get_store)) -> Response:
    """Delete a subject and everything under it."""
    if not store.delete_subject(subject_id):
        _not_found(f"Subject '{subject_id}' not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# CHAPTERS
# =============================================================================


@router.post(
    "/{subject_id}/chapters",
    response_model=ChapterResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_chapter(
    subject_id: str,
    body: ChapterCreate,
    store: StudyDataStore = Depends(get_store),
) -> ChapterResponse:
    chapter = store.add_chapter(subject_id, body.title)
    if chapter is None:
        _not_found(f"Subject '{subject_id}' not found")
    return ChapterResponse.from_entity(chapter)


@router.patch(CHAPTER_PATH, response_model=ChapterResponse)
def update_chapter(
    subject_id: str,
    chapter_id: str,
    body: ChapterPatch,
    store: StudyDataStore = Depends(get_store),
) -> ChapterResponse:
    if not store.update_chapter(subject_id, chapter_id, ChapterUpdate(title=body.title)):
        _not_found(f"Chapter '{chapter_id}' not found")
    return ChapterResponse.from_entity(store.get_chapter(subject_id, chapter_id))


@router.delete(CHAPTER_PATH, status_code=status.HTTP_204_NO_CONTENT)
def delete_chapter(
    subject_id: str,
    chapter_id: str,
    store: StudyDataStore = Depends(get_store),
) -> Response:
    """Delete a chapter with its sub-topics and references."""
    if not store.delete_chapter(subject_id, chapter_id):
        _not_found(f"Chapter '{chapter_id}' not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# SUB-TOPICS
# =============================================================================


@router.post(
    CHAPTER_PATH + "/subtopics",
    response_model=SubTopicResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_sub_topic(
    subject_id: str,
    chapter_id: str,
    body: SubTopicCreate,
    store: StudyDataStore = Depends(get_store),
) -> SubTopicResponse:
    sub_topic = store.add_sub_topic(subject_id, chapter_id, body.title, body.priority)
    if sub_topic is None:
        _not_found(f"Chapter '{chapter_id}' not found")
    return SubTopicResponse.from_entity(sub_topic)


@router.patch(CHAPTER_PATH + "/subtopics/{sub_topic_id}", response_model=SubTopicResponse)
def update_sub_topic(
    subject_id: str,
    chapter_id: str,
    sub_topic_id: str,
    body: SubTopicPatch,
    store: StudyDataStore = Depends(get_store),
) -> SubTopicResponse:
    """Partially update a sub-topic (title, completed, priority)."""
    update = SubTopicUpdate(title=body.title, completed=body.completed, priority=body.priority)
    if not store.update_sub_topic(subject_id, chapter_id, sub_topic_id, update):
        _not_found(f"Sub-topic '{sub_topic_id}' not found")
    chapter = store.get_chapter(subject_id, chapter_id)
    return SubTopicResponse.from_entity(chapter.find_sub_topic(sub_topic_id))


@router.delete(
    CHAPTER_PATH + "/subtopics/{sub_topic_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_sub_topic(
    subject_id: str,
    chapter_id: str,
    sub_topic_id: str,
    store: StudyDataStore = Depends(get_store),
) -> Response:
    if not store.delete_sub_topic(subject_id, chapter_id, sub_topic_id):
        _not_found(f"Sub-topic '{sub_topic_id}' not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# REFERENCES
# =============================================================================


@router.post(
    CHAPTER_PATH + "/references",
    response_model=ReferenceResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_reference(
    subject_id: str,
    chapter_id: str,
    body: ReferenceCreate,
    store: StudyDataStore = Depends(get_store),
) -> ReferenceResponse:
    reference = store.add_reference(subject_id, chapter_id, body.title, body.type, body.content)
    if reference is None:
        _not_found(f"Chapter '{chapter_id}' not found")
    return ReferenceResponse.from_entity(reference)


@router.patch(CHAPTER_PATH + "/references/{reference_id}", response_model=ReferenceResponse)
def update_reference(
    subject_id: str,
    chapter_id: str,
    reference_id: str,
    body: ReferencePatch,
    store: StudyDataStore = Depends(get_store),
) -> ReferenceResponse:
    update = ReferenceUpdate(title=body.title, type=body.type, content=body.content)
    if not store.update_reference(subject_id, chapter_id, reference_id, update):
        _not_found(f"Reference '{reference_id}' not found")
    chapter = store.get_chapter(subject_id, chapter_id)
    return ReferenceResponse.from_entity(chapter.find_reference(reference_id))


@router.delete(
    CHAPTER_PATH + "/references/{reference_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_reference(
    subject_id: str,
    chapter_id: str,
    reference_id: str,
    store: StudyDataStore = Depends(get_store),
) -> Response:
    if not store.delete_reference(subject_id, chapter_id, reference_id):
        _not_found(f"Reference '{reference_id}' not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
