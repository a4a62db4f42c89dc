"""Request dependencies shared by the route handlers.

The store and assistant live on ``app.state``. Either may be injected by
``create_app``; otherwise they are built from config on first use.
"""

from fastapi import HTTPException, Request, status

from studysync.ai.assistant import StudyAssistant, build_assistant
from studysync.config.app_config import resolve_state_dir
from studysync.core.study_store import StudyDataStore, open_store
from studysync.llm.client import LLMError


def get_store(request: Request) -> StudyDataStore:
    """The app's single study data store."""
    state = request.app.state
    if state.store is None:
        state.store = open_store(resolve_state_dir())
    return state.store


def get_assistant(request: Request) -> StudyAssistant:
    """The app's AI study assistant."""
    state = request.app.state
    if state.assistant is None:
        try:
            state.assistant = build_assistant()
        except LLMError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=str(e),
            ) from e
    return state.assistant
