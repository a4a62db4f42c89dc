"""AI study assistant endpoints.

Input errors map to 422, any other assistant failure to 502.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from studysync.ai.assistant import AIInputError, AIServiceError, StudyAssistant
from studysync.ai.schemas import BreakSchedule, PracticeQuiz, SummaryResult
from studysync.web.deps import get_assistant
from studysync.web.schemas import BreaksRequest, QuizRequest, SummaryRequest

router = APIRouter(prefix="/api/ai", tags=["ai"])


def _ai_error(e: AIServiceError) -> HTTPException:
    if isinstance(e, AIInputError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.post("/summary", response_model=SummaryResult)
def create_summary(
    body: SummaryRequest,
    assistant: StudyAssistant = Depends(get_assistant),
) -> SummaryResult:
    """Summarize study text and generate flashcards."""
    try:
        return assistant.summarize(body.text)
    except AIServiceError as e:
        raise _ai_error(e) from e


@router.post("/breaks", response_model=BreakSchedule)
def create_break_schedule(
    body: BreaksRequest,
    assistant: StudyAssistant = Depends(get_assistant),
) -> BreakSchedule:
    """Suggest breaks for a study session."""
    try:
        return assistant.schedule_breaks(body.study_duration_minutes)
    except AIServiceError as e:
        raise _ai_error(e) from e


@router.post("/quiz", response_model=PracticeQuiz)
def create_quiz(
    body: QuizRequest,
    assistant: StudyAssistant = Depends(get_assistant),
) -> PracticeQuiz:
    """Generate a multiple-choice practice quiz."""
    try:
        return assistant.generate_quiz(body.topic, body.num_questions)
    except AIServiceError as e:
        raise _ai_error(e) from e
