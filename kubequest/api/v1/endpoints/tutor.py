# kubequest/api/v1/endpoints/tutor.py
import logging
from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from kubequest.models.tutor import TutorAnswer, TutorQuestion
from kubequest.services.concept_catalog import get_concept, tutor_context
from kubequest.services.tutor_service import TutorService, get_tutor_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/ask",
    response_model=TutorAnswer,
    summary="Ask the AI tutor",
    description="""
Forwards a free-text question to the LLM tutor. The context is taken from `context` when given,
otherwise built from `concept_id`. Connectivity and quota problems come back as an answer with
`is_error` set, never as an HTTP error.
    """,
)
async def ask_tutor(question: TutorQuestion, tutor: TutorService = Depends(get_tutor_service)) -> TutorAnswer:
    context = question.context
    if context is None and question.concept_id:
        context = tutor_context(get_concept(question.concept_id))
    # The Groq client blocks; keep it off the loop that drives the cluster
    answer = await run_in_threadpool(tutor.ask, question.question, context)
    if answer.is_error:
        logger.warning(f"Tutor answered with an error: {answer.answer}")
    return answer
