"""
AI Router
Answers finance questions and produces insights, preferring the remote
advisor and falling back to the local rule-based advice.
"""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.core.exceptions import AdvisorUnavailable
from app.models.common import TrimmedStr
from app.routers.auth import get_current_user_id
from app.utils.advisor_client import AdvisorClient, get_advisor_client
from app.utils.analyzer import aggregate_for_user
from app.utils.insights import answer_question, generate_insights

router = APIRouter()
logger = logging.getLogger(__name__)


class QuestionRequest(BaseModel):
    question: TrimmedStr = Field(min_length=1)


@router.post("/questions")
def ask_question(
    payload: QuestionRequest,
    user_id: str = Depends(get_current_user_id),
    advisor: AdvisorClient = Depends(get_advisor_client),
):
    try:
        return {"answer": advisor.answer_question(user_id, payload.question), "source": "advisor"}
    except AdvisorUnavailable as e:
        logger.warning(f"Advisor unavailable, using fallback answer: {e}")

    result = aggregate_for_user(user_id)
    return {"answer": answer_question(result, payload.question), "source": "fallback"}


@router.get("/insights")
def get_insights(
    user_id: str = Depends(get_current_user_id),
    advisor: AdvisorClient = Depends(get_advisor_client),
):
    try:
        return {"insights": advisor.get_insights(user_id), "source": "advisor"}
    except AdvisorUnavailable as e:
        logger.warning(f"Advisor unavailable, using fallback insights: {e}")

    result = aggregate_for_user(user_id)
    return {"insights": generate_insights(result), "source": "fallback"}
