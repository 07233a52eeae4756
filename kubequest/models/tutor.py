# kubequest/models/tutor.py
from pydantic import BaseModel, Field
from typing import Optional


class TutorQuestion(BaseModel):
    question: str = Field(..., min_length=1, description="Free-text question from the learner")
    concept_id: Optional[str] = Field(None, description="Concept currently on screen, used to build the context")
    context: Optional[str] = Field(None, description="Explicit context; overrides the concept-derived one")


class TutorAnswer(BaseModel):
    answer: str
    is_error: bool = False
