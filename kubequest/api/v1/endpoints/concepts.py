# kubequest/api/v1/endpoints/concepts.py
from typing import List
from fastapi import APIRouter
from kubequest.models.concept import Concept
from kubequest.services.concept_catalog import get_concept, list_concepts

router = APIRouter()


@router.get("", response_model=List[Concept], summary="List learning modules")
async def read_concepts() -> List[Concept]:
    return list_concepts()


@router.get("/{concept_id}", response_model=Concept, summary="Get one learning module")
async def read_concept(concept_id: str) -> Concept:
    # UnknownConceptError is mapped to 404 by the application exception handler
    return get_concept(concept_id)
