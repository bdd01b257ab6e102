"""
backend/routers/requirements.py
───────────────────────────────
FastAPI router for the requirement catalogue and semantic search.

Endpoints
─────────
GET  /api/requirements                    — All requirements
GET  /api/requirements/standards          — All standards
GET  /api/requirements/search?query=…     — Requirements ranked by similarity to query
POST /api/requirements/training-set       — Join + label-encode, return the label map
GET  /api/requirements/standards/{id}     — One standard
GET  /api/requirements/{reference_id}     — One requirement
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from backend.schemas import (
    RequirementOut,
    SearchResponse,
    StandardOut,
    TrainingSetRequest,
    TrainingSetResponse,
)
from config.settings import get_settings
from models.catalogue import RequirementCatalogue
from models.matchmaker import InvalidQueryError, SemanticSearchEngine
from utils.logger import logger

router = APIRouter(prefix="/api/requirements", tags=["requirements"])


# ── dependencies (objects live on app.state, see backend.main.create_app) ────

def get_catalogue(request: Request) -> RequirementCatalogue:
    return request.app.state.catalogue


def get_engine(request: Request) -> SemanticSearchEngine:
    return request.app.state.engine


# ── endpoints ─────────────────────────────────────────────────────────────────

@router.get("", response_model=list[RequirementOut])
def list_requirements(catalogue: RequirementCatalogue = Depends(get_catalogue)):
    return [RequirementOut.from_entity(r) for r in catalogue.requirements()]


@router.get("/standards", response_model=list[StandardOut])
def list_standards(catalogue: RequirementCatalogue = Depends(get_catalogue)):
    return [StandardOut.from_entity(s) for s in catalogue.standards()]


@router.get("/search", response_model=SearchResponse)
def search_requirements(
    query: str = Query("", description="Free-text requirement to look up"),
    catalogue: RequirementCatalogue = Depends(get_catalogue),
    engine: SemanticSearchEngine = Depends(get_engine),
):
    try:
        results = engine.search(query, catalogue.requirements())
    except InvalidQueryError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception(f"Search failed for query '{query[:60]}'")
        raise HTTPException(status_code=500, detail=str(exc))

    if not results:
        raise HTTPException(status_code=404, detail="No matching requirements found.")

    return SearchResponse(
        query=query,
        total_matches=len(results),
        results=[RequirementOut.from_entity(r) for r in results],
    )


@router.post("/training-set", response_model=TrainingSetResponse)
def prepare_training_set(
    body: TrainingSetRequest,
    catalogue: RequirementCatalogue = Depends(get_catalogue),
):
    sample_size = body.sample_size
    if sample_size is None:
        sample_size = get_settings().training_sample_size

    training_set = catalogue.prepare_training_set(sample_size=sample_size)
    return TrainingSetResponse(
        total_records=len(training_set.records),
        unmatched=training_set.dropped,
        label_map=training_set.label_map,
    )


@router.get("/standards/{standard_id}", response_model=StandardOut)
def get_standard(
    standard_id: str,
    catalogue: RequirementCatalogue = Depends(get_catalogue),
):
    standard = catalogue.get_standard(standard_id)
    if standard is None:
        raise HTTPException(404, f"Standard with ID {standard_id} not found.")
    return StandardOut.from_entity(standard)


@router.get("/{reference_id}", response_model=RequirementOut)
def get_requirement(
    reference_id: str,
    catalogue: RequirementCatalogue = Depends(get_catalogue),
):
    requirement = catalogue.get_requirement(reference_id)
    if requirement is None:
        raise HTTPException(404, f"Requirement with ID {reference_id} not found.")
    return RequirementOut.from_entity(requirement)
