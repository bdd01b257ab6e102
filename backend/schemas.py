"""
backend/schemas.py
──────────────────
Pydantic v2 request / response models for all FastAPI endpoints.

Sections
────────
  1. Catalogue models      — StandardOut, RequirementOut
  2. Search models         — SearchResponse
  3. Training-set models   — TrainingSetRequest, TrainingSetResponse
  4. Shared / util models  — HealthResponse
"""

from typing import Optional

from pydantic import BaseModel, Field

from models.entities import Standard, StandardRequirement


# ─────────────────────────────────────────────────────────────────────────────
#  1. Catalogue models
# ─────────────────────────────────────────────────────────────────────────────

class StandardOut(BaseModel):
    """One standard (source document) from the catalogue."""
    id:       str = Field(..., description="Identifier prefix shared by derived requirements")
    type:     str
    ref_id:   str
    ref_name: str

    @classmethod
    def from_entity(cls, standard: Standard) -> "StandardOut":
        return cls(**standard.to_dict())


class RequirementOut(BaseModel):
    """One requirement row from the catalogue."""
    reference_id: str
    description:  str = Field(..., description="Requirement text (max 500 chars)")
    category:     str
    change_note:  str

    @classmethod
    def from_entity(cls, requirement: StandardRequirement) -> "RequirementOut":
        return cls(**requirement.to_dict())


# ─────────────────────────────────────────────────────────────────────────────
#  2. Search models
# ─────────────────────────────────────────────────────────────────────────────

class SearchResponse(BaseModel):
    """Ranked search hits, most similar first. Scores are not exposed."""
    query:         str
    total_matches: int
    results:       list[RequirementOut]


# ─────────────────────────────────────────────────────────────────────────────
#  3. Training-set models
# ─────────────────────────────────────────────────────────────────────────────

class TrainingSetRequest(BaseModel):
    """Body for POST /api/requirements/training-set."""
    sample_size: Optional[int] = Field(
        None,
        ge=0,
        description="Keep only the first N joined rows. Omit to use the configured default.",
    )


class TrainingSetResponse(BaseModel):
    """Summary of one join + label-encoding pass."""
    total_records: int
    unmatched:     int
    label_map:     dict[str, int] = Field(..., description="standard ref id → label, first-seen order")


# ─────────────────────────────────────────────────────────────────────────────
#  4. Shared / utility models
# ─────────────────────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    """Response for GET /health."""
    status:             str
    standards_loaded:   int
    requirements_loaded: int
    version:            str = "1.0.0"
