"""
backend/main.py
═══════════════
FastAPI application for the requirement analyzer: browse the standards /
requirements catalogue, run semantic search, and prepare the label-encoded
training set.

Endpoints
─────────
  GET  /health                               — Liveness / readiness probe
  GET  /api/requirements[...]                — see backend/routers/requirements.py

  The catalogue is handed in by whoever loads the source workbook:

      from backend.main import create_app
      app = create_app(RequirementCatalogue.from_frames(standards_df, requirements_df))

  Run the (empty-catalogue) default app with:
      uvicorn backend.main:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.routers import requirements
from backend.schemas import HealthResponse
from config.settings import get_settings
from models.catalogue import RequirementCatalogue
from models.embedder import HashingEmbedder
from models.matchmaker import SemanticSearchEngine
from utils.logger import logger


def create_app(
    catalogue: RequirementCatalogue | None = None,
    engine: SemanticSearchEngine | None = None,
) -> FastAPI:
    """
    Build the API around a catalogue and a search engine.
    Missing pieces default to an empty catalogue and a HashingEmbedder engine.
    """
    settings = get_settings()

    app = FastAPI(
        title="Requirement Analyzer API",
        description=(
            "Semantic search over standard-derived requirements and "
            "label-encoded training-set preparation."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],      # tighten in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.catalogue = catalogue if catalogue is not None else RequirementCatalogue()
    app.state.engine = (
        engine
        if engine is not None
        else SemanticSearchEngine(HashingEmbedder(dim=settings.embedding_dim))
    )

    @app.get("/health", response_model=HealthResponse, tags=["Meta"])
    def health_check() -> HealthResponse:
        cat: RequirementCatalogue = app.state.catalogue
        return HealthResponse(
            status="ok",
            standards_loaded=len(cat.standards()),
            requirements_loaded=len(cat),
        )

    app.include_router(requirements.router)
    logger.info(f"API ready (env={settings.app_env})")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("backend.main:app", host=settings.app_host, port=settings.app_port)
