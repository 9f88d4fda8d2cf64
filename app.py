"""
Prospect Persona Intelligence API

FastAPI wrapper around the prospect pipeline.
"""

import logging
from typing import Dict, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.config import LOG_LEVEL
from src.pipeline.prospect_pipeline import ProspectPipeline, create_pipeline
from src.utils.errors import (
    InputValidationError,
    PersonNotFoundError,
    PreconditionError,
    ProspectIntelError,
)

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Prospect Persona Intelligence",
    description="Resolve prospect identities, analyze public posts into personas, and generate vendor playbooks",
    version="0.1.0",
)


class ResolveRequest(BaseModel):
    """Identity resolution request; name is validated by the pipeline."""
    name: Optional[str] = None
    company: Optional[str] = None
    role: Optional[str] = None
    linkedin_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    profile_urls: Dict[str, str] = Field(default_factory=dict)
    person_id: Optional[str] = None


class AnalyzeRequest(BaseModel):
    person_id: Optional[str] = None
    window_months: Optional[int] = None
    max_posts: Optional[int] = None


class PlaybookRequest(BaseModel):
    person_id: Optional[str] = None
    vendor: Optional[str] = None


_pipeline: Optional[ProspectPipeline] = None


def get_pipeline() -> ProspectPipeline:
    """Shared pipeline instance, built on first use."""
    global _pipeline
    if _pipeline is None:
        _pipeline = create_pipeline()
    return _pipeline


def _http_error(error: ProspectIntelError) -> HTTPException:
    """Map pipeline errors to HTTP status codes."""
    if isinstance(error, InputValidationError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, PersonNotFoundError):
        return HTTPException(status_code=404, detail=error.message)
    if isinstance(error, PreconditionError):
        return HTTPException(
            status_code=409,
            detail={"error": error.message, "precondition": error.precondition},
        )
    return HTTPException(status_code=500, detail=str(error))


@app.get("/")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "prospect-persona-intel",
        "version": "0.1.0",
    }


@app.get("/health")
async def health():
    """Alias for health check."""
    return await health_check()


@app.post("/identity/resolve")
def resolve_identity(
    request: ResolveRequest,
    pipeline: ProspectPipeline = Depends(get_pipeline),
):
    """
    Generate and score identity profiles for a person.

    Returns the person, every scored profile, and status counts.
    """
    seed = request.model_dump(exclude={"person_id"})
    try:
        result = pipeline.resolve_identity(seed, person_id=request.person_id)
    except ProspectIntelError as e:
        raise _http_error(e)

    return JSONResponse(content=result.to_dict())


@app.post("/persona/analyze")
async def analyze_persona(
    request: AnalyzeRequest,
    pipeline: ProspectPipeline = Depends(get_pipeline),
):
    """
    Scan confirmed profiles, classify posts, and extract the persona.

    Returns the persona vector and run statistics.
    """
    try:
        result = await pipeline.analyze_persona(
            request.person_id,
            window_months=request.window_months,
            max_posts=request.max_posts,
        )
    except ProspectIntelError as e:
        raise _http_error(e)

    return JSONResponse(content=result.to_dict())


@app.post("/playbook/generate")
def generate_playbook(
    request: PlaybookRequest,
    pipeline: ProspectPipeline = Depends(get_pipeline),
):
    """Generate a vendor playbook from a stored persona."""
    try:
        result = pipeline.generate_playbook(request.person_id, vendor=request.vendor)
    except ProspectIntelError as e:
        raise _http_error(e)

    return JSONResponse(content=result.to_dict())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
