"""
API routes for architecture recommendations.
"""
from typing import Dict, Any, List, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool
import logging

from cloudopti.domain.technology_models import Technology
from cloudopti.services.recommendation_orchestrator import (
    RecommendationGenerationError,
    RecommendationOrchestrator,
)


logger = logging.getLogger(__name__)
router = APIRouter()


class TechnologyPayload(BaseModel):
    """Model for a single detected technology."""
    name: str = Field(..., min_length=1, description="Technology name (e.g., 'Python', 'Next.js')")
    category: str = Field(..., description="language, framework, database, tool or service")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0, description="Detection confidence")
    source: str = Field(default="", description="Detector that produced the technology")
    evidence: List[str] = Field(default_factory=list, description="Evidence strings")
    id: Optional[str] = Field(default=None, description="Stable detector key")


class RecommendationRequest(BaseModel):
    """Request model for generating recommendations."""
    technologies: List[TechnologyPayload] = Field(default_factory=list, description="Detected technologies")
    requirements: Dict[str, Any] = Field(
        default_factory=dict,
        description="Requirement options (scale, traffic, region, maxBudget, priority, ...)"
    )


@router.get("/api/health")
async def health() -> Dict[str, Any]:
    """Liveness probe."""
    return {"status": "ok"}


@router.post("/api/recommendations")
async def create_recommendations(
    recommendation_request: RecommendationRequest
) -> Dict[str, Any]:
    """
    Generate ranked cloud architecture recommendations.
    
    Maps the detected technologies to services on AWS, Azure and GCP,
    prices each architecture and returns them ranked by score.
    
    Args:
        recommendation_request: Request body with technologies and requirements
    
    Returns:
        JSON response with one recommendation per provider
    
    Raises:
        HTTPException: If recommendation generation fails
    """
    technologies = [
        Technology.from_dict(technology.model_dump())
        for technology in recommendation_request.technologies
    ]
    
    try:
        orchestrator = RecommendationOrchestrator()
        # CPU-bound; keep it off the event loop
        recommendations = await run_in_threadpool(
            orchestrator.generate_recommendations,
            technologies,
            recommendation_request.requirements
        )
    except RecommendationGenerationError as error:
        # Details stay in the logs; callers get a generic retryable failure
        raise HTTPException(
            status_code=500,
            detail="Failed to generate recommendations. Please try again."
        ) from error
    
    return {
        "status": "ok",
        "count": len(recommendations),
        "recommendations": [recommendation.to_dict() for recommendation in recommendations],
    }
