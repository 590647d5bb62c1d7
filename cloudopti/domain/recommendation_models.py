"""
Domain models for architecture recommendations.
Defines optimization suggestions, score breakdowns and the recommendation itself.
"""
from typing import Any, Dict, Optional, Tuple
from dataclasses import dataclass, field
from types import MappingProxyType

from cloudopti.domain.cost_models import CostEstimate
from cloudopti.domain.service_models import Service


# Allowed optimization suggestion types (strict set)
ALLOWED_OPTIMIZATION_TYPES = {"cost", "performance", "reliability", "security"}

# Ranking dimensions, in breakdown order
SCORE_DIMENSIONS: Tuple[str, ...] = (
    "cost",
    "performance",
    "reliability",
    "simplicity",
    "scalability",
)


@dataclass(frozen=True)
class Optimization:
    """An advisory suggestion attached to a recommendation."""
    type: str  # Must be one of ALLOWED_OPTIMIZATION_TYPES
    title: str
    description: str
    potential_savings: Optional[str] = None
    benefit: Optional[str] = None
    
    def __post_init__(self):
        if self.type not in ALLOWED_OPTIMIZATION_TYPES:
            raise ValueError(f"Unknown optimization type: {self.type}")
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "type": self.type,
            "title": self.title,
            "description": self.description,
        }
        if self.potential_savings is not None:
            result["potential_savings"] = self.potential_savings
        if self.benefit is not None:
            result["benefit"] = self.benefit
        return result


@dataclass(frozen=True)
class DimensionScore:
    """Score, weight and weighted contribution of one ranking dimension."""
    score: float
    weight: float
    contribution: float
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "score": self.score,
            "weight": self.weight,
            "contribution": self.contribution,
        }


@dataclass(frozen=True)
class Recommendation:
    """
    A priced architecture proposal for one cloud provider.
    
    Built unscored by the orchestrator; the ranker returns scored copies.
    """
    id: str
    provider: str  # aws | azure | gcp
    services: Tuple[Service, ...]
    estimated_cost: CostEstimate
    reasoning: Tuple[str, ...] = ()
    confidence: float = 0.0
    optimizations: Tuple[Optimization, ...] = ()
    score: float = 0.0
    score_breakdown: MappingProxyType = field(
        default_factory=lambda: MappingProxyType({})
    )  # dimension -> DimensionScore
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "provider": self.provider,
            "services": [service.to_dict() for service in self.services],
            "estimated_cost": self.estimated_cost.to_dict(),
            "reasoning": list(self.reasoning),
            "confidence": self.confidence,
            "optimizations": [optimization.to_dict() for optimization in self.optimizations],
            "score": self.score,
            "score_breakdown": {
                dimension: entry.to_dict()
                for dimension, entry in self.score_breakdown.items()
            },
        }
