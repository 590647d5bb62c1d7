"""
Recommendation ranker.
Scores recommendations on five weighted dimensions and sorts them.
"""
from typing import Any, Dict, List, Mapping, Sequence, Union
from dataclasses import replace
from types import MappingProxyType
import logging
import math

from cloudopti.core.config import config
from cloudopti.domain.recommendation_models import (
    SCORE_DIMENSIONS,
    DimensionScore,
    Recommendation,
)
from cloudopti.domain.service_models import Service, ServiceType
from cloudopti.domain.technology_models import Requirements
from cloudopti.utils.scoring import clamp, ratio


logger = logging.getLogger(__name__)


DEFAULT_WEIGHTS: MappingProxyType = MappingProxyType({
    "cost": 0.25,
    "performance": 0.20,
    "reliability": 0.20,
    "simplicity": 0.20,
    "scalability": 0.15,
})

# Weight presets replacing the defaults for a priority
PRIORITY_WEIGHTS: MappingProxyType = MappingProxyType({
    "cost": MappingProxyType({
        "cost": 0.40, "performance": 0.15, "reliability": 0.15, "simplicity": 0.15, "scalability": 0.15,
    }),
    "performance": MappingProxyType({
        "cost": 0.15, "performance": 0.40, "reliability": 0.20, "simplicity": 0.10, "scalability": 0.15,
    }),
    "simplicity": MappingProxyType({
        "cost": 0.20, "performance": 0.15, "reliability": 0.15, "simplicity": 0.35, "scalability": 0.15,
    }),
})

# Additive adjustments per organization type, applied after the priority preset
ORGANIZATION_ADJUSTMENTS: MappingProxyType = MappingProxyType({
    "startup": MappingProxyType({"cost": 0.10, "simplicity": 0.05, "reliability": -0.05, "performance": -0.10}),
    "enterprise": MappingProxyType({"reliability": 0.10, "performance": 0.05, "cost": -0.10, "simplicity": -0.05}),
})

PROVIDER_RELIABILITY_BONUS: MappingProxyType = MappingProxyType({
    "aws": 0.05,
    "azure": 0.03,
    "gcp": 0.02,
})

# Name fragments recognised by the heuristics
CACHING_SERVICE_MARKERS = ("CloudFront", "CDN", "Cache", "Memorystore")
ENHANCED_DATABASE_MARKERS = ("Aurora", "Cosmos")
HIGH_AVAILABILITY_MARKERS = ("Aurora", "RDS", "Cosmos")
AUTO_SCALING_MARKERS = ("Auto", "Elastic")

SCORE_FLOOR = 0.1
EMPTY_ARCHITECTURE_SCORE = 0.3


class RankingError(Exception):
    """Raised when a recommendation cannot be scored."""
    pass


def _name_contains(service: Service, markers: Sequence[str]) -> bool:
    return any(marker in service.name for marker in markers)


def _is_managed(service: Service) -> bool:
    return service.type == ServiceType.MANAGED


def _is_serverless(service: Service) -> bool:
    return service.type == ServiceType.SERVERLESS


class Ranker:
    """Multi-criteria weighted scorer for architecture recommendations."""
    
    def rank_recommendations(
        self,
        recommendations: Sequence[Recommendation],
        requirements: Union[Requirements, Mapping[str, Any], None] = None
    ) -> List[Recommendation]:
        """
        Score recommendations and sort them by score, highest first.
        
        Ties keep their input order.
        
        Args:
            recommendations: Unscored (or previously scored) recommendations
            requirements: Budget, priority and organization preferences
        
        Returns:
            Scored copies of the recommendations, sorted descending
        
        Raises:
            RankingError: If a recommendation lacks services or a cost estimate
        """
        requirements = Requirements.coerce(requirements)
        
        for recommendation in recommendations:
            if getattr(recommendation, "services", None) is None:
                raise RankingError(
                    f"Ranking failed: recommendation {getattr(recommendation, 'id', '?')} has no services"
                )
            if getattr(recommendation, "estimated_cost", None) is None:
                raise RankingError(
                    f"Ranking failed: recommendation {getattr(recommendation, 'id', '?')} has no cost estimate"
                )
        
        scored = []
        for recommendation in recommendations:
            breakdown = self.get_score_breakdown(recommendation, requirements)
            scored.append(replace(
                recommendation,
                score=self._sum_contributions(breakdown),
                score_breakdown=MappingProxyType(breakdown)
            ))
        
        ranked = sorted(scored, key=lambda item: item.score, reverse=True)
        logger.info(
            "Ranked %d recommendations: %s",
            len(ranked),
            ", ".join(f"{item.provider}={item.score:.3f}" for item in ranked)
        )
        return ranked
    
    def calculate_overall_score(
        self,
        recommendation: Recommendation,
        requirements: Union[Requirements, Mapping[str, Any], None] = None
    ) -> float:
        """Weighted sum of the five dimension scores, in [0, 1]."""
        requirements = Requirements.coerce(requirements)
        return self._sum_contributions(self.get_score_breakdown(recommendation, requirements))
    
    def _sum_contributions(self, breakdown: Mapping[str, DimensionScore]) -> float:
        return clamp(sum(breakdown[dimension].contribution for dimension in SCORE_DIMENSIONS))
    
    def get_score_breakdown(
        self,
        recommendation: Recommendation,
        requirements: Union[Requirements, Mapping[str, Any], None] = None
    ) -> Dict[str, DimensionScore]:
        """
        Get per-dimension score, weight and contribution.
        
        The contributions sum to the overall score.
        
        Args:
            recommendation: Recommendation to explain
            requirements: Requirements shaping weights and scores
        
        Returns:
            Mapping of dimension name to DimensionScore
        """
        requirements = Requirements.coerce(requirements)
        weights = self.get_weights_for_requirements(requirements)
        scores = {
            "cost": self.calculate_cost_score(recommendation, requirements),
            "performance": self.calculate_performance_score(recommendation, requirements),
            "reliability": self.calculate_reliability_score(recommendation, requirements),
            "simplicity": self.calculate_simplicity_score(recommendation, requirements),
            "scalability": self.calculate_scalability_score(recommendation, requirements),
        }
        
        return {
            dimension: DimensionScore(
                score=scores[dimension],
                weight=weights[dimension],
                contribution=scores[dimension] * weights[dimension]
            )
            for dimension in SCORE_DIMENSIONS
        }
    
    def get_weights_for_requirements(
        self,
        requirements: Union[Requirements, Mapping[str, Any], None] = None
    ) -> Dict[str, float]:
        """
        Get the dimension weights for a set of requirements.
        
        A priority swaps in its preset, an organization type then shifts
        weight between dimensions, and the result is normalized to sum to 1.
        
        Args:
            requirements: Requirements with priority and organization_type
        
        Returns:
            Mapping of dimension name to weight
        """
        requirements = Requirements.coerce(requirements)
        weights = dict(PRIORITY_WEIGHTS.get(requirements.priority, DEFAULT_WEIGHTS))
        
        for dimension, delta in ORGANIZATION_ADJUSTMENTS.get(requirements.organization_type, {}).items():
            weights[dimension] += delta
        
        total_weight = sum(weights.values())
        return {dimension: weights[dimension] / total_weight for dimension in SCORE_DIMENSIONS}
    
    def calculate_cost_score(self, recommendation: Recommendation, requirements: Requirements) -> float:
        """
        Cost effectiveness relative to the budget.
        
        Full marks up to half the budget, 0.8 decaying towards 0.5 up to the
        budget, and a steep penalty beyond it that never drops below the floor.
        """
        monthly_cost = recommendation.estimated_cost.monthly
        max_budget = requirements.max_budget
        if not math.isfinite(max_budget) or max_budget <= 0:
            max_budget = config.DEFAULT_MAX_BUDGET
        budget_ratio = monthly_cost / max_budget
        
        if budget_ratio <= 0.5:
            score = 1.0
        elif budget_ratio <= 1.0:
            score = 0.8 - budget_ratio * 0.3
        else:
            score = 0.5 - (budget_ratio - 1.0)
        return clamp(score, SCORE_FLOOR, 1.0)
    
    def calculate_performance_score(self, recommendation: Recommendation, requirements: Requirements) -> float:
        services = recommendation.services
        score = 0.5
        
        score += ratio(services, _is_managed) * 0.2
        
        if any(_name_contains(service, CACHING_SERVICE_MARKERS) for service in services):
            score += 0.15
        
        if any(
            service.category == "database" and _name_contains(service, ENHANCED_DATABASE_MARKERS)
            for service in services
        ):
            score += 0.15
        
        # Cold starts make serverless less predictable under strict performance needs
        if requirements.performance == "high":
            score -= ratio(services, _is_serverless) * 0.1
        
        return clamp(score, SCORE_FLOOR, 1.0)
    
    def calculate_reliability_score(self, recommendation: Recommendation, requirements: Requirements) -> float:
        services = recommendation.services
        score = 0.6
        
        if services:
            score += ratio(services, _is_managed) * 0.3
            if any(_name_contains(service, HIGH_AVAILABILITY_MARKERS) for service in services):
                score += 0.1
        
        score += PROVIDER_RELIABILITY_BONUS.get(recommendation.provider, 0.0)
        return clamp(score, SCORE_FLOOR, 1.0)
    
    def calculate_simplicity_score(self, recommendation: Recommendation, requirements: Requirements) -> float:
        services = recommendation.services
        if not services:
            return EMPTY_ARCHITECTURE_SCORE
        
        score = 0.5
        service_count = len(services)
        if service_count <= 3:
            score += 0.3
        elif service_count <= 5:
            score += 0.2
        else:
            score += 0.1
        
        score += ratio(services, _is_managed) * 0.2
        score += ratio(services, _is_serverless) * 0.15
        
        if any(len(service.alternatives) > 3 for service in services):
            score -= 0.1
        
        return clamp(score, SCORE_FLOOR, 1.0)
    
    def calculate_scalability_score(self, recommendation: Recommendation, requirements: Requirements) -> float:
        services = recommendation.services
        if not services:
            return EMPTY_ARCHITECTURE_SCORE
        
        score = 0.5
        serverless_ratio = ratio(services, _is_serverless)
        
        if any(_is_serverless(service) or _name_contains(service, AUTO_SCALING_MARKERS) for service in services):
            score += 0.2
        
        score += serverless_ratio * 0.25
        
        if recommendation.estimated_cost.scaling_projections:
            score += (1.0 - recommendation.estimated_cost.average_scaling_efficiency) * 0.15
        
        if requirements.expected_growth == "high":
            score += serverless_ratio * 0.1
        
        return clamp(score, SCORE_FLOOR, 1.0)
