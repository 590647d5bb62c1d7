"""
Architecture recommendation orchestrator.
Maps technologies to services, optimizes, prices and ranks one
architecture per cloud provider.
"""
from typing import Any, List, Mapping, Optional, Sequence, Union
import hashlib
import json
import logging

from cloudopti.catalog.service_catalog import ServiceCatalog
from cloudopti.core.config import config
from cloudopti.domain.recommendation_models import Optimization, Recommendation
from cloudopti.domain.service_models import Service
from cloudopti.domain.technology_models import Requirements, Technology
from cloudopti.services.cost_model import CostModel
from cloudopti.services.optimization_rules import apply_optimization_rules
from cloudopti.services.ranker import Ranker
from cloudopti.utils.scoring import clamp


logger = logging.getLogger(__name__)


WEB_APP_WITH_DATABASE_REASON = (
    "Web application with database detected - recommended managed database "
    "service for reliability and scalability"
)


class RecommendationGenerationError(Exception):
    """Raised when any step of recommendation generation fails."""
    
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


def coerce_technologies(technologies: Sequence[Union[Technology, Mapping[str, Any]]]) -> List[Technology]:
    """Accept Technology instances or detector dicts."""
    return [
        technology if isinstance(technology, Technology) else Technology.from_dict(technology)
        for technology in technologies
    ]


def build_recommendation_id(
    provider: str,
    technologies: Sequence[Technology],
    requirements: Requirements
) -> str:
    """
    Derive a stable recommendation id from its inputs.
    
    Identical inputs always produce the same id, and the provider prefix
    keeps ids unique within one call.
    """
    payload = json.dumps(
        {
            "provider": provider,
            "technologies": [technology.to_dict() for technology in technologies],
            "requirements": requirements.to_dict(),
        },
        sort_keys=True,
        default=str
    )
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    return f"{provider}-{digest[:12]}"


class RecommendationOrchestrator:
    """Service composing catalog, cost model and ranker into recommendations."""
    
    def __init__(
        self,
        catalog: ServiceCatalog = None,
        cost_model: CostModel = None,
        ranker: Ranker = None
    ):
        """
        Initialize the orchestrator.
        
        Args:
            catalog: Service catalog (creates new if None)
            cost_model: Cost model (creates new if None)
            ranker: Ranker (creates new if None)
        """
        self.catalog = catalog or ServiceCatalog()
        self.cost_model = cost_model or CostModel()
        self.ranker = ranker or Ranker()
    
    def generate_recommendations(
        self,
        technologies: Sequence[Union[Technology, Mapping[str, Any]]],
        requirements: Union[Requirements, Mapping[str, Any], None] = None
    ) -> List[Recommendation]:
        """
        Generate ranked recommendations for every supported provider.
        
        Either all providers succeed or the whole call fails; partial
        results are never returned.
        
        Args:
            technologies: Detected technologies
            requirements: Requirements mapping or instance (None for defaults)
        
        Returns:
            One Recommendation per provider, sorted by score descending
        
        Raises:
            RecommendationGenerationError: If any step fails
        """
        try:
            technologies = coerce_technologies(technologies)
            requirements = Requirements.coerce(requirements)
            
            recommendations = [
                self.generate_provider_recommendation(provider, technologies, requirements)
                for provider in config.PROVIDERS
            ]
            ranked = self.ranker.rank_recommendations(recommendations, requirements)
        except Exception as error:
            logger.error(
                f"Recommendation generation failed: {type(error).__name__}: {error}",
                exc_info=True
            )
            raise RecommendationGenerationError(
                f"Failed to generate recommendations: {error}",
                cause=error
            ) from error
        
        logger.info(
            "Generated %d recommendations for %d technologies (top: %s)",
            len(ranked),
            len(technologies),
            ranked[0].provider if ranked else "none"
        )
        return ranked
    
    def generate_provider_recommendation(
        self,
        provider: str,
        technologies: Sequence[Technology],
        requirements: Requirements
    ) -> Recommendation:
        """
        Build the unscored recommendation for one provider.
        
        Args:
            provider: Cloud provider (aws, azure, gcp)
            technologies: Detected technologies
            requirements: Requirements
        
        Returns:
            Recommendation with services, cost, reasoning and confidence
        """
        services = self.catalog.map_technologies_to_services(provider, technologies)
        optimized_services = self.apply_optimization_rules(services, requirements)
        
        cost_estimate = self.cost_model.calculate_costs(provider, optimized_services, requirements)
        
        return Recommendation(
            id=build_recommendation_id(provider, technologies, requirements),
            provider=provider,
            services=tuple(optimized_services),
            estimated_cost=cost_estimate,
            reasoning=tuple(self.generate_reasoning(technologies, optimized_services)),
            confidence=self.calculate_confidence(technologies, optimized_services),
            optimizations=tuple(self.get_optimization_suggestions(optimized_services, requirements)),
        )
    
    def apply_optimization_rules(
        self,
        services: Sequence[Service],
        requirements: Union[Requirements, Mapping[str, Any], None]
    ) -> List[Service]:
        """Run the optimization rule pipeline against this orchestrator's catalog."""
        return apply_optimization_rules(services, Requirements.coerce(requirements), self.catalog)
    
    def generate_reasoning(
        self,
        technologies: Sequence[Technology],
        services: Sequence[Service]
    ) -> List[str]:
        """
        Generate human-readable reasoning lines.
        
        One line per technology backed by at least one service, in input
        order, followed by a pattern line for web apps with a database.
        
        Args:
            technologies: Detected technologies
            services: Final services
        
        Returns:
            List of reasoning strings
        """
        reasoning = []
        
        for technology in technologies:
            related = [
                service.name for service in services
                if technology.name in service.supported_technologies
            ]
            if related:
                reasoning.append(
                    f"{technology.name} detected - recommended {', '.join(related)} for optimal compatibility"
                )
        
        has_database = any(technology.category == "database" for technology in technologies)
        has_web_framework = any(technology.category == "framework" for technology in technologies)
        if has_database and has_web_framework:
            reasoning.append(WEB_APP_WITH_DATABASE_REASON)
        
        return reasoning
    
    def calculate_confidence(
        self,
        technologies: Sequence[Technology],
        services: Sequence[Service]
    ) -> float:
        """
        Self-assessed confidence that the services suit the stack.
        
        Args:
            technologies: Detected technologies
            services: Final services
        
        Returns:
            Confidence in [0, 1]
        """
        if not technologies:
            return 0.3 if services else 0.1
        
        average_confidence = sum(technology.confidence for technology in technologies) / len(technologies)
        service_match = 0.8 if services else 0.3
        return clamp(average_confidence * service_match)
    
    def get_optimization_suggestions(
        self,
        services: Sequence[Service],
        requirements: Union[Requirements, Mapping[str, Any], None] = None
    ) -> List[Optimization]:
        """
        Get advisory optimization suggestions for an architecture.
        
        Args:
            services: Final services
            requirements: Requirements (currently unused by the suggestions)
        
        Returns:
            List of Optimization suggestions
        """
        suggestions = []
        
        if any(service.category == "compute" for service in services):
            suggestions.append(Optimization(
                type="cost",
                title="Consider Auto Scaling",
                description="Implement auto scaling to optimize costs during low traffic periods",
                potential_savings="20-40%"
            ))
        
        if any(service.category == "database" for service in services):
            suggestions.append(Optimization(
                type="performance",
                title="Add Caching Layer",
                description="Implement caching to reduce database load and improve response times",
                benefit="Improved performance and reduced database costs"
            ))
        
        return suggestions
