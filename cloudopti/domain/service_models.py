"""
Domain models for cloud services.
A Service is a provider-specific building block mapped from technologies.
"""
from typing import Any, Dict, Optional, Tuple
from dataclasses import dataclass
from enum import Enum


class ServiceType(str, Enum):
    """Operational model of a service; selects the pricing formula."""
    SERVERLESS = "serverless"
    MANAGED = "managed"
    TRADITIONAL = "traditional"


@dataclass(frozen=True)
class ReservedInstanceOption:
    """Reserved-capacity descriptor attached to compute services."""
    savings: str
    commitment: str
    recommendation: str
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "savings": self.savings,
            "commitment": self.commitment,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class Service:
    """
    A cloud service candidate.
    
    Catalog templates and per-request services share this type; templates
    simply have no supported technologies and zero confidence. Instances are
    never mutated, optimization rules derive new ones with
    dataclasses.replace().
    """
    name: str
    category: str  # compute | hosting | database | storage | cache | container
    purpose: str
    type: ServiceType
    supported_technologies: Tuple[str, ...] = ()
    confidence: float = 0.0
    alternatives: Tuple[str, ...] = ()
    cost_factors: Tuple[str, ...] = ()
    serverless_alternative: Optional[str] = None
    supports_reserved_instances: bool = False
    reserved_instance_option: Optional[ReservedInstanceOption] = None
    cost_optimization: Optional[str] = None
    benefit: Optional[str] = None
    
    @property
    def key(self) -> str:
        """Identity used for de-duplication and managed-alternative lookup."""
        return f"{self.category}-{self.name}"
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "name": self.name,
            "category": self.category,
            "purpose": self.purpose,
            "type": self.type.value,
            "supported_technologies": list(self.supported_technologies),
            "confidence": self.confidence,
            "alternatives": list(self.alternatives),
            "cost_factors": list(self.cost_factors),
            "supports_reserved_instances": self.supports_reserved_instances,
        }
        if self.serverless_alternative is not None:
            result["serverless_alternative"] = self.serverless_alternative
        if self.reserved_instance_option is not None:
            result["reserved_instance_option"] = self.reserved_instance_option.to_dict()
        if self.cost_optimization is not None:
            result["cost_optimization"] = self.cost_optimization
        if self.benefit is not None:
            result["benefit"] = self.benefit
        return result
