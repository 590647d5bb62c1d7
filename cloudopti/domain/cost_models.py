"""
Domain models for cost estimation.
Defines the structure of cost estimates, per-service costs and projections.
"""
from typing import List, Dict, Any, Tuple
from dataclasses import dataclass
from types import MappingProxyType

from cloudopti.utils.scoring import round_money


# Scaling projection labels and their load multipliers
SCALING_MULTIPLIERS: Tuple[Tuple[str, float], ...] = (
    ("2x", 2.0),
    ("5x", 5.0),
    ("10x", 10.0),
)


@dataclass(frozen=True)
class ServiceCost:
    """Monthly cost of a single service with its component breakdown."""
    monthly: float
    breakdown: MappingProxyType  # component name -> USD
    unit: str = "USD"
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "monthly": round_money(self.monthly),
            "breakdown": {
                component: round_money(amount)
                for component, amount in self.breakdown.items()
            },
            "unit": self.unit,
        }


@dataclass(frozen=True)
class ScalingProjection:
    """Predicted monthly cost at a multiple of the estimated load."""
    scale: str  # "2x" | "5x" | "10x"
    monthly_cost: float
    cost_increase: float
    efficiency: float
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "scale": self.scale,
            "monthly_cost": round_money(self.monthly_cost),
            "cost_increase": round_money(self.cost_increase),
            "efficiency": round(self.efficiency, 2),
        }


@dataclass(frozen=True)
class CostEstimate:
    """Represents a complete monthly cost estimate for one provider."""
    monthly: float
    breakdown: MappingProxyType  # service name -> ServiceCost
    scaling_projections: Tuple[ScalingProjection, ...]
    currency: str
    region: str
    assumptions: Tuple[str, ...]
    
    @property
    def average_scaling_efficiency(self) -> float:
        """Mean efficiency across projections; 1.0 when there are none."""
        if not self.scaling_projections:
            return 1.0
        total = sum(projection.efficiency for projection in self.scaling_projections)
        return total / len(self.scaling_projections)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        # Sort services by monthly cost descending
        sorted_services: List[Tuple[str, ServiceCost]] = sorted(
            self.breakdown.items(),
            key=lambda item: item[1].monthly,
            reverse=True
        )
        
        return {
            "monthly": round_money(self.monthly),
            "currency": self.currency,
            "region": self.region,
            "breakdown": {name: cost.to_dict() for name, cost in sorted_services},
            "scaling_projections": [projection.to_dict() for projection in self.scaling_projections],
            "assumptions": list(self.assumptions),
        }
