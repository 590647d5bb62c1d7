"""
Cost model service.
Turns a list of services plus requirements into a monthly cost estimate
with scaling projections, using static list prices.
"""
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, replace
from types import MappingProxyType
import logging

from cloudopti.core.config import config
from cloudopti.domain.cost_models import (
    SCALING_MULTIPLIERS,
    CostEstimate,
    ScalingProjection,
    ServiceCost,
)
from cloudopti.domain.service_models import Service, ServiceType
from cloudopti.domain.technology_models import Requirements
from cloudopti.pricing.region_map import describe_region
from cloudopti.pricing.static_pricing import get_service_rates


logger = logging.getLogger(__name__)


# Monthly usage per scale bucket
BASE_USAGE: MappingProxyType = MappingProxyType({
    "small": MappingProxyType({"hours": 100, "executions": 10_000, "storage_gb": 10, "data_transfer_gb": 50}),
    "medium": MappingProxyType({"hours": 300, "executions": 50_000, "storage_gb": 50, "data_transfer_gb": 200}),
    "large": MappingProxyType({"hours": 720, "executions": 200_000, "storage_gb": 200, "data_transfer_gb": 1000}),
})
SCALE_ORDER: Tuple[str, ...] = ("small", "medium", "large")
DEFAULT_SCALE = "small"
FALLBACK_SCALE = "medium"  # Used for unrecognized scale values

TRAFFIC_MULTIPLIERS: MappingProxyType = MappingProxyType({
    "low": 0.5,
    "medium": 1.0,
    "high": 2.0,
    "variable": 0.7,
})
DEFAULT_TRAFFIC = "medium"

# Average serverless execution profile
AVERAGE_EXECUTION_SECONDS = 0.1  # 100 ms
AVERAGE_MEMORY_GB = 0.128  # 128 MB

RESERVED_INSTANCE_DISCOUNTS: MappingProxyType = MappingProxyType({
    "1year": 0.3,
    "3year": 0.5,
})

# A projection never costs less than this share of linear scaling
MIN_SCALING_COST_RATIO = 0.8
MIN_SCALING_EFFICIENCY = 0.1


class CalculationError(Exception):
    """Raised when cost calculation receives structurally invalid input."""
    pass


@dataclass(frozen=True)
class Usage:
    """Estimated monthly usage of one service."""
    hours: float
    executions: float
    compute_time: float  # seconds
    memory_gb_seconds: float
    storage_gb: float
    data_transfer_gb: float


def _serverless_cost(rates: Mapping[str, float], usage: Usage) -> Dict[str, float]:
    return {
        "executions": usage.executions * rates["per_execution"],
        "compute_time": usage.compute_time * rates["per_compute_second"],
        "memory": usage.memory_gb_seconds * rates["per_memory_gb_second"],
    }


def _managed_cost(rates: Mapping[str, float], usage: Usage) -> Dict[str, float]:
    return {
        "base_service": rates["base_price"],
        "usage": usage.hours * rates["per_hour"],
        "storage": usage.storage_gb * rates["per_gb_month"],
        "data_transfer": usage.data_transfer_gb * rates["per_gb_transfer"],
    }


def _traditional_cost(rates: Mapping[str, float], usage: Usage) -> Dict[str, float]:
    return {"compute": usage.hours * rates["per_hour"]}


# Pricing formula per service type; anything else is priced as traditional
COST_STRATEGIES: Mapping[ServiceType, Callable[[Mapping[str, float], Usage], Dict[str, float]]] = MappingProxyType({
    ServiceType.SERVERLESS: _serverless_cost,
    ServiceType.MANAGED: _managed_cost,
    ServiceType.TRADITIONAL: _traditional_cost,
})


class CostModel:
    """Service for estimating monthly costs of a service list."""
    
    def calculate_costs(
        self,
        provider: str,
        services: Sequence[Service],
        requirements: Union[Requirements, Mapping[str, Any], None] = None
    ) -> CostEstimate:
        """
        Calculate the monthly cost estimate for a set of services.
        
        Args:
            provider: Cloud provider (aws, azure, gcp)
            services: Services to price
            requirements: Scale, traffic, region and commitment options
        
        Returns:
            CostEstimate with per-service breakdown and scaling projections
        
        Raises:
            CalculationError: If services is not a list of services
        """
        if not isinstance(services, (list, tuple)):
            raise CalculationError(
                f"Cost calculation failed: services must be a list (got {type(services).__name__})"
            )
        
        requirements = Requirements.coerce(requirements)
        
        try:
            breakdown: Dict[str, ServiceCost] = {}
            total_monthly_cost = 0.0
            
            for service in services:
                service_cost = self.calculate_service_cost(provider, service, requirements)
                breakdown[self._breakdown_key(service, breakdown)] = service_cost
                total_monthly_cost += service_cost.monthly
            
            scaling_projections = self.calculate_scaling_projections(
                provider,
                services,
                requirements,
                total_monthly_cost
            )
        except (AttributeError, TypeError) as error:
            raise CalculationError(f"Cost calculation failed: {error}") from error
        
        logger.debug(
            "Priced %d %s services at $%.2f/month",
            len(services),
            provider,
            total_monthly_cost
        )
        
        return CostEstimate(
            monthly=total_monthly_cost,
            breakdown=MappingProxyType(breakdown),
            scaling_projections=tuple(scaling_projections),
            currency=config.CURRENCY,
            region=requirements.region,
            assumptions=tuple(self.get_cost_assumptions(requirements))
        )
    
    def _breakdown_key(self, service: Service, breakdown: Mapping[str, ServiceCost]) -> str:
        """Service name, qualified by category when the name is already taken."""
        if service.name not in breakdown:
            return service.name
        return f"{service.name} ({service.category})"
    
    def calculate_service_cost(
        self,
        provider: str,
        service: Service,
        requirements: Requirements
    ) -> ServiceCost:
        """
        Calculate monthly cost for a single service.
        
        The pricing formula is chosen by service type. A reserved-instance
        discount applies only when the service carries a reserved-instance
        option and the requirements name a commitment term.
        
        Args:
            provider: Cloud provider
            service: Service to price
            requirements: Requirements driving usage
        
        Returns:
            ServiceCost with component breakdown
        """
        rates = get_service_rates(provider, service.category, service.name)
        usage = self.estimate_usage(service, requirements)
        
        strategy = COST_STRATEGIES.get(service.type, _traditional_cost)
        components = strategy(rates, usage)
        monthly_cost = sum(components.values())
        
        if service.reserved_instance_option is not None and requirements.commitment:
            discount = self.get_reserved_instance_discount(requirements.commitment)
            savings = monthly_cost * discount
            monthly_cost -= savings
            components["reserved_instance_savings"] = savings
        
        return ServiceCost(
            monthly=max(0.0, monthly_cost),
            breakdown=MappingProxyType(components),
        )
    
    def estimate_usage(self, service: Service, requirements: Requirements) -> Usage:
        """
        Estimate monthly usage from the scale bucket and traffic pattern.
        
        Storage is not affected by traffic; everything else is.
        
        Args:
            service: Service being priced
            requirements: Requirements with scale and traffic
        
        Returns:
            Usage estimate
        """
        scale = requirements.scale or DEFAULT_SCALE
        traffic = requirements.traffic or DEFAULT_TRAFFIC
        
        base = BASE_USAGE.get(scale, BASE_USAGE[FALLBACK_SCALE])
        multiplier = TRAFFIC_MULTIPLIERS.get(traffic, 1.0)
        
        executions = base["executions"] * multiplier
        compute_time = executions * AVERAGE_EXECUTION_SECONDS
        return Usage(
            hours=base["hours"] * multiplier,
            executions=executions,
            compute_time=compute_time,
            memory_gb_seconds=compute_time * AVERAGE_MEMORY_GB,
            storage_gb=base["storage_gb"],
            data_transfer_gb=base["data_transfer_gb"] * multiplier,
        )
    
    def calculate_scaling_projections(
        self,
        provider: str,
        services: Sequence[Service],
        requirements: Requirements,
        base_cost: float
    ) -> List[ScalingProjection]:
        """
        Project monthly cost at 2x, 5x and 10x load.
        
        Each projection re-prices the services at a larger scale bucket, then
        floors the result at MIN_SCALING_COST_RATIO of linear growth, both
        from the base cost and from the previous projection. The second
        floor keeps projections strictly increasing once the bucket model
        tops out at 'large'.
        
        Args:
            provider: Cloud provider
            services: Services to price
            requirements: Base requirements
            base_cost: Current monthly cost
        
        Returns:
            List of ScalingProjection in increasing scale order
        """
        projections: List[ScalingProjection] = []
        previous_cost = base_cost
        previous_multiplier = 1.0
        
        for label, multiplier in SCALING_MULTIPLIERS:
            scaled_requirements = replace(
                requirements,
                scale=self.get_scaled_size(requirements.scale, multiplier)
            )
            
            bucket_cost = sum(
                self.calculate_service_cost(provider, service, scaled_requirements).monthly
                for service in services
            )
            scaled_cost = max(
                bucket_cost,
                base_cost * multiplier * MIN_SCALING_COST_RATIO,
                previous_cost * (multiplier / previous_multiplier) * MIN_SCALING_COST_RATIO,
            )
            
            if base_cost > 0:
                efficiency = max(MIN_SCALING_EFFICIENCY, scaled_cost / base_cost / multiplier)
            else:
                efficiency = 1.0
            
            projections.append(ScalingProjection(
                scale=label,
                monthly_cost=scaled_cost,
                cost_increase=scaled_cost - base_cost,
                efficiency=efficiency
            ))
            previous_cost = scaled_cost
            previous_multiplier = multiplier
        
        return projections
    
    def get_scaled_size(self, current_scale: Optional[str], multiplier: float) -> str:
        """
        Get the scale bucket for a load multiplier.
        
        Args:
            current_scale: Current scale bucket (None means small)
            multiplier: Load multiplier
        
        Returns:
            Scale bucket, never smaller than the current one
        """
        current_scale = current_scale or DEFAULT_SCALE
        if multiplier >= 5:
            return "large"
        if multiplier >= 2:
            current_index = SCALE_ORDER.index(current_scale) if current_scale in SCALE_ORDER else 0
            return "medium" if current_index < 1 else "large"
        return current_scale
    
    def get_reserved_instance_discount(self, commitment: str) -> float:
        """Discount fraction for a commitment term, 0.0 when unknown."""
        return RESERVED_INSTANCE_DISCOUNTS.get(commitment, 0.0)
    
    def get_cost_assumptions(self, requirements: Requirements) -> List[str]:
        """
        Get the disclaimers attached to every estimate.
        
        Args:
            requirements: Requirements (only the region is used)
        
        Returns:
            List of assumption strings
        """
        return [
            "Costs are estimates based on typical usage patterns",
            "Actual costs may vary based on specific usage and configuration",
            "Prices are subject to change by cloud providers",
            f"Calculations assume {describe_region(requirements.region)} region pricing",
            "Data transfer costs may vary based on traffic patterns",
            "Reserved instance pricing requires upfront commitment",
        ]
