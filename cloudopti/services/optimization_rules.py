"""
Optimization rules applied to mapped services before pricing.

OPTIMIZATION_RULES is an ordered pipeline of pure list transforms. Order
matters: the managed-service swap runs first so that a self-managed VM can
still be turned serverless by the second rule through the alternative it
carries over.
"""
from typing import Callable, Dict, List, Sequence, Tuple
from dataclasses import dataclass, replace
import logging

from cloudopti.catalog.service_catalog import ServiceCatalog
from cloudopti.domain.service_models import ReservedInstanceOption, Service, ServiceType
from cloudopti.domain.technology_models import Requirements


logger = logging.getLogger(__name__)


SERVERLESS_TRAFFIC_PATTERNS = {"variable", "low"}
RESERVED_INSTANCE_OPTION = ReservedInstanceOption(
    savings="30-60% cost reduction",
    commitment="1-3 years",
    recommendation="Recommended for predictable workloads",
)
SERVERLESS_COST_NOTE = "Pay-per-use pricing for variable workloads"


@dataclass(frozen=True)
class OptimizationRule:
    """A named service-list transform with its precondition."""
    name: str
    description: str
    applies: Callable[[Requirements], bool]
    transform: Callable[[List[Service], Requirements, ServiceCatalog], List[Service]]


def merge_duplicate_services(services: Sequence[Service]) -> List[Service]:
    """
    Collapse services that ended up with the same category and name.
    
    The first occurrence keeps its position; supported technologies are
    unioned and the highest confidence wins.
    """
    merged: Dict[str, Service] = {}
    for service in services:
        existing = merged.get(service.key)
        if existing is None:
            merged[service.key] = service
            continue
        supported = existing.supported_technologies + tuple(
            name for name in service.supported_technologies
            if name not in existing.supported_technologies
        )
        merged[service.key] = replace(
            existing,
            supported_technologies=supported,
            confidence=max(existing.confidence, service.confidence)
        )
    return list(merged.values())


def prefer_managed_services(
    services: List[Service],
    requirements: Requirements,
    catalog: ServiceCatalog
) -> List[Service]:
    """
    Replace self-managed services with their managed alternative.
    
    The replacement inherits the technologies and confidence of the service
    it replaces, and its serverless alternative when it has none of its own.
    """
    optimized = []
    for service in services:
        alternative = catalog.get_managed_alternative(service)
        if alternative is None:
            optimized.append(service)
            continue
        optimized.append(replace(
            alternative,
            supported_technologies=service.supported_technologies,
            confidence=service.confidence,
            serverless_alternative=alternative.serverless_alternative or service.serverless_alternative
        ))
    return merge_duplicate_services(optimized)


def suggest_serverless_options(
    services: List[Service],
    requirements: Requirements,
    catalog: ServiceCatalog
) -> List[Service]:
    """Swap compute services to their serverless alternative."""
    optimized = []
    for service in services:
        if service.category == "compute" and service.serverless_alternative:
            optimized.append(replace(
                service,
                name=service.serverless_alternative,
                type=ServiceType.SERVERLESS,
                cost_optimization=SERVERLESS_COST_NOTE
            ))
        else:
            optimized.append(service)
    return merge_duplicate_services(optimized)


def add_reserved_instance_options(
    services: List[Service],
    requirements: Requirements,
    catalog: ServiceCatalog
) -> List[Service]:
    """
    Annotate compute services with a reserved-instance descriptor.
    
    The annotation alone does not change cost; the cost model discounts
    only when the requirements also name a commitment term.
    """
    return [
        replace(
            service,
            supports_reserved_instances=True,
            reserved_instance_option=RESERVED_INSTANCE_OPTION
        ) if service.category == "compute" else service
        for service in services
    ]


def optimize_for_region(
    services: List[Service],
    requirements: Requirements,
    catalog: ServiceCatalog
) -> List[Service]:
    """Apply catalog regional overrides (none are defined yet)."""
    optimized = []
    for service in services:
        overrides = catalog.get_regional_optimization(service, requirements.region)
        optimized.append(replace(service, **overrides) if overrides else service)
    return optimized


OPTIMIZATION_RULES: Tuple[OptimizationRule, ...] = (
    OptimizationRule(
        name="prefer_managed_services",
        description="Always: swap self-managed services for managed equivalents",
        applies=lambda requirements: True,
        transform=prefer_managed_services,
    ),
    OptimizationRule(
        name="suggest_serverless_options",
        description="Only when traffic is variable or low: move compute to serverless",
        applies=lambda requirements: requirements.traffic in SERVERLESS_TRAFFIC_PATTERNS,
        transform=suggest_serverless_options,
    ),
    OptimizationRule(
        name="add_reserved_instance_options",
        description="Only when the workload is predictable: offer reserved compute capacity",
        applies=lambda requirements: requirements.workload == "predictable",
        transform=add_reserved_instance_options,
    ),
    OptimizationRule(
        name="optimize_for_region",
        description="When a region is set: apply regional overrides",
        applies=lambda requirements: bool(requirements.region),
        transform=optimize_for_region,
    ),
)


def apply_optimization_rules(
    services: Sequence[Service],
    requirements: Requirements,
    catalog: ServiceCatalog,
    rules: Sequence[OptimizationRule] = OPTIMIZATION_RULES
) -> List[Service]:
    """
    Run the optimization pipeline over a service list.
    
    Args:
        services: Services mapped from technologies
        requirements: Requirements selecting which rules apply
        catalog: Catalog providing managed and regional lookups
        rules: Ordered rules to apply
    
    Returns:
        New list of services; the input list is not modified
    """
    optimized = list(services)
    for rule in rules:
        if not rule.applies(requirements):
            continue
        optimized = rule.transform(optimized, requirements, catalog)
        logger.debug("Applied optimization rule %s (%d services)", rule.name, len(optimized))
    return optimized
