"""
Static list prices for catalog services.

Rates are indicative on-demand list prices (USD) and are never fetched at
runtime. Any rate a service does not define falls back to DEFAULT_RATES, so
pricing an unrecognized service always succeeds.
"""
from typing import Dict, Any
from types import MappingProxyType
import logging


logger = logging.getLogger(__name__)


DEFAULT_RATES: MappingProxyType = MappingProxyType({
    "per_hour": 0.10,
    "per_execution": 0.0000002,
    "per_compute_second": 0.0000166667,
    "per_memory_gb_second": 0.0000166667,
    "per_gb_month": 0.10,
    "per_gb_transfer": 0.09,
    "base_price": 0.0,
})


_PRICING_TABLE: Dict[str, Dict[str, Dict[str, Dict[str, float]]]] = {
    "aws": {
        "compute": {
            "Lambda": {
                "per_execution": 0.0000002,
                "per_compute_second": 0.0000166667,
                "per_memory_gb_second": 0.0000166667,
            },
            "App Runner": {"per_hour": 0.007, "per_gb_month": 0.20},
            "EC2": {"per_hour": 0.0116},  # t3.micro
            "Elastic Beanstalk": {"per_hour": 0.0116, "per_gb_month": 0.10},  # t3.micro backing instance
        },
        "hosting": {
            "S3 + CloudFront": {"per_hour": 0.0, "per_gb_month": 0.023, "per_gb_transfer": 0.085},
            "Amplify": {"per_hour": 0.0, "per_gb_month": 0.15, "per_gb_transfer": 0.15},
        },
        "database": {
            "RDS PostgreSQL": {"per_hour": 0.017, "per_gb_month": 0.115},  # db.t3.micro
            "Aurora PostgreSQL": {"per_hour": 0.06, "per_gb_month": 0.10},  # 0.5 ACU
            "RDS MySQL": {"per_hour": 0.017, "per_gb_month": 0.115},
            "Aurora MySQL": {"per_hour": 0.06, "per_gb_month": 0.10},
            "DocumentDB": {"per_hour": 0.076, "per_gb_month": 0.10},  # db.t3.medium
        },
        "cache": {
            "ElastiCache for Redis": {"per_hour": 0.017, "per_gb_month": 0.0},  # cache.t4g.micro
        },
        "container": {
            "ECS on Fargate": {"per_hour": 0.0494},  # 1 vCPU / 2 GB task
            "EKS": {"base_price": 73.0, "per_hour": 0.0416},  # control plane + t3.medium node
        },
    },
    "azure": {
        "compute": {
            "Functions": {"per_execution": 0.0000002, "per_compute_second": 0.000016},
            "App Service": {"per_hour": 0.018},  # Basic B1
            "Virtual Machines": {"per_hour": 0.0104},  # B1s
            "Container Apps": {"per_hour": 0.034},
            "Spring Apps": {"per_hour": 0.0595},
        },
        "hosting": {
            "Static Web Apps": {"base_price": 0.0, "per_hour": 0.0, "per_gb_transfer": 0.087},
        },
        "database": {
            "Database for PostgreSQL": {"per_hour": 0.022, "per_gb_month": 0.115},  # Basic B1ms
            "Database for MySQL": {"per_hour": 0.022, "per_gb_month": 0.115},
            "Cosmos DB": {"per_hour": 0.032, "per_gb_month": 0.25},  # 400 RU/s provisioned
        },
        "cache": {
            "Cache for Redis": {"per_hour": 0.022, "per_gb_month": 0.0},  # C0 Basic
        },
        "container": {
            "Container Instances": {"per_hour": 0.0405},
            "AKS": {"per_hour": 0.096},  # free control plane + D2s v3 node
        },
    },
    "gcp": {
        "compute": {
            "Cloud Functions": {
                "per_execution": 0.0000004,
                "per_compute_second": 0.0000024,
                "per_memory_gb_second": 0.0000025,
            },
            "Cloud Run": {"per_hour": 0.0864},  # 1 vCPU always allocated
            "App Engine": {"per_hour": 0.05},  # F1 instance class
            "Compute Engine": {"per_hour": 0.0104},  # e2-micro
        },
        "hosting": {
            "Firebase Hosting": {"per_hour": 0.0, "per_gb_month": 0.026, "per_gb_transfer": 0.15},
            "Cloud Run": {"per_hour": 0.0864},
        },
        "database": {
            "Cloud SQL PostgreSQL": {"per_hour": 0.0150, "per_gb_month": 0.090},  # db-f1-micro
            "Cloud SQL MySQL": {"per_hour": 0.0150, "per_gb_month": 0.090},
            "Firestore": {"per_hour": 0.0, "per_gb_month": 0.18, "per_gb_transfer": 0.12},
        },
        "cache": {
            "Memorystore for Redis": {"per_hour": 0.049, "per_gb_month": 0.0},  # 1 GB Basic
        },
        "container": {
            "Cloud Run": {"per_hour": 0.0864},
            "GKE Autopilot": {"base_price": 73.0, "per_hour": 0.0445},
        },
    },
}


def _freeze(value: Any) -> Any:
    """Recursively wrap nested dicts in read-only mapping proxies."""
    if isinstance(value, dict):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    return value


PRICING_TABLE: MappingProxyType = _freeze(_PRICING_TABLE)


def get_service_rates(provider: str, category: str, service_name: str) -> MappingProxyType:
    """
    Get pricing rates for a service, filled in with defaults.
    
    Args:
        provider: Cloud provider (aws, azure, gcp)
        category: Service category (compute, hosting, ...)
        service_name: Service name as it appears in the catalog
    
    Returns:
        Read-only mapping containing every key of DEFAULT_RATES
    """
    provider_pricing = PRICING_TABLE.get(provider, {})
    category_pricing = provider_pricing.get(category, {})
    service_pricing = category_pricing.get(service_name)
    
    if service_pricing is None:
        logger.debug(
            "No list price for %s/%s/%s, using default rates",
            provider,
            category,
            service_name,
        )
        return DEFAULT_RATES
    
    rates = dict(DEFAULT_RATES)
    rates.update(service_pricing)
    return MappingProxyType(rates)
