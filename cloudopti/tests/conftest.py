"""
Shared pytest fixtures for recommendation engine tests.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import pytest
from types import MappingProxyType
from fastapi.testclient import TestClient

from cloudopti.main import app
from cloudopti.catalog.service_catalog import ServiceCatalog
from cloudopti.domain.cost_models import CostEstimate, ScalingProjection
from cloudopti.domain.recommendation_models import Recommendation
from cloudopti.domain.service_models import Service, ServiceType
from cloudopti.domain.technology_models import Technology
from cloudopti.services.cost_model import CostModel
from cloudopti.services.ranker import Ranker
from cloudopti.services.recommendation_orchestrator import RecommendationOrchestrator


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def catalog():
    """Service catalog backed by the built-in mappings."""
    return ServiceCatalog()


@pytest.fixture
def cost_model():
    """Cost model with static pricing."""
    return CostModel()


@pytest.fixture
def ranker():
    """Recommendation ranker."""
    return Ranker()


@pytest.fixture
def orchestrator():
    """Orchestrator wired with real collaborators."""
    return RecommendationOrchestrator()


@pytest.fixture
def javascript():
    """A single detected JavaScript language."""
    return Technology(name="javascript", category="language", confidence=0.9)


@pytest.fixture
def full_stack_technologies():
    """JavaScript + React + PostgreSQL web application."""
    return [
        Technology(name="javascript", category="language", confidence=0.9, source="github_languages"),
        Technology(name="react", category="framework", confidence=0.8, source="package_dependencies"),
        Technology(name="postgresql", category="database", confidence=0.85, source="package_dependencies"),
    ]


@pytest.fixture
def lambda_service():
    """AWS Lambda as mapped from JavaScript."""
    return Service(
        name="Lambda",
        category="compute",
        purpose="Serverless function execution",
        type=ServiceType.SERVERLESS,
        supported_technologies=("javascript",),
        confidence=0.9,
        alternatives=("EC2", "ECS", "App Runner"),
        serverless_alternative="Lambda",
    )


@pytest.fixture
def rds_service():
    """AWS RDS PostgreSQL as mapped from PostgreSQL."""
    return Service(
        name="RDS PostgreSQL",
        category="database",
        purpose="Managed PostgreSQL database",
        type=ServiceType.MANAGED,
        supported_technologies=("postgresql",),
        confidence=0.85,
        alternatives=("Aurora PostgreSQL", "EC2 self-managed"),
    )


@pytest.fixture
def make_recommendation():
    """Factory for unscored recommendations with a synthetic cost estimate."""
    def _make(provider="aws", services=(), monthly=100.0, efficiencies=(), rec_id=None):
        projections = tuple(
            ScalingProjection(
                scale=f"{index + 2}x",
                monthly_cost=monthly * (index + 2),
                cost_increase=monthly * (index + 1),
                efficiency=efficiency
            )
            for index, efficiency in enumerate(efficiencies)
        )
        estimate = CostEstimate(
            monthly=monthly,
            breakdown=MappingProxyType({}),
            scaling_projections=projections,
            currency="USD",
            region="us-east-1",
            assumptions=()
        )
        return Recommendation(
            id=rec_id or f"{provider}-test",
            provider=provider,
            services=tuple(services),
            estimated_cost=estimate,
        )
    return _make
