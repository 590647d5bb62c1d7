"""
Tests for requirement parsing, technology payloads and model serialization.
"""

import pytest
from types import MappingProxyType

from cloudopti.core.config import config
from cloudopti.domain.cost_models import CostEstimate, ServiceCost
from cloudopti.domain.recommendation_models import Optimization
from cloudopti.domain.technology_models import Requirements, Technology
from cloudopti.utils.scoring import clamp, ratio, round_money


def test_requirements_defaults_when_missing():
    """None and empty mappings produce documented defaults."""
    for data in (None, {}):
        requirements = Requirements.from_dict(data)
        assert requirements.scale is None
        assert requirements.traffic is None
        assert requirements.region == config.DEFAULT_REGION
        assert requirements.max_budget == config.DEFAULT_MAX_BUDGET
        assert requirements.priority == "default"
        assert requirements.organization_type == "default"


def test_requirements_accept_camel_and_snake_case():
    """Both key styles map onto the same fields."""
    camel = Requirements.from_dict({"maxBudget": 250, "organizationType": "startup", "expectedGrowth": "high"})
    snake = Requirements.from_dict({"max_budget": 250, "organization_type": "startup", "expected_growth": "high"})
    assert camel == snake
    assert camel.max_budget == 250.0
    assert camel.organization_type == "startup"


def test_requirements_ignore_unknown_and_empty_values():
    """Unknown keys, None and empty strings fall back to defaults."""
    requirements = Requirements.from_dict({"colour": "blue", "region": "", "scale": None, "traffic": "high"})
    assert requirements.region == config.DEFAULT_REGION
    assert requirements.scale is None
    assert requirements.traffic == "high"


@pytest.mark.parametrize("budget", [0, -50, "lots", None, float("nan"), float("inf"), "NaN"])
def test_invalid_budget_uses_default(budget):
    """Non-positive, non-finite or non-numeric budgets are replaced by the default."""
    requirements = Requirements.from_dict({"maxBudget": budget})
    assert requirements.max_budget == config.DEFAULT_MAX_BUDGET


def test_technology_from_detector_payload():
    """Detector dicts become technologies with defaults for optional keys."""
    technology = Technology.from_dict({"name": "Python", "category": "language"})
    assert technology.confidence == 0.0
    assert technology.evidence == ()
    assert technology.id is None
    assert "id" not in technology.to_dict()


def test_optimization_rejects_unknown_type():
    """Optimization types are a closed set."""
    with pytest.raises(ValueError):
        Optimization(type="vibes", title="x", description="y")


def test_cost_estimate_rounds_only_when_serialized():
    """Internal amounts keep full precision; to_dict rounds to cents."""
    service_cost = ServiceCost(monthly=0.020833, breakdown=MappingProxyType({"executions": 0.002}))
    estimate = CostEstimate(
        monthly=7.220833,
        breakdown=MappingProxyType({"Lambda": service_cost}),
        scaling_projections=(),
        currency="USD",
        region="us-east-1",
        assumptions=(),
    )
    assert estimate.monthly == 7.220833
    data = estimate.to_dict()
    assert data["monthly"] == 7.22
    assert data["breakdown"]["Lambda"]["monthly"] == 0.02
    assert estimate.average_scaling_efficiency == 1.0


def test_clamp_and_ratio_helpers():
    """Score helpers stay within bounds."""
    assert clamp(1.7) == 1.0
    assert clamp(-0.2) == 0.0
    assert clamp(0.05, 0.1, 1.0) == 0.1
    assert ratio([], bool) == 0.0
    assert ratio([1, 0, 1, 1], bool) == 0.75
    assert round_money(7.2208333) == 7.22
    with pytest.raises(ValueError):
        clamp(0.5, 1.0, 0.0)


def test_invalid_budget_is_logged(caplog):
    """Replacing a budget is reported."""
    with caplog.at_level("WARNING", logger="cloudopti.domain.technology_models"):
        Requirements.from_dict({"maxBudget": float("nan")})
    assert "Ignoring invalid maxBudget" in caplog.text


def test_clamp_rejects_nan():
    """NaN never passes through as a score."""
    with pytest.raises(ValueError, match="NaN"):
        clamp(float("nan"))


def test_coerce_requirements():
    """Instances pass through; mappings and None are parsed."""
    requirements = Requirements(scale="large")
    assert Requirements.coerce(requirements) is requirements
    assert Requirements.coerce({"scale": "large"}) == requirements
    assert Requirements.coerce(None) == Requirements()
