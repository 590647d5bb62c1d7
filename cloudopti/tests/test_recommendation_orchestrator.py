"""
Tests for end-to-end recommendation generation.
"""

import copy
import pytest
from unittest.mock import Mock

from cloudopti.domain.technology_models import Requirements, Technology
from cloudopti.services.cost_model import CalculationError, CostModel
from cloudopti.services.ranker import Ranker, RankingError
from cloudopti.services.recommendation_orchestrator import (
    WEB_APP_WITH_DATABASE_REASON,
    RecommendationGenerationError,
    RecommendationOrchestrator,
    build_recommendation_id,
)


REQUIREMENT_VARIANTS = [
    {},
    {"scale": "large", "traffic": "high"},
    {"traffic": "variable", "priority": "cost", "organizationType": "startup"},
    {"workload": "predictable", "commitment": "3year", "organizationType": "enterprise"},
    {"maxBudget": 5, "performance": "high", "expectedGrowth": "high"},
]


def test_single_language_gets_one_recommendation_per_provider(orchestrator, javascript):
    """A lone JavaScript detection is priced on every provider."""
    recommendations = orchestrator.generate_recommendations([javascript], {})
    
    assert len(recommendations) == 3
    assert sorted(recommendation.provider for recommendation in recommendations) == ["aws", "azure", "gcp"]
    for recommendation in recommendations:
        assert len(recommendation.services) >= 1
        assert recommendation.estimated_cost.monthly > 0


def test_full_stack_gets_one_recommendation_per_provider(orchestrator, full_stack_technologies):
    """A JavaScript + React + PostgreSQL app is priced on every provider."""
    recommendations = orchestrator.generate_recommendations(full_stack_technologies, {})
    
    assert len(recommendations) == 3
    assert {recommendation.provider for recommendation in recommendations} == {"aws", "azure", "gcp"}
    for recommendation in recommendations:
        assert len(recommendation.services) >= 1
        assert recommendation.estimated_cost.monthly > 0
        assert WEB_APP_WITH_DATABASE_REASON in recommendation.reasoning


def test_no_technologies_gives_low_confidence(orchestrator):
    """Without technologies, recommendations carry low confidence."""
    recommendations = orchestrator.generate_recommendations([], {})
    
    assert len(recommendations) == 3
    for recommendation in recommendations:
        assert recommendation.confidence < 0.5
        assert recommendation.services == ()
        assert recommendation.estimated_cost.monthly == 0


def test_tight_budget_lowers_scores(orchestrator, javascript):
    """A budget close to the estimated cost keeps every score below 0.8."""
    recommendations = orchestrator.generate_recommendations([javascript], {"maxBudget": 10})
    
    for recommendation in recommendations:
        assert recommendation.score < 0.8


def test_priority_changes_weights_and_scores(orchestrator, javascript):
    """Cost and performance priorities weight the ranking differently."""
    by_cost = orchestrator.generate_recommendations([javascript], {"priority": "cost"})
    by_performance = orchestrator.generate_recommendations([javascript], {"priority": "performance"})
    
    assert by_cost[0].score_breakdown["cost"].weight > 0.3
    assert by_performance[0].score_breakdown["performance"].weight > 0.3
    assert abs(by_cost[0].score - by_performance[0].score) > 1e-9


@pytest.mark.parametrize("requirements", REQUIREMENT_VARIANTS)
def test_scores_and_confidence_stay_in_range(orchestrator, full_stack_technologies, requirements):
    """Scores and confidences are always in [0, 1] and explained by their breakdown."""
    recommendations = orchestrator.generate_recommendations(full_stack_technologies, requirements)
    
    scores = [recommendation.score for recommendation in recommendations]
    assert scores == sorted(scores, reverse=True)
    for recommendation in recommendations:
        assert 0.0 <= recommendation.score <= 1.0
        assert 0.0 <= recommendation.confidence <= 1.0
        contributions = sum(entry.contribution for entry in recommendation.score_breakdown.values())
        assert contributions == pytest.approx(recommendation.score)
        projections = recommendation.estimated_cost.scaling_projections
        costs = [projection.monthly_cost for projection in projections]
        assert costs == sorted(costs)
        assert len(set(costs)) == 3


def test_recommendation_ids_are_deterministic(orchestrator, full_stack_technologies):
    """Identical inputs give identical ids; providers never share one."""
    first = orchestrator.generate_recommendations(full_stack_technologies, {"scale": "medium"})
    second = orchestrator.generate_recommendations(full_stack_technologies, {"scale": "medium"})
    other = orchestrator.generate_recommendations(full_stack_technologies, {"scale": "large"})
    
    first_ids = {recommendation.provider: recommendation.id for recommendation in first}
    second_ids = {recommendation.provider: recommendation.id for recommendation in second}
    other_ids = {recommendation.provider: recommendation.id for recommendation in other}
    
    assert first_ids == second_ids
    assert len(set(first_ids.values())) == 3
    assert first_ids["aws"] != other_ids["aws"]
    for provider, recommendation_id in first_ids.items():
        assert recommendation_id.startswith(f"{provider}-")


def test_build_recommendation_id_format(javascript):
    """Ids are the provider plus a 12 character digest."""
    recommendation_id = build_recommendation_id("gcp", [javascript], Requirements())
    provider, digest = recommendation_id.split("-", 1)
    
    assert provider == "gcp"
    assert len(digest) == 12


def test_reasoning_lines(orchestrator, full_stack_technologies):
    """Reasoning names the services backing each technology in input order."""
    recommendation = orchestrator.generate_provider_recommendation("aws", full_stack_technologies, Requirements())
    
    assert list(recommendation.reasoning) == [
        "javascript detected - recommended Lambda, App Runner for optimal compatibility",
        "react detected - recommended S3 + CloudFront, Amplify for optimal compatibility",
        "postgresql detected - recommended RDS PostgreSQL, Aurora PostgreSQL for optimal compatibility",
        WEB_APP_WITH_DATABASE_REASON,
    ]


def test_unmapped_technology_has_no_reasoning(orchestrator):
    """Technologies without services add no reasoning line."""
    cobol = Technology(name="cobol", category="language", confidence=0.9)
    recommendation = orchestrator.generate_provider_recommendation("azure", [cobol], Requirements())
    
    assert recommendation.reasoning == ()
    assert recommendation.confidence == pytest.approx(0.27)


def test_low_traffic_java_goes_serverless(orchestrator):
    """Java VMs are swapped to managed and then serverless under low traffic."""
    java = Technology(name="java", category="language", confidence=0.8)
    recommendation = orchestrator.generate_provider_recommendation("aws", [java], Requirements(traffic="low"))
    
    assert [service.name for service in recommendation.services] == ["Lambda"]
    assert recommendation.reasoning == ("java detected - recommended Lambda for optimal compatibility",)


@pytest.mark.parametrize("technologies,has_services,expected", [
    ([], False, 0.1),
    ([], True, 0.3),
    ([Technology(name="javascript", category="language", confidence=0.9)], True, 0.72),
    ([Technology(name="cobol", category="language", confidence=0.5)], False, 0.15),
])
def test_confidence(orchestrator, lambda_service, technologies, has_services, expected):
    """Confidence blends detection confidence with service coverage."""
    services = [lambda_service] if has_services else []
    assert orchestrator.calculate_confidence(technologies, services) == pytest.approx(expected)


def test_optimization_suggestions(orchestrator, lambda_service, rds_service):
    """Compute and database services each trigger a suggestion."""
    suggestions = orchestrator.get_optimization_suggestions([lambda_service, rds_service])
    
    assert [suggestion.type for suggestion in suggestions] == ["cost", "performance"]
    assert suggestions[0].potential_savings == "20-40%"
    assert suggestions[1].benefit
    assert orchestrator.get_optimization_suggestions([]) == []


def test_accepts_detector_dicts(orchestrator):
    """Technologies may be passed as detector payloads."""
    recommendations = orchestrator.generate_recommendations(
        [{"name": "Python", "category": "language", "confidence": 0.9}],
        None
    )
    assert all(recommendation.services for recommendation in recommendations)


def test_requirements_are_not_modified(orchestrator, full_stack_technologies):
    """The caller's requirements mapping is left untouched."""
    requirements = {"scale": "medium", "traffic": "variable", "workload": "predictable"}
    snapshot = copy.deepcopy(requirements)
    
    orchestrator.generate_recommendations(full_stack_technologies, requirements)
    
    assert requirements == snapshot


def test_cost_failure_is_wrapped(catalog, javascript):
    """Cost model failures surface as a generation error with the cause attached."""
    cost_model = Mock(spec=CostModel)
    cost_model.calculate_costs.side_effect = CalculationError("Cost calculation failed: boom")
    orchestrator = RecommendationOrchestrator(catalog=catalog, cost_model=cost_model)
    
    with pytest.raises(RecommendationGenerationError, match="Failed to generate recommendations") as excinfo:
        orchestrator.generate_recommendations([javascript], {})
    
    assert isinstance(excinfo.value.cause, CalculationError)
    assert excinfo.value.__cause__ is excinfo.value.cause


def test_ranking_failure_is_wrapped(catalog, javascript):
    """Ranker failures surface as a generation error."""
    ranker = Mock(spec=Ranker)
    ranker.rank_recommendations.side_effect = RankingError("Ranking failed: boom")
    orchestrator = RecommendationOrchestrator(catalog=catalog, ranker=ranker)
    
    with pytest.raises(RecommendationGenerationError) as excinfo:
        orchestrator.generate_recommendations([javascript], {})
    
    assert isinstance(excinfo.value.cause, RankingError)


def test_invalid_technologies_are_wrapped(orchestrator):
    """Structurally invalid input is reported as a generation error."""
    with pytest.raises(RecommendationGenerationError):
        orchestrator.generate_recommendations(None, {})


def test_generate_reasoning_directly(orchestrator, javascript, lambda_service, rds_service):
    """Only technologies backed by a service produce a line."""
    postgresql = Technology(name="postgresql", category="database", confidence=0.8)
    reasoning = orchestrator.generate_reasoning([javascript, postgresql], [lambda_service])
    
    assert reasoning == ["javascript detected - recommended Lambda for optimal compatibility"]
