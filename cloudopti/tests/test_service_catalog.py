"""
Tests for mapping technologies to provider services.
"""

import pytest

from cloudopti.catalog.service_catalog import normalize_technology_name
from cloudopti.catalog.service_mappings import AWS_EC2, AWS_LAMBDA, SERVICE_MAPPINGS
from cloudopti.domain.service_models import ServiceType
from cloudopti.domain.technology_models import Technology


def test_javascript_maps_to_serverless_and_container_runtime(catalog, javascript):
    """JavaScript on AWS maps to Lambda and App Runner."""
    services = catalog.map_technologies_to_services("aws", [javascript])
    
    assert [service.name for service in services] == ["Lambda", "App Runner"]
    for service in services:
        assert service.supported_technologies == ("javascript",)
        assert service.confidence == 0.9


def test_full_stack_maps_every_category(catalog, full_stack_technologies):
    """Language, framework and database each contribute services."""
    services = catalog.map_technologies_to_services("aws", full_stack_technologies)
    categories = {service.category for service in services}
    names = [service.name for service in services]
    
    assert categories == {"compute", "hosting", "database"}
    assert "S3 + CloudFront" in names
    assert "RDS PostgreSQL" in names


def test_services_reachable_from_two_technologies_are_merged(catalog):
    """Duplicates merge with the highest confidence and all supporters."""
    technologies = [
        Technology(name="javascript", category="language", confidence=0.7),
        Technology(name="typescript", category="language", confidence=0.95),
    ]
    services = catalog.map_technologies_to_services("aws", technologies)
    
    assert len(services) == 2
    lambda_service = services[0]
    assert lambda_service.name == "Lambda"
    assert lambda_service.supported_technologies == ("javascript", "typescript")
    assert lambda_service.confidence == 0.95


@pytest.mark.parametrize("provider", ["aws", "azure", "gcp"])
def test_unknown_technology_yields_no_services(catalog, provider):
    """Unmapped technologies are skipped, never an error."""
    cobol = Technology(name="cobol", category="language", confidence=0.9)
    assert catalog.map_technologies_to_services(provider, [cobol]) == []
    assert catalog.map_technologies_to_services(provider, []) == []


def test_unknown_provider_yields_no_services(catalog, javascript):
    """Unsupported providers return an empty mapping."""
    assert catalog.get_service_mappings("oracle", javascript) == []


def test_display_names_are_normalized(catalog):
    """Detector display names resolve through aliases."""
    assert normalize_technology_name("Node.js") == "javascript"
    assert normalize_technology_name(" Next.js ") == "nextjs"
    assert normalize_technology_name("C#") == "csharp"
    
    node = Technology(name="Node.js", category="language", confidence=0.8)
    services = catalog.map_technologies_to_services("aws", [node])
    assert services[0].name == "Lambda"
    assert services[0].supported_technologies == ("Node.js",)


def test_mapping_is_deterministic(catalog, full_stack_technologies):
    """Repeated calls return equal lists in the same order."""
    first = catalog.map_technologies_to_services("gcp", full_stack_technologies)
    second = catalog.map_technologies_to_services("gcp", full_stack_technologies)
    assert first == second


def test_mapping_does_not_mutate_templates(catalog, javascript):
    """Templates keep their empty technology list after mapping."""
    catalog.map_technologies_to_services("aws", [javascript])
    assert AWS_LAMBDA.supported_technologies == ()
    assert AWS_LAMBDA.confidence == 0.0


def test_catalog_tables_are_read_only():
    """The built-in mappings cannot be modified at runtime."""
    with pytest.raises(TypeError):
        SERVICE_MAPPINGS["language"]["cobol"] = {}


def test_every_template_is_well_formed():
    """Every catalog service has a purpose and a known type."""
    for technologies in SERVICE_MAPPINGS.values():
        for providers in technologies.values():
            for templates in providers.values():
                for template in templates:
                    assert template.purpose
                    assert isinstance(template.type, ServiceType)


def test_managed_alternative_lookup(catalog):
    """Self-managed VMs have a managed replacement; managed services do not."""
    alternative = catalog.get_managed_alternative(AWS_EC2)
    assert alternative.name == "Elastic Beanstalk"
    assert alternative.type == ServiceType.MANAGED
    assert alternative.benefit
    
    assert catalog.get_managed_alternative(AWS_LAMBDA) is None


def test_regional_optimization_has_no_overrides(catalog):
    """No regional overrides are defined."""
    assert catalog.get_regional_optimization(AWS_LAMBDA, "eu-west-1") is None


def test_unknown_provider_mapping_logs_warning(catalog, javascript, caplog):
    """Mapping for an unsupported provider warns and returns nothing."""
    with caplog.at_level("WARNING", logger="cloudopti.catalog.service_catalog"):
        services = catalog.map_technologies_to_services("oracle", [javascript])
    
    assert services == []
    assert "Unknown provider 'oracle'" in caplog.text
