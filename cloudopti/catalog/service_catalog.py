"""
Service catalog lookups.
Maps detected technologies to provider-specific service candidates.
"""
from typing import Dict, List, Optional, Sequence
from dataclasses import replace
from types import MappingProxyType
import logging

from cloudopti.catalog.service_mappings import (
    MANAGED_ALTERNATIVES,
    SERVICE_MAPPINGS,
    TECHNOLOGY_ALIASES,
)
from cloudopti.core.config import config
from cloudopti.domain.service_models import Service
from cloudopti.domain.technology_models import Technology


logger = logging.getLogger(__name__)


def normalize_technology_name(name: str) -> str:
    """
    Normalize a detector display name to a catalog key.
    
    Args:
        name: Technology name as detected (e.g., 'Next.js', 'C#')
    
    Returns:
        Catalog key (e.g., 'nextjs', 'csharp')
    """
    key = (name or "").strip().lower()
    return TECHNOLOGY_ALIASES.get(key, key)


class ServiceCatalog:
    """
    Read-only knowledge base of technology to cloud service mappings.
    
    None of the lookups raise: unknown technologies, categories or providers
    simply yield empty results, since new technologies showing up without a
    mapping is the normal case.
    """
    
    def __init__(
        self,
        service_mappings: MappingProxyType = SERVICE_MAPPINGS,
        managed_alternatives: MappingProxyType = MANAGED_ALTERNATIVES
    ):
        """
        Initialize the catalog.
        
        Args:
            service_mappings: category -> technology -> provider -> templates
            managed_alternatives: "category-name" -> managed replacement
        """
        self.service_mappings = service_mappings
        self.managed_alternatives = managed_alternatives
    
    def map_technologies_to_services(
        self,
        provider: str,
        technologies: Sequence[Technology]
    ) -> List[Service]:
        """
        Map technologies to cloud services for one provider.
        
        Services reachable from several technologies are merged on their
        category and name: the highest technology confidence wins and the
        supporting technologies accumulate in input order.
        
        Args:
            provider: Cloud provider (aws, azure, gcp)
            technologies: Detected technologies
        
        Returns:
            List of services in first-seen order
        """
        if provider not in config.PROVIDERS:
            logger.warning(f"Unknown provider '{provider}', no services mapped")
            return []
        
        services: Dict[str, Service] = {}
        
        for technology in technologies:
            for template in self.get_service_mappings(provider, technology):
                existing = services.get(template.key)
                if existing is None:
                    services[template.key] = replace(
                        template,
                        supported_technologies=(technology.name,),
                        confidence=technology.confidence
                    )
                    continue
                
                supported = existing.supported_technologies
                if technology.name not in supported:
                    supported = supported + (technology.name,)
                services[template.key] = replace(
                    existing,
                    supported_technologies=supported,
                    confidence=max(existing.confidence, technology.confidence)
                )
        
        logger.debug(
            "Mapped %d technologies to %d %s services",
            len(technologies),
            len(services),
            provider
        )
        return list(services.values())
    
    def get_service_mappings(self, provider: str, technology: Technology) -> List[Service]:
        """
        Get service templates for a technology and provider.
        
        Args:
            provider: Cloud provider (aws, azure, gcp)
            technology: Detected technology
        
        Returns:
            List of templates, empty for an unknown technology or provider
        """
        category_mappings = self.service_mappings.get(technology.category, {})
        technology_mappings = category_mappings.get(normalize_technology_name(technology.name), {})
        return list(technology_mappings.get(provider, ()))
    
    def get_managed_alternative(self, service: Service) -> Optional[Service]:
        """
        Get the managed replacement for a self-managed service.
        
        Args:
            service: Service to look up
        
        Returns:
            Managed template, or None when the service has no managed alternative
        """
        return self.managed_alternatives.get(service.key)
    
    def get_regional_optimization(self, service: Service, region: str) -> Optional[Dict[str, object]]:
        """
        Hook for region-specific service overrides.
        
        Regional availability and pricing data are not modelled yet, so this
        always returns None. A non-None mapping would be merged onto the
        service by the region optimization rule.
        
        Args:
            service: Service being optimized
            region: Requested region code
        
        Returns:
            Mapping of Service field overrides, or None
        """
        return None
