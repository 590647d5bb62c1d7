"""
Domain models for recommendation inputs.
Defines detected technologies and caller requirements.
"""
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from dataclasses import dataclass, field, fields
import math
import logging

from cloudopti.core.config import config


logger = logging.getLogger(__name__)


# Allowed technology categories (produced by the external detector)
TECHNOLOGY_CATEGORIES = {"language", "framework", "database", "tool", "service"}

# Requirement keys accepted from callers, camelCase and snake_case
REQUIREMENT_KEY_ALIASES: Dict[str, str] = {
    "scale": "scale",
    "traffic": "traffic",
    "region": "region",
    "maxBudget": "max_budget",
    "max_budget": "max_budget",
    "priority": "priority",
    "organizationType": "organization_type",
    "organization_type": "organization_type",
    "workload": "workload",
    "commitment": "commitment",
    "expectedGrowth": "expected_growth",
    "expected_growth": "expected_growth",
    "performance": "performance",
}


@dataclass(frozen=True)
class Technology:
    """A detected language, framework, database or tool."""
    name: str
    category: str  # One of TECHNOLOGY_CATEGORIES
    confidence: float = 0.0
    source: str = ""
    evidence: Tuple[str, ...] = ()
    id: Optional[str] = None
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Technology":
        """
        Build a Technology from a detector payload.
        
        Args:
            data: Dict with 'name', 'category' and optional 'confidence',
                  'source', 'evidence' and 'id' keys
        
        Returns:
            Technology instance
        """
        return cls(
            name=str(data.get("name", "")),
            category=str(data.get("category", "")),
            confidence=float(data.get("confidence") or 0.0),
            source=str(data.get("source") or ""),
            evidence=tuple(data.get("evidence") or ()),
            id=data.get("id"),
        )
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "name": self.name,
            "category": self.category,
            "confidence": self.confidence,
            "source": self.source,
            "evidence": list(self.evidence),
        }
        if self.id is not None:
            result["id"] = self.id
        return result


@dataclass(frozen=True)
class Requirements:
    """
    Caller-supplied constraints and preferences.
    
    Only scale, traffic, region and max_budget influence cost; priority,
    organization_type, performance and expected_growth shape ranking;
    workload and commitment drive the reserved-instance rule.
    """
    scale: Optional[str] = None  # small | medium | large
    traffic: Optional[str] = None  # low | medium | high | variable
    region: str = field(default_factory=lambda: config.DEFAULT_REGION)
    max_budget: float = field(default_factory=lambda: config.DEFAULT_MAX_BUDGET)
    priority: str = "default"  # cost | performance | simplicity | default
    organization_type: str = "default"  # startup | enterprise | default
    workload: Optional[str] = None
    commitment: Optional[str] = None  # 1year | 3year
    expected_growth: Optional[str] = None
    performance: Optional[str] = None
    
    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Requirements":
        """
        Build Requirements from a loosely-typed mapping.
        
        Unrecognized keys are ignored and missing or empty values take the
        documented defaults.
        
        Args:
            data: Mapping of requirement options (may be None)
        
        Returns:
            Requirements instance
        """
        if not data:
            return cls()
        
        values: Dict[str, Any] = {}
        for key, value in data.items():
            attribute = REQUIREMENT_KEY_ALIASES.get(key)
            if attribute is None or value is None or value == "":
                continue
            values[attribute] = value
        
        if "max_budget" in values:
            try:
                budget = float(values["max_budget"])
            except (TypeError, ValueError):
                budget = 0.0
            if not math.isfinite(budget) or budget <= 0:
                logger.warning(
                    "Ignoring invalid maxBudget %r, using default %s",
                    values["max_budget"],
                    config.DEFAULT_MAX_BUDGET,
                )
                del values["max_budget"]
            else:
                values["max_budget"] = budget
        
        for name in ("scale", "traffic", "region", "priority", "organization_type",
                     "workload", "commitment", "expected_growth", "performance"):
            if name in values:
                values[name] = str(values[name])
        
        return cls(**values)
    
    @classmethod
    def coerce(cls, requirements: Union["Requirements", Mapping[str, Any], None]) -> "Requirements":
        """Accept a Requirements instance, a plain mapping or None."""
        if isinstance(requirements, cls):
            return requirements
        return cls.from_dict(requirements)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {item.name: getattr(self, item.name) for item in fields(self)}
