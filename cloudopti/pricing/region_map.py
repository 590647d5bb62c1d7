"""
Region code to human-readable location mapping.
Covers AWS, Azure and GCP region codes used in cost assumptions.
"""
from typing import Optional
from types import MappingProxyType


# Region code to location string mapping, all providers share one namespace
# because their region codes do not collide
REGION_TO_LOCATION: MappingProxyType = MappingProxyType({
    # AWS - US
    "us-east-1": "US East (N. Virginia)",
    "us-east-2": "US East (Ohio)",
    "us-west-1": "US West (N. California)",
    "us-west-2": "US West (Oregon)",
    
    # AWS - Asia Pacific
    "ap-south-1": "Asia Pacific (Mumbai)",
    "ap-southeast-1": "Asia Pacific (Singapore)",
    "ap-southeast-2": "Asia Pacific (Sydney)",
    "ap-northeast-1": "Asia Pacific (Tokyo)",
    
    # AWS - Europe
    "eu-west-1": "Europe (Ireland)",
    "eu-west-2": "Europe (London)",
    "eu-central-1": "Europe (Frankfurt)",
    "eu-north-1": "Europe (Stockholm)",
    
    # AWS - Other
    "ca-central-1": "Canada (Central)",
    "sa-east-1": "South America (Sao Paulo)",
    
    # Azure
    "eastus": "Azure East US (Virginia)",
    "eastus2": "Azure East US 2 (Virginia)",
    "westus2": "Azure West US 2 (Washington)",
    "centralus": "Azure Central US (Iowa)",
    "northeurope": "Azure North Europe (Ireland)",
    "westeurope": "Azure West Europe (Netherlands)",
    "uksouth": "Azure UK South (London)",
    "southeastasia": "Azure Southeast Asia (Singapore)",
    "centralindia": "Azure Central India (Pune)",
    
    # GCP
    "us-central1": "GCP Iowa (us-central1)",
    "us-east1": "GCP South Carolina (us-east1)",
    "us-west1": "GCP Oregon (us-west1)",
    "europe-west1": "GCP Belgium (europe-west1)",
    "europe-west2": "GCP London (europe-west2)",
    "asia-southeast1": "GCP Singapore (asia-southeast1)",
    "asia-south1": "GCP Mumbai (asia-south1)",
})


def get_region_location(region_code: str) -> Optional[str]:
    """
    Get human-readable location string from a region code.
    
    Args:
        region_code: Provider region code (e.g., 'ap-south-1', 'westeurope')
    
    Returns:
        Location string (e.g., 'Asia Pacific (Mumbai)'), or None if not found
    """
    if not region_code:
        return None
    return REGION_TO_LOCATION.get(region_code.strip().lower())


def describe_region(region_code: str) -> str:
    """Render a region as 'code (location)', or the bare code when unknown."""
    location = get_region_location(region_code)
    if location is None:
        return region_code
    return f"{region_code} ({location})"
