"""
Configuration module for loading environment variables.
Engine defaults and HTTP limits are read once at import time.
"""
import os


class Config:
    """Application configuration loaded from environment variables."""
    
    # Recommendation defaults
    DEFAULT_REGION: str = os.getenv("CLOUDOPTI_DEFAULT_REGION", "us-east-1")
    DEFAULT_MAX_BUDGET: float = float(os.getenv("CLOUDOPTI_DEFAULT_MAX_BUDGET", "1000"))
    CURRENCY: str = os.getenv("CLOUDOPTI_CURRENCY", "USD")
    PROVIDERS: tuple = ("aws", "azure", "gcp")
    
    # Request limits for the HTTP surface
    MAX_REQUEST_BODY_SIZE: int = int(os.getenv("CLOUDOPTI_MAX_REQUEST_BODY_SIZE", "262144"))  # 256 KB
    MAX_TECHNOLOGIES: int = int(os.getenv("CLOUDOPTI_MAX_TECHNOLOGIES", "100"))
    
    @classmethod
    def validate(cls) -> None:
        """
        Validates that configuration values are usable.
        
        Raises:
            ValueError: If any configuration value is missing or invalid.
        """
        if not cls.DEFAULT_REGION:
            raise ValueError("CLOUDOPTI_DEFAULT_REGION is required")
        if cls.DEFAULT_MAX_BUDGET <= 0:
            raise ValueError(
                f"CLOUDOPTI_DEFAULT_MAX_BUDGET must be positive (got: {cls.DEFAULT_MAX_BUDGET})"
            )
        if not cls.CURRENCY:
            raise ValueError("CLOUDOPTI_CURRENCY is required")
        if cls.MAX_REQUEST_BODY_SIZE <= 0:
            raise ValueError("CLOUDOPTI_MAX_REQUEST_BODY_SIZE must be positive")
        if cls.MAX_TECHNOLOGIES <= 0:
            raise ValueError("CLOUDOPTI_MAX_TECHNOLOGIES must be positive")


config = Config()
