"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import (
    OUTPUT_FORMATS,
    OWL_SAME_AS,
    SCHEMA_SAME_AS,
    SCHEMA_SAME_AS_HTTPS,
    CrawlerConfig,
    FetchConfig,
    RewriteRuleConfig,
)

__all__ = [
    "ConfigLocator",
    "ConfigRepository",
    "CrawlerConfig",
    "FetchConfig",
    "OUTPUT_FORMATS",
    "OWL_SAME_AS",
    "RewriteRuleConfig",
    "SCHEMA_SAME_AS",
    "SCHEMA_SAME_AS_HTTPS",
]
