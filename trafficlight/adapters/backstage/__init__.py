"""
Backstage HTTP adapters for trafficlight.

This module contains aiohttp clients for the catalog and
tech-insights backend APIs.
"""

from .catalog import CatalogClient
from .techinsights import TechInsightsClient

__all__ = ["CatalogClient", "TechInsightsClient"]
