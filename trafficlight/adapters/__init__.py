"""
Adapters for trafficlight hexagonal architecture.

This module contains the concrete implementations of port interfaces
that handle external I/O and infrastructure concerns.
"""

from .memory import InMemoryFactSource, StaticCatalog
from .backstage import CatalogClient, TechInsightsClient

__all__ = ["InMemoryFactSource", "StaticCatalog", "CatalogClient", "TechInsightsClient"]
