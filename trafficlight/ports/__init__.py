"""
Port interfaces for trafficlight hexagonal architecture.

This module defines the port interfaces (Protocols) that define
the contracts between the evaluation core and external collaborators.
"""

from .facts import FactSourcePort
from .config import ConfigSourcePort
from .catalog import EntityResolverPort

__all__ = ["FactSourcePort", "ConfigSourcePort", "EntityResolverPort"]
