"""
Common utilities for trafficlight.
"""

from .retry import retry_with_backoff, backoff_delay

__all__ = ["retry_with_backoff", "backoff_delay"]
