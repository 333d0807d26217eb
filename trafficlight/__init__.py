"""
trafficlight - multi-source repository health aggregation.

Turns per-entity facts from security, quality and pipeline tools into
green/yellow/red/gray traffic lights with a reason and a ranked list of
worst offenders.
"""

__version__ = "0.1.0"
