"""
Observability helpers for trafficlight: loguru logging and Prometheus metrics.
"""
