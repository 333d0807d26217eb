"""
Orchestrators for trafficlight.

This module contains the evaluation pipeline that coordinates
collaborators and the pure core functions.
"""

from .evaluator import Collaborators, evaluate, evaluate_dashboard

__all__ = ["Collaborators", "evaluate", "evaluate_dashboard"]
