"""Aggregation of metric scores into the final analysis result."""
from .aggregator import classify, overall_score
from .engine import ScoringEngine, analyze_with_definitions, select_estimator
from .feedback import generate_feedback

__all__ = [
    "classify",
    "overall_score",
    "ScoringEngine",
    "analyze_with_definitions",
    "select_estimator",
    "generate_feedback",
]
