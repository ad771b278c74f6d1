"""Heuristic analysis engine: URL decomposition, signals, scorers, aggregation."""

from .scanner import AnalysisResult, Analyzer, analyze_url

__all__ = ["AnalysisResult", "Analyzer", "analyze_url"]
