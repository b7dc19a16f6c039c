"""Feature-usage analysis: auxiliary queries, report layout, entry point."""

from oas_analyzer.analyzer.schemas import FeatureStat, FileSizeResult, Finding, OASAnalysis
from oas_analyzer.analyzer.service import OASAnalyzer, analyze, get_analyzer

__all__ = [
    "FeatureStat",
    "FileSizeResult",
    "Finding",
    "OASAnalysis",
    "OASAnalyzer",
    "analyze",
    "get_analyzer",
]
