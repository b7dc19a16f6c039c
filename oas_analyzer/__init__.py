"""OAS Analyzer - OpenAPI / Swagger feature-usage analysis.

Runs a fixed catalog of pure queries against an already-parsed API
definition and assembles the findings into one categorized report:
- general stats (file sizes, media types, operation count, security types)
- OpenAPI feature usage (callbacks, discriminators, polymorphism, XML, ...)
- ReadMe extension usage (x-readme.*, x-default, RAW_BODY, ...)
"""

__version__ = "0.1.0"

from oas_analyzer.analyzer import OASAnalysis, OASAnalyzer, analyze  # noqa: E402

__all__ = ["OASAnalysis", "OASAnalyzer", "analyze", "__version__"]
