"""Error taxonomy for the analyzer.

Every failure is fatal to the whole analysis call: there are no retries and
no partial reports. Each error carries enough context (query name and/or
execution mode) to diagnose without extra instrumentation.
"""

from typing import Optional


class AnalyzerError(RuntimeError):
    """Base class for analyzer failures."""


class QueryExecutionError(AnalyzerError):
    """A catalog query raised against the given document."""

    def __init__(self, query_name: str, execution_mode: str, message: str):
        self.query_name = query_name
        self.execution_mode = execution_mode
        self.message = message
        super().__init__(
            f"Query '{query_name}' failed ({execution_mode} mode): {message}"
        )


class IsolationTransportError(AnalyzerError):
    """An isolated unit failed to start, crashed, or its outcome was lost."""

    def __init__(self, query_name: str, message: str):
        self.query_name = query_name
        self.execution_mode = "parallel"
        self.message = message
        super().__init__(f"Isolated unit for '{query_name}' failed: {message}")


class DereferenceError(AnalyzerError):
    """A reference could not be expanded.

    A reference cycle is NOT an error - it is reported as a finding.
    """

    def __init__(self, ref: Optional[str], message: str):
        self.ref = ref
        self.message = message
        if ref is None:
            super().__init__(f"Dereference failed: {message}")
        else:
            super().__init__(f"Could not resolve '{ref}': {message}")
