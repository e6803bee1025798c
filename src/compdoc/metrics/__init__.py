"""
Metrics for compdoc.

Provides:
- Build lifecycle reporting and timing statistics
"""

from compdoc.metrics.build_reporter import BuildReporter, BuildStats

__all__ = [
    "BuildReporter",
    "BuildStats",
]
