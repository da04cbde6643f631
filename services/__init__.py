"""
Collaborators of the analytics engine.
Report sources fetch the reports that the engine analyses.
"""

from .report_source import InMemoryReportSource, ReportSource, RestReportSource

__all__ = [
    "ReportSource",
    "InMemoryReportSource",
    "RestReportSource",
]
