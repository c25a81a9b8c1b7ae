"""Pipeline stages, leaves first."""

from nightlysync.sync.matcher import branch_name, match_branches
from nightlysync.sync.orchestrator import MergeOrchestrator
from nightlysync.sync.relevance import filter_relevant, is_relevant
from nightlysync.sync.report import format_report
from nightlysync.sync.upstream import (
    UpstreamChangeExtractor,
    extract_pull_requests,
    parse_pr_reference,
)
from nightlysync.sync.window import resolve_window

__all__ = [
    "resolve_window",
    "UpstreamChangeExtractor",
    "parse_pr_reference",
    "extract_pull_requests",
    "branch_name",
    "match_branches",
    "is_relevant",
    "filter_relevant",
    "MergeOrchestrator",
    "format_report",
]
