"""Workflow nodes for pydantic-graph."""

from nightlysync.workflow.nodes.extract import ExtractPullRequests
from nightlysync.workflow.nodes.filter import FilterRelevant
from nightlysync.workflow.nodes.match import MatchBranches
from nightlysync.workflow.nodes.merge import MergeBranches
from nightlysync.workflow.nodes.notify import Notify
from nightlysync.workflow.nodes.reset import Reset
from nightlysync.workflow.nodes.window import ResolveWindow

__all__ = [
    "ResolveWindow",
    "ExtractPullRequests",
    "MatchBranches",
    "FilterRelevant",
    "MergeBranches",
    "Notify",
    "Reset",
]
