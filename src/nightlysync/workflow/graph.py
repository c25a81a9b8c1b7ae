"""Graph workflow definitions."""

from pydantic_graph import Graph

from nightlysync.core.config import State
from nightlysync.core.log import logger


def create_workflow():
    """Create the discovery workflow graph.

    ResolveWindow → ExtractPullRequests → MatchBranches →
        FilterRelevant → MergeBranches → Notify

    Each stage jumps straight to Notify when it leaves nothing for
    the next one, so an empty run still produces a report.

    Returns:
        Graph workflow with State as state_type
    """
    logger.debug("Building workflow graph")

    # Imported here so the graph can resolve the nodes' forward
    # references from this namespace
    from nightlysync.workflow.nodes.extract import ExtractPullRequests
    from nightlysync.workflow.nodes.filter import FilterRelevant
    from nightlysync.workflow.nodes.match import MatchBranches
    from nightlysync.workflow.nodes.merge import MergeBranches
    from nightlysync.workflow.nodes.notify import Notify
    from nightlysync.workflow.nodes.window import ResolveWindow

    return Graph(
        nodes=(
            ResolveWindow,
            ExtractPullRequests,
            MatchBranches,
            FilterRelevant,
            MergeBranches,
            Notify,
        ),
        state_type=State,
    )


def create_reset_workflow():
    """Single-node graph that restores the integration branch."""
    from nightlysync.workflow.nodes.reset import Reset

    return Graph(nodes=(Reset,), state_type=State)
