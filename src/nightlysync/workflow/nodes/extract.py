"""ExtractPullRequests node - list upstream PRs in the window."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from nightlysync.core.config import State
from nightlysync.core.log import logger
from nightlysync.core.result import Report
from nightlysync.workflow.deps import SyncDeps


@dataclass
class ExtractPullRequests(BaseNode[State, SyncDeps, Report]):
    """Collect PR numbers merged upstream between the two markers."""

    async def run(
        self, ctx: GraphRunContext[State, SyncDeps]
    ) -> MatchBranches | Notify:
        sync = ctx.state.runtime.sync
        sync.extraction = ctx.deps.extractor.extract(sync.window)

        if not sync.extraction.pull_requests:
            logger.info("No upstream pull requests in window",
                        window=str(sync.window))
            from nightlysync.workflow.nodes.notify import Notify
            return Notify()

        from nightlysync.workflow.nodes.match import MatchBranches
        return MatchBranches()
