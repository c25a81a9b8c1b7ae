"""FilterRelevant node - drop branches with only auxiliary changes."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from nightlysync.core.config import State
from nightlysync.core.result import Report
from nightlysync.sync.relevance import filter_relevant
from nightlysync.workflow.deps import SyncDeps


@dataclass
class FilterRelevant(BaseNode[State, SyncDeps, Report]):
    """Keep branches that change something outside the ignore-set."""

    async def run(
        self, ctx: GraphRunContext[State, SyncDeps]
    ) -> MergeBranches | Notify:
        git = ctx.state.config.git
        sync = ctx.state.runtime.sync

        sync.relevant = filter_relevant(
            ctx.deps.vcs,
            sync.matches,
            base=f"{git.remote}/{git.integration_branch}",
            ignore=git.ignore_paths,
            remote=git.remote,
        )
        if not sync.relevant:
            from nightlysync.workflow.nodes.notify import Notify
            return Notify()

        from nightlysync.workflow.nodes.merge import MergeBranches
        return MergeBranches()
