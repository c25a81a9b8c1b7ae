"""MatchBranches node - find testing branches for upstream PRs."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from nightlysync.core.config import State
from nightlysync.core.result import Report
from nightlysync.sync.matcher import match_branches
from nightlysync.workflow.deps import SyncDeps


@dataclass
class MatchBranches(BaseNode[State, SyncDeps, Report]):
    """Pair PRs with existing '<prefix>-<PR>' branches on the remote."""

    async def run(
        self, ctx: GraphRunContext[State, SyncDeps]
    ) -> FilterRelevant | Notify:
        git = ctx.state.config.git
        sync = ctx.state.runtime.sync

        # Listed once for all PRs
        ctx.deps.vcs.fetch()
        remote_branches = ctx.deps.vcs.remote_branches()

        sync.matches = match_branches(
            sync.extraction.pull_requests, remote_branches, git.branch_prefix
        )
        if not sync.matches:
            from nightlysync.workflow.nodes.notify import Notify
            return Notify()

        from nightlysync.workflow.nodes.filter import FilterRelevant
        return FilterRelevant()
