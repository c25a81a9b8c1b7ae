"""MergeBranches node - attempt each relevant merge."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from nightlysync.core.config import State
from nightlysync.core.log import logger
from nightlysync.core.result import Report
from nightlysync.sync.orchestrator import MergeOrchestrator
from nightlysync.workflow.deps import SyncDeps


@dataclass
class MergeBranches(BaseNode[State, SyncDeps, Report]):
    """Merge relevant branches one by one into the integration branch."""

    async def run(self, ctx: GraphRunContext[State, SyncDeps]) -> Notify:
        config = ctx.state.config
        sync = ctx.state.runtime.sync
        vcs = ctx.deps.vcs

        orchestrator = MergeOrchestrator(
            vcs,
            config.git.integration_branch,
            remote=config.git.remote,
            compare_url=config.report.compare_url,
            repository=config.report.repository,
        )

        persist = None
        if config.git.push:
            def persist(match):  # noqa: ARG001
                vcs.push(config.git.integration_branch)

        with logger.span("Merging branches", count=len(sync.relevant)):
            sync.report = orchestrator.run(sync.relevant, persist)

        from nightlysync.workflow.nodes.notify import Notify
        return Notify()
