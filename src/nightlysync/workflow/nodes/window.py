"""ResolveWindow node - read the version window from history."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from nightlysync.core.config import State
from nightlysync.core.log import logger
from nightlysync.core.result import Report
from nightlysync.sync.window import resolve_window
from nightlysync.workflow.deps import SyncDeps


@dataclass
class ResolveWindow(BaseNode[State, SyncDeps, Report]):
    """Determine the old and new version markers."""

    async def run(
        self, ctx: GraphRunContext[State, SyncDeps]
    ) -> ExtractPullRequests:
        """Resolve the window; HistoryUnavailable ends the run."""
        git = ctx.state.config.git
        sync = ctx.state.runtime.sync
        sync.status = "running"

        with logger.span("Resolving version window", file=git.version_file):
            sync.window = resolve_window(
                ctx.deps.vcs, git.version_file, git.version_delimiter
            )

        from nightlysync.workflow.nodes.extract import ExtractPullRequests
        return ExtractPullRequests()
