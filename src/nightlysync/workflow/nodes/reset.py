"""Reset node - restore the integration branch from the remote."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from nightlysync.core.config import State
from nightlysync.core.log import logger
from nightlysync.workflow.deps import SyncDeps


@dataclass
class Reset(BaseNode[State, SyncDeps, None]):
    """Discard local state and recreate the integration branch."""

    async def run(
        self, ctx: GraphRunContext[State, SyncDeps]
    ) -> End[None]:
        """Return the working tree to the remote integration branch.

        Steps: (1) fetch, (2) abort any in-progress merge, (3) hard
        reset, (4) clean untracked files, (5) checkout -B the
        integration branch from its remote counterpart.

        Returns:
            End[None]: Workflow completion with no data
        """
        git = ctx.state.config.git
        vcs = ctx.deps.vcs
        upstream_ref = f"{git.remote}/{git.integration_branch}"
        ctx.state.runtime.reset.status = "running"

        logger.info(f"Resetting {git.integration_branch} to {upstream_ref}")
        vcs.fetch()
        vcs.merge_abort()
        vcs.hard_reset("HEAD")
        vcs.clean()
        vcs.checkout(git.integration_branch, start=upstream_ref)

        ctx.state.runtime.reset.status = "complete"
        logger.info(f"{git.integration_branch} matches {upstream_ref}")
        return End(None)
