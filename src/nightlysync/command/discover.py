"""Discover command - runs the full synchronization pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel
from pydantic_graph import End

from nightlysync.core.errors import SyncError
from nightlysync.core.log import logger

if TYPE_CHECKING:
    from nightlysync.core.config import State
    from nightlysync.workflow.deps import SyncDeps


class DiscoverCommand(BaseModel):
    """Merge testing branches for upstream PRs in the latest toolchain bump.

    Reads the version window from the version-marker file, finds the
    upstream PRs merged in it, and tries to merge each matching
    testing branch into the integration branch. A report of merged
    and failed branches is always produced.
    """

    async def run_workflow(
        self, state: State, deps: SyncDeps | None = None
    ) -> int:
        """Run the discovery workflow.

        Args:
            state: State with configuration loaded
            deps: Collaborators; built from configuration when omitted

        Returns:
            Exit code (0 when a report was produced, 1 on a fatal error)
        """
        from nightlysync.workflow.deps import build_deps
        from nightlysync.workflow.graph import create_workflow
        from nightlysync.workflow.nodes.window import ResolveWindow

        deps = deps or build_deps(state.config)
        workflow = create_workflow()

        try:
            async with workflow.iter(
                ResolveWindow(), state=state, deps=deps
            ) as run:
                async for node in run:
                    if isinstance(node, End):
                        report = node.data
                        logger.info(
                            "Synchronization complete",
                            merged=len(report.successes),
                            failed=len(report.failures),
                        )
                        return 0
        except SyncError as e:
            state.runtime.sync.status = "failed"
            logger.error("Synchronization aborted", error=str(e))
            return 1

        logger.error("Synchronization ended without a report")
        return 1
