"""Reset command - restore the integration branch."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from nightlysync.core.errors import SyncError
from nightlysync.core.log import logger

if TYPE_CHECKING:
    from nightlysync.core.config import State
    from nightlysync.workflow.deps import SyncDeps


class ResetCommand(BaseModel):
    """Discard local changes and recreate the integration branch from
    the remote.

    Aborts any in-progress merge, hard resets, removes untracked
    files and checks the integration branch out afresh from its
    remote counterpart.
    """

    async def run_workflow(
        self, state: State, deps: SyncDeps | None = None
    ) -> int:
        """Run the reset workflow.

        Returns:
            Exit code (0=success, 1=failure)
        """
        from nightlysync.workflow.deps import build_deps
        from nightlysync.workflow.graph import create_reset_workflow
        from nightlysync.workflow.nodes.reset import Reset

        deps = deps or build_deps(state.config)
        workflow = create_reset_workflow()

        try:
            async with workflow.iter(Reset(), state=state, deps=deps) as run:
                async for _node in run:
                    pass
        except SyncError as e:
            logger.error("Reset failed", error=str(e))
            return 1

        logger.info("Reset complete")
        return 0
