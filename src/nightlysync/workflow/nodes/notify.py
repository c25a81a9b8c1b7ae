"""Notify node - render and deliver the report."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from nightlysync.core.config import State
from nightlysync.core.log import logger
from nightlysync.core.result import Report
from nightlysync.notify import deliver
from nightlysync.sync.report import format_report
from nightlysync.workflow.deps import SyncDeps


@dataclass
class Notify(BaseNode[State, SyncDeps, Report]):
    """Render the report and hand it to the notifiers."""

    async def run(
        self, ctx: GraphRunContext[State, SyncDeps]
    ) -> End[Report]:
        """Deliver the report; delivery problems do not fail the run.

        Returns:
            End[Report]: The run's report, possibly empty
        """
        config = ctx.state.config
        sync = ctx.state.runtime.sync

        sync.message = format_report(
            sync.report,
            config.report.recovery_command,
            label=config.upstream.label,
        )

        if sync.report.is_empty and not config.report.notify_empty:
            logger.info("Nothing attempted, report not delivered")
        else:
            deliver(sync.message, ctx.deps.notifiers)

        sync.status = "complete"
        return End(sync.report)
