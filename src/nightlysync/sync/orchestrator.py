"""Sequential merge attempts against a clean integration snapshot."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from nightlysync.core.errors import SyncError
from nightlysync.core.log import logger
from nightlysync.core.result import BranchMatch, MergeAttempt, MergeOutcome, Report
from nightlysync.git.client import VersionControl
from nightlysync.sync.report import compare_link

Persist = Callable[[BranchMatch], None]


class MergeOrchestrator:
    """Tries each relevant branch on top of the integration branch.

    The working tree is a single shared resource, so branches are
    merged one at a time and the tree is restored to the snapshot
    taken at the start before and after every attempt. A failed
    merge is recorded and never stops the loop.
    """

    def __init__(
        self,
        vcs: VersionControl,
        integration_branch: str,
        remote: str = "origin",
        compare_url: str = "",
        repository: str = "",
    ):
        self.vcs = vcs
        self.integration_branch = integration_branch
        self.remote = remote
        self.compare_url = compare_url
        self.repository = repository
        self.snapshot: str | None = None

    def begin(self) -> str:
        """Check out the integration branch and remember its tip."""
        self.vcs.hard_reset("HEAD")
        self.vcs.checkout(self.integration_branch)
        self.snapshot = self.vcs.head()
        logger.debug("Captured clean snapshot",
                     branch=self.integration_branch, revision=self.snapshot)
        return self.snapshot

    def restore(self) -> None:
        """Discard all local state and return to the snapshot."""
        if self.snapshot is None:
            self.begin()
            return
        self.vcs.merge_abort()
        self.vcs.hard_reset("HEAD")
        self.vcs.checkout(self.integration_branch)
        self.vcs.hard_reset(self.snapshot)

    def link(self, match: BranchMatch) -> str:
        if not self.compare_url:
            return ""
        return compare_link(
            self.compare_url, self.repository,
            self.integration_branch, match.branch,
        )

    def attempt(
        self, match: BranchMatch, persist: Persist | None = None
    ) -> MergeAttempt:
        """Merge one branch onto the clean snapshot.

        A successful merge stays applied; persist, when given, runs
        right after it (for example to push the result) and moves the
        snapshot forward. A failed merge is rolled back.

        Returns:
            The recorded MergeAttempt; merge problems never raise
        """
        ref = f"{self.remote}/{match.branch}"
        logger.info("Attempting merge", branch=match.branch,
                    pull_request=match.pull_request)
        detail = ""
        try:
            self.restore()
            self.vcs.merge(ref)
            if persist is not None:
                self._persist(match, persist)
            outcome = MergeOutcome.SUCCESS
        except SyncError as e:
            outcome = MergeOutcome.FAILURE
            detail = str(e)
            logger.warn("Merge failed", branch=match.branch, reason=detail)
            self._rollback()

        if outcome is MergeOutcome.SUCCESS:
            logger.info("Merged", branch=match.branch)
        return MergeAttempt(
            branch=match.branch,
            pull_request=match.pull_request,
            outcome=outcome,
            compare_link=self.link(match),
            detail=detail,
        )

    def _persist(self, match: BranchMatch, persist: Persist) -> None:
        """Run the persist hook and move the snapshot to the new tip.

        Raises:
            SyncError: If the hook fails, whatever it raised
        """
        try:
            persist(match)
        except SyncError:
            raise
        except Exception as e:
            raise SyncError(
                f"Could not persist merge of {match.branch}: {e}"
            ) from e
        self.snapshot = self.vcs.head()

    def _rollback(self) -> None:
        try:
            self.restore()
        except SyncError as e:
            # The next attempt restores again and records its own failure
            logger.error("Could not restore clean snapshot", error=str(e))

    def run(
        self, matches: Iterable[BranchMatch], persist: Persist | None = None
    ) -> Report:
        """Attempt every match in order and collect the outcomes.

        The working tree is back on the snapshot after each attempt,
        whatever its outcome, and so also when the loop ends.
        """
        report = Report()
        matches = list(matches)
        if not matches:
            logger.info("No relevant branches to merge")
            return report

        self.begin()
        for match in matches:
            report.record(self.attempt(match, persist))
            self._rollback()

        logger.info(
            "Merge attempts finished",
            succeeded=len(report.successes),
            failed=len(report.failures),
        )
        return report
