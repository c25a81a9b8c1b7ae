"""Merge command - merge the testing branch of a single PR."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from nightlysync.core.errors import SyncError
from nightlysync.core.log import logger
from nightlysync.core.result import BranchMatch
from nightlysync.git.client import GitClient, VersionControl
from nightlysync.sync.matcher import branch_name
from nightlysync.sync.orchestrator import MergeOrchestrator
from nightlysync.sync.relevance import is_relevant

if TYPE_CHECKING:
    from nightlysync.core.config import Config, State


def merge_single(vcs: VersionControl, config: Config, pull_request: int) -> int:
    """Relevance check and merge for one PR's testing branch.

    A successful merge is left applied on the integration branch,
    and pushed when git.push is set.

    Returns:
        Exit code: 0 when merged or nothing needs merging, 1 otherwise
    """
    git = config.git
    match = BranchMatch(
        pull_request=pull_request,
        branch=branch_name(git.branch_prefix, pull_request),
    )

    vcs.fetch()
    if match.branch not in vcs.remote_branches():
        logger.error("Testing branch not found on remote",
                     branch=match.branch, remote=git.remote)
        return 1

    paths = vcs.changed_files(
        f"{git.remote}/{git.integration_branch}",
        f"{git.remote}/{match.branch}",
    )
    if not is_relevant(paths, git.ignore_paths):
        logger.info("Only auxiliary files changed, nothing to merge",
                    branch=match.branch, paths=paths)
        return 0

    orchestrator = MergeOrchestrator(
        vcs,
        git.integration_branch,
        remote=git.remote,
        compare_url=config.report.compare_url,
        repository=config.report.repository,
    )
    persist = None
    if git.push:
        def persist(match):  # noqa: ARG001
            vcs.push(git.integration_branch)

    # Merge onto the remote tip so a push fast-forwards
    vcs.merge_abort()
    vcs.hard_reset("HEAD")
    vcs.checkout(git.integration_branch,
                 start=f"{git.remote}/{git.integration_branch}")
    orchestrator.begin()
    attempt = orchestrator.attempt(match, persist)
    return 0 if attempt.succeeded else 1


class MergeCommand(BaseModel):
    """Merge the testing branch of one upstream PR into the integration
    branch.

    Exits 0 when the branch was merged (or only touches auxiliary
    files) and 1 when the merge failed, for use from scripts.
    """

    pr: int = Field(
        gt=0,
        description="Upstream pull request number",
    )

    async def run_workflow(
        self, state: State, vcs: VersionControl | None = None
    ) -> int:
        """Run the single-branch merge.

        Args:
            state: State with configuration loaded
            vcs: Downstream repository; git-backed when omitted

        Returns:
            Exit code (0=success, 1=failure)
        """
        config = state.config
        if vcs is None:
            vcs = GitClient(
                config.git.workdir,
                config.commands["git"],
                remote=config.git.remote,
            )
        try:
            return merge_single(vcs, config, self.pr)
        except SyncError as e:
            logger.error("Merge aborted", pull_request=self.pr, error=str(e))
            return 1
