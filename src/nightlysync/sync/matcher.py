"""Pairing of upstream pull requests with downstream testing branches."""

from collections.abc import Iterable

from nightlysync.core.log import logger
from nightlysync.core.result import BranchMatch


def branch_name(prefix: str, pull_request: int) -> str:
    """Conventional testing branch name: '<prefix>-<PR number>'."""
    if pull_request <= 0:
        raise ValueError(f"Invalid pull request number: {pull_request}")
    return f"{prefix}-{pull_request:d}"


def match_branches(
    pull_requests: Iterable[int],
    remote_branches: set[str],
    prefix: str,
) -> list[BranchMatch]:
    """Keep the pull requests that have a testing branch.

    Args:
        pull_requests: PR numbers in discovery order
        remote_branches: Branch names on the remote, listed once by
            the caller
        prefix: Testing branch prefix

    Returns:
        One BranchMatch per PR whose branch exists, in input order
    """
    matches = []
    for number in pull_requests:
        name = branch_name(prefix, number)
        if name in remote_branches:
            matches.append(BranchMatch(pull_request=number, branch=name))
        else:
            logger.debug("No testing branch", pull_request=number, branch=name)

    logger.info(
        "Matched testing branches",
        matched=[m.branch for m in matches],
    )
    return matches
