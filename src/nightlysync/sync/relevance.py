"""Relevance filtering of matched branches by changed paths."""

from collections.abc import Iterable

from nightlysync.core.errors import CommandFailed
from nightlysync.core.log import logger
from nightlysync.core.result import BranchMatch
from nightlysync.git.client import VersionControl


def is_relevant(paths: Iterable[str], ignore: Iterable[str]) -> bool:
    """True if any path lies outside the ignore-set.

    A branch that changes nothing, or only auxiliary files such as
    the lock file, build descriptor or version marker, has nothing
    worth merging.
    """
    ignored = set(ignore)
    return any(path not in ignored for path in paths)


def filter_relevant(
    vcs: VersionControl,
    matches: Iterable[BranchMatch],
    base: str,
    ignore: Iterable[str],
    remote: str = "origin",
) -> list[BranchMatch]:
    """Drop matches whose diff against base only touches ignored paths.

    Args:
        vcs: Downstream repository
        matches: Branch matches in order
        base: Ref of the integration branch (e.g. origin/nightly-testing)
        ignore: Ignore-set of auxiliary paths
        remote: Remote the testing branches live on

    Returns:
        Relevant matches, order preserved. A branch whose diff
        cannot be computed is dropped with a warning.
    """
    ignore = set(ignore)
    relevant = []
    for match in matches:
        try:
            paths = vcs.changed_files(base, f"{remote}/{match.branch}")
        except CommandFailed as e:
            # Unreadable diff counts as empty; the other branches go on
            logger.warn("Could not diff branch, skipping",
                        branch=match.branch, error=str(e))
            continue
        if is_relevant(paths, ignore):
            relevant.append(match)
            logger.debug("Branch is relevant", branch=match.branch,
                         changed=len(paths))
        else:
            logger.info("Skipping branch with only auxiliary changes",
                        branch=match.branch, paths=paths)
    return relevant
