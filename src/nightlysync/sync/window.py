"""Version window resolution from the tracked version-marker file."""

from nightlysync.core.errors import CommandFailed, HistoryUnavailable
from nightlysync.core.log import logger
from nightlysync.core.result import VersionWindow
from nightlysync.git.client import VersionControl


def parse_marker(content: str, delimiter: str = ":") -> str:
    """Extract the version marker from version-file content.

    The marker is the text after the first delimiter, e.g.
    "leanprover/lean4:nightly-2024-11-20" gives "nightly-2024-11-20".
    Content without the delimiter is taken whole.
    """
    text = content.strip()
    if delimiter and delimiter in text:
        text = text.split(delimiter, 1)[1]
    return text.strip()


def resolve_window(
    vcs: VersionControl, path: str, delimiter: str = ":"
) -> VersionWindow:
    """Read the marker before and after the last change to path.

    Args:
        vcs: Repository holding the version-marker file
        path: Path of the version-marker file
        delimiter: Marker delimiter, see parse_marker()

    Returns:
        VersionWindow(old, new)

    Raises:
        HistoryUnavailable: If path has no earlier recorded change
    """
    try:
        revisions = vcs.file_revisions(path, limit=2)
    except CommandFailed as e:
        raise HistoryUnavailable(path, e.stderr or str(e)) from e

    if len(revisions) < 2:
        raise HistoryUnavailable(path)

    latest, previous = revisions[0], revisions[1]
    try:
        new = parse_marker(vcs.show_file(latest, path), delimiter)
        old = parse_marker(vcs.show_file(previous, path), delimiter)
    except CommandFailed as e:
        raise HistoryUnavailable(path, e.stderr or str(e)) from e

    window = VersionWindow(old=old, new=new)
    logger.info(
        "Resolved version window",
        old=old,
        new=new,
        changed_in=latest,
    )
    return window
