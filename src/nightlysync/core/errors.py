"""Error taxonomy for the synchronization pipeline.

Fatal errors abort the run before any merge is attempted. Merge
errors are recoverable: the orchestrator records them as failures
and moves on to the next branch.
"""


class SyncError(Exception):
    """Base class for all nightlysync errors."""


class FatalSyncError(SyncError):
    """An error that aborts the whole run with no partial report."""


class HistoryUnavailable(FatalSyncError):
    """The version window cannot be established.

    Raised when the version-marker file has no earlier recorded
    change to read the old marker from.
    """

    def __init__(self, path: str, reason: str = "no prior change recorded"):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot resolve version window from {path}: {reason}")


class UpstreamUnavailable(FatalSyncError):
    """The upstream history for the resolved window cannot be read."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Cannot read upstream history from {url}: {reason}")


class CommandFailed(SyncError):
    """A version-control command exited with a nonzero status."""

    def __init__(self, command: str, exited: int, stderr: str = ""):
        self.command = command
        self.exited = exited
        self.stderr = stderr.strip()
        message = f"Command failed with exit code {exited}: {command}"
        if self.stderr:
            message = f"{message}\n{self.stderr}"
        super().__init__(message)


class MergeFailed(SyncError):
    """A merge attempt completed with a nonzero status."""

    def __init__(self, branch: str, reason: str = ""):
        self.branch = branch
        self.reason = reason
        message = f"Merge of {branch} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MergeConflict(MergeFailed):
    """A merge attempt stopped on conflicting changes."""

    def __init__(self, branch: str, files: list[str] | None = None):
        self.files = files or []
        reason = "conflicts in " + ", ".join(self.files) if self.files else ""
        super().__init__(branch, reason or "conflicts")


__all__ = [
    "SyncError",
    "FatalSyncError",
    "HistoryUnavailable",
    "UpstreamUnavailable",
    "CommandFailed",
    "MergeFailed",
    "MergeConflict",
]
