"""Version-control capabilities used by the pipeline.

Stages never touch the checkout directly; they call a VersionControl
passed in by the caller. GitClient is the implementation backed by
the git command line, with command strings taken from the
``commands.git`` section of the configuration.
"""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Protocol, runtime_checkable

from nightlysync.core.errors import CommandFailed, MergeConflict, MergeFailed
from nightlysync.core.log import logger
from nightlysync.core.runner import Runner


@runtime_checkable
class VersionControl(Protocol):
    """Synchronous version-control operations on one repository."""

    def file_revisions(self, path: str, limit: int = 2) -> list[str]:
        """Commits that touched path, newest first."""
        ...

    def show_file(self, revision: str, path: str) -> str:
        """Content of path at revision."""
        ...

    def log_subjects(self, old: str, new: str) -> list[str]:
        """Commit subjects reachable from new but not from old."""
        ...

    def remote_branches(self) -> set[str]:
        """Branch names on the remote, without the remote prefix."""
        ...

    def changed_files(self, base: str, branch: str) -> list[str]:
        """Paths changed on branch since its merge base with base."""
        ...

    def head(self) -> str:
        ...

    def checkout(self, branch: str, start: str | None = None) -> None:
        """Switch to branch, recreating it at start when given."""
        ...

    def merge(self, ref: str) -> None:
        """Merge ref into the current branch.

        Raises:
            MergeConflict: If the merge stopped on conflicts
            MergeFailed: If it failed for any other reason
        """
        ...

    def merge_abort(self) -> None:
        ...

    def hard_reset(self, ref: str = "HEAD") -> None:
        ...

    def clean(self) -> None:
        ...

    def fetch(self) -> None:
        ...

    def push(self, branch: str) -> None:
        ...


class GitClient:
    """VersionControl over a git working directory."""

    def __init__(
        self,
        workdir: Path,
        commands: dict[str, str],
        remote: str = "origin",
        runner: Runner | None = None,
    ):
        """Create a client for one repository.

        Args:
            workdir: Working directory of the repository
            commands: Command templates (config.commands["git"])
            remote: Remote used for fetch, push and branch listing
            runner: Command runner, a fresh Runner when omitted
        """
        self.workdir = Path(workdir)
        self.commands = commands
        self.remote = remote
        self.runner = runner or Runner()

    def _command(self, name: str, **params: str) -> str:
        try:
            template = self.commands[name]
        except KeyError:
            raise KeyError(f"No git command template named '{name}'") from None
        quoted = {key: shlex.quote(str(value)) for key, value in params.items()}
        return template.format(**quoted)

    def _git(self, name: str, check: bool = True, **params: str):
        """Run a named git command in the working directory.

        Raises:
            CommandFailed: If check is set and the command fails
        """
        command = self._command(name, **params)
        result = self.runner.execute(command, cwd=self.workdir, check=False)
        if check and result.exited != 0:
            raise CommandFailed(command, result.exited, result.stderr)
        return result

    def file_revisions(self, path: str, limit: int = 2) -> list[str]:
        result = self._git("file_revisions", limit=limit, path=path)
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def show_file(self, revision: str, path: str) -> str:
        # "./" makes the path relative to the working directory
        return self._git("show_file", object=f"{revision}:./{path}").stdout

    def log_subjects(self, old: str, new: str) -> list[str]:
        result = self._git("log_subjects", range=f"{old}..{new}")
        return [line for line in result.stdout.splitlines() if line.strip()]

    def remote_branches(self) -> set[str]:
        prefix = f"{self.remote}/"
        result = self._git("remote_branches")
        return {
            line.strip()[len(prefix):]
            for line in result.stdout.splitlines()
            if line.strip().startswith(prefix)
        }

    def changed_files(self, base: str, branch: str) -> list[str]:
        result = self._git("changed_files", range=f"{base}...{branch}")
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def head(self) -> str:
        return self._git("head").stdout.strip()

    def checkout(self, branch: str, start: str | None = None) -> None:
        if start is None:
            self._git("checkout", branch=branch)
        else:
            self._git("checkout_reset", branch=branch, start=start)

    def merge(self, ref: str) -> None:
        result = self._git("merge", check=False, ref=ref)
        if result.exited == 0:
            return

        conflicts = self._git("unmerged_files", check=False).stdout.split()
        logger.debug(
            "Merge failed",
            ref=ref,
            exited=result.exited,
            conflicts=conflicts,
        )
        if conflicts:
            raise MergeConflict(ref, conflicts)
        raise MergeFailed(ref, (result.stderr or result.stdout).strip())

    def merge_abort(self) -> None:
        # Fails harmlessly when no merge is in progress
        self._git("merge_abort", check=False)

    def hard_reset(self, ref: str = "HEAD") -> None:
        self._git("hard_reset", ref=ref)

    def clean(self) -> None:
        self._git("clean")

    def fetch(self) -> None:
        self._git("fetch", remote=self.remote)

    def push(self, branch: str) -> None:
        self._git("push", remote=self.remote, branch=branch)

    def clone(self, url: str, path: Path) -> GitClient:
        """Shallow-clone url to path; returns a client for the clone."""
        self._git("clone_shallow", url=url, path=path)
        return GitClient(path, self.commands, runner=self.runner)

    def fetch_tag(self, tag: str, shallow: bool = False) -> None:
        """Fetch a single tag from origin without other tags."""
        self._git("fetch_tag_shallow" if shallow else "fetch_tag", tag=tag)
