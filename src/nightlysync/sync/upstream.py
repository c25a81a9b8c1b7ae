"""Pull request discovery in the upstream project's history."""

from __future__ import annotations

import re
import tempfile
from collections.abc import Iterable
from pathlib import Path

from nightlysync.core.errors import CommandFailed, UpstreamUnavailable
from nightlysync.core.log import logger
from nightlysync.core.result import ExtractionResult, VersionWindow
from nightlysync.core.runner import Runner
from nightlysync.git.client import GitClient

# A commit subject ending in "(#<digits>)", the form GitHub gives
# squash-merged pull requests: "fix: foo (#1234)"
PR_REFERENCE = re.compile(r"\(#([0-9]+)\)\s*$")


def parse_pr_reference(message: str) -> int | None:
    """Return the pull request number a commit subject ends with.

    Only the first line of the message is considered. Subjects with
    no trailing reference, or a reference to PR 0, give None.
    """
    lines = message.splitlines()
    if not lines:
        return None
    match = PR_REFERENCE.search(lines[0])
    if match is None:
        return None
    number = int(match.group(1))
    return number if number > 0 else None


def extract_pull_requests(messages: Iterable[str]) -> ExtractionResult:
    """Collect distinct PR numbers in the order they first appear.

    Subjects without a usable reference (reverts, merge commits,
    hand-written messages) are skipped and counted.
    """
    result = ExtractionResult()
    seen = set()
    for message in messages:
        number = parse_pr_reference(message)
        if number is None:
            result.skipped += 1
            logger.debug("No PR reference in commit subject", subject=message)
            continue
        if number not in seen:
            seen.add(number)
            result.pull_requests.append(number)
    return result


class UpstreamChangeExtractor:
    """Reads the upstream log between two version tags."""

    def __init__(
        self,
        url: str,
        commands: dict[str, str],
        workdir: Path | None = None,
        runner: Runner | None = None,
    ):
        """Create an extractor.

        Args:
            url: Clone URL of the upstream repository
            commands: Git command templates (config.commands["git"])
            workdir: Existing clone to use; a temporary shallow clone
                is made for each fetch when omitted
            runner: Command runner shared with the created clients
        """
        self.url = url
        self.commands = commands
        self.workdir = workdir
        self.runner = runner or Runner()

    def _fetch_in(self, workdir: Path, window: VersionWindow) -> list[str]:
        return self._log_between(
            GitClient(workdir, self.commands, runner=self.runner), window
        )

    def _log_between(
        self, client: GitClient, window: VersionWindow
    ) -> list[str]:
        # Shallow fetch of the old tag first: fetching the new tag
        # then only transfers the commits in between
        client.fetch_tag(window.old, shallow=True)
        client.fetch_tag(window.new)
        return client.log_subjects(window.old, window.new)

    def fetch(self, window: VersionWindow) -> list[str]:
        """Commit subjects of old..new in the upstream repository.

        Raises:
            UpstreamUnavailable: If either tag or the log cannot be read
        """
        with logger.span("Fetching upstream history", url=self.url,
                         window=str(window)):
            try:
                if self.workdir is not None:
                    return self._fetch_in(self.workdir, window)

                with tempfile.TemporaryDirectory(prefix="nightlysync-") as tmp:
                    scratch = GitClient(
                        Path(tmp), self.commands, runner=self.runner
                    )
                    clone = scratch.clone(self.url, Path(tmp) / "upstream")
                    return self._log_between(clone, window)
            except CommandFailed as e:
                raise UpstreamUnavailable(self.url, e.stderr or str(e)) from e

    def extract(self, window: VersionWindow) -> ExtractionResult:
        """PR numbers merged upstream within the window.

        An empty window (unchanged marker) gives an empty result
        without contacting the upstream repository.
        """
        if window.is_empty:
            logger.info("Version marker unchanged, nothing to extract",
                        marker=window.new)
            return ExtractionResult()

        result = extract_pull_requests(self.fetch(window))
        logger.info(
            "Extracted upstream pull requests",
            count=len(result.pull_requests),
            skipped=result.skipped,
        )
        return result
