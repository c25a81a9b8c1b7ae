"""Pytest configuration and fixtures for nightlysync tests."""

import shutil
import subprocess
import sys
import tempfile
from pathlib import Path

import pytest

from nightlysync.core.errors import CommandFailed, MergeConflict
from nightlysync.core.log import ConsoleSink, setup_logger
from nightlysync.core.result import VersionWindow
from nightlysync.sync.upstream import extract_pull_requests

INTEGRATION = "nightly-testing"


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only logging, nothing sent anywhere."""
    test_log_root = Path(tempfile.gettempdir()) / "nightlysync-tests"
    setup_logger(
        log_root=test_log_root,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


def load_state():
    """Load State from package defaults with a neutral sys.argv.

    pytest's own arguments would otherwise be parsed as CLI options.
    """
    from nightlysync.core.config import State

    old_argv = sys.argv
    sys.argv = ['nightlysync']
    try:
        return State()
    finally:
        sys.argv = old_argv


@pytest.fixture(scope="session")
def test_config():
    """Config loaded from package defaults."""
    return load_state().config


@pytest.fixture
def test_state():
    """Fresh State (defaults plus empty runtime) for one test."""
    return load_state()


class FakeVersionControl:
    """In-memory VersionControl for one downstream repository.

    Remote branches are described by the paths they change and
    whether merging them conflicts. The local integration branch is
    a chain of merged branch names, so the working state can be
    compared before and after a run.
    """

    def __init__(
        self,
        version_history=None,
        branches=None,
        conflicting=(),
        integration=INTEGRATION,
        unreadable=(),
    ):
        # Newest first: [(revision, content), ...]
        self.version_history = list(version_history or [])
        self.branches = dict(branches or {})
        self.conflicting = set(conflicting)
        # Branches whose diff fails, as with a corrupt or missing ref
        self.unreadable = set(unreadable)
        self.integration = integration
        self.refs = {integration: "base"}
        self.current = integration
        self.merging = False
        self.dirty = False
        self.merged = []
        self.pushed = []
        self.fetches = 0

    @property
    def is_clean(self) -> bool:
        return (
            not self.merging
            and not self.dirty
            and self.current == self.integration
        )

    def file_revisions(self, path, limit=2):
        return [rev for rev, _ in self.version_history][:limit]

    def show_file(self, revision, path):
        for rev, content in self.version_history:
            if rev == revision:
                return content
        raise CommandFailed(f"git show {revision}:./{path}", 128, "bad revision")

    def log_subjects(self, old, new):
        return []

    def remote_branches(self):
        return set(self.branches) | {self.integration}

    def changed_files(self, base, branch):
        name = branch.split("/", 1)[1]
        if name in self.unreadable:
            raise CommandFailed(f"git diff --name-only {base}...{branch}",
                                128, "bad revision")
        return list(self.branches[name])

    def head(self):
        return self.refs[self.current]

    def checkout(self, branch, start=None):
        if self.merging:
            raise CommandFailed(f"git checkout {branch}", 1, "merge in progress")
        if start is not None:
            self.refs[branch] = "base"
        self.current = branch

    def merge(self, ref):
        branch = ref.split("/", 1)[1]
        self.merged.append(branch)
        if branch in self.conflicting:
            self.merging = True
            self.dirty = True
            raise MergeConflict(ref, list(self.branches[branch]))
        self.refs[self.current] = f"{self.head()}+{branch}"

    def merge_abort(self):
        self.merging = False

    def hard_reset(self, ref="HEAD"):
        if ref != "HEAD":
            self.refs[self.current] = ref
        self.merging = False
        self.dirty = False

    def clean(self):
        pass

    def fetch(self):
        self.fetches += 1

    def push(self, branch):
        self.pushed.append(self.refs[branch])


class FakeExtractor:
    """Upstream extractor reading a canned commit log."""

    def __init__(self, subjects=()):
        self.subjects = list(subjects)
        self.windows = []

    def extract(self, window: VersionWindow):
        self.windows.append(window)
        return extract_pull_requests(self.subjects)


@pytest.fixture
def fake_vcs():
    return FakeVersionControl()


# ============================================================
# Real git repositories
# ============================================================

requires_git = pytest.mark.skipif(
    shutil.which("git") is None, reason="git command line not available"
)


def git(cwd, *args):
    """Run git in cwd and return its stdout."""
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True
    )
    return result.stdout


def commit_file(repo, path, content, message):
    target = Path(repo) / path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)
    git(repo, "add", path)
    git(repo, "commit", "-q", "-m", message)


@pytest.fixture
def git_identity(monkeypatch):
    """Author and committer for commits made by tests and merges."""
    for role in ("AUTHOR", "COMMITTER"):
        monkeypatch.setenv(f"GIT_{role}_NAME", "nightlysync tests")
        monkeypatch.setenv(f"GIT_{role}_EMAIL", "tests@example.com")
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
