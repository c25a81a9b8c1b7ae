"""Tests for sequential merge orchestration."""

import pytest
from conftest import FakeVersionControl

from nightlysync.core.errors import CommandFailed
from nightlysync.core.result import BranchMatch, MergeOutcome
from nightlysync.sync.orchestrator import MergeOrchestrator


def matches_for(*numbers):
    return [
        BranchMatch(pull_request=n, branch=f"lean-pr-testing-{n}")
        for n in numbers
    ]


@pytest.fixture
def vcs():
    return FakeVersionControl(
        branches={
            f"lean-pr-testing-{n}": [f"Mathlib/F{n}.lean"]
            for n in (1, 2, 3, 4)
        },
        conflicting={"lean-pr-testing-2", "lean-pr-testing-3"},
    )


@pytest.fixture
def orchestrator(vcs):
    return MergeOrchestrator(
        vcs,
        "nightly-testing",
        compare_url="https://github.com/{repository}/compare/{base}...{branch}",
        repository="owner/repo",
    )


def test_empty_list_gives_empty_report(vcs, orchestrator):
    report = orchestrator.run([])

    assert report.is_empty
    assert vcs.merged == []


def test_partial_failure_continues(vcs, orchestrator):
    report = orchestrator.run(matches_for(1, 2, 3, 4))

    assert vcs.merged == [
        "lean-pr-testing-1",
        "lean-pr-testing-2",
        "lean-pr-testing-3",
        "lean-pr-testing-4",
    ]
    assert [a.pull_request for a in report.successes] == [1, 4]
    assert [a.pull_request for a in report.failures] == [2, 3]
    assert all(a.outcome is MergeOutcome.FAILURE for a in report.failures)
    assert "conflicts" in report.failures[0].detail


@pytest.mark.parametrize(
    "numbers", [(1,), (2,), (1, 2), (2, 1, 4), (3, 2), (1, 4)]
)
def test_working_tree_returns_to_snapshot(vcs, orchestrator, numbers):
    before = vcs.head()

    orchestrator.run(matches_for(*numbers))

    assert vcs.is_clean
    assert vcs.head() == before


def test_each_merge_starts_from_snapshot(vcs, orchestrator):
    seen = []
    merge = vcs.merge

    def recording_merge(ref):
        seen.append(vcs.head())
        merge(ref)

    vcs.merge = recording_merge
    orchestrator.run(matches_for(1, 4))

    assert seen == ["base", "base"]


def test_compare_link(vcs, orchestrator):
    report = orchestrator.run(matches_for(1))

    assert report.successes[0].compare_link == (
        "https://github.com/owner/repo/compare/"
        "nightly-testing...lean-pr-testing-1"
    )


def test_persist_advances_snapshot(vcs, orchestrator):
    report = orchestrator.run(
        matches_for(1, 2, 4),
        persist=lambda match: vcs.push("nightly-testing"),
    )

    assert len(report.successes) == 2
    assert vcs.pushed == [
        "base+lean-pr-testing-1",
        "base+lean-pr-testing-1+lean-pr-testing-4",
    ]
    assert vcs.is_clean
    assert vcs.head() == "base+lean-pr-testing-1+lean-pr-testing-4"


def test_persist_failure_is_recorded(vcs, orchestrator):
    def reject(match):
        raise CommandFailed("git push", 1, "rejected")

    report = orchestrator.run(matches_for(1), persist=reject)

    assert report.successes == []
    assert report.failures[0].pull_request == 1
    assert vcs.is_clean
    assert vcs.head() == "base"


def test_persist_os_error_does_not_stop_run(vcs, orchestrator):
    def unwritable(match):
        raise OSError("read-only file system")

    report = orchestrator.run(matches_for(1, 4), persist=unwritable)

    assert report.successes == []
    assert [a.pull_request for a in report.failures] == [1, 4]
    assert "read-only" in report.failures[0].detail
    assert vcs.is_clean
    assert vcs.head() == "base"


def test_attempt_leaves_success_applied(vcs, orchestrator):
    orchestrator.begin()

    attempt = orchestrator.attempt(matches_for(1)[0])

    assert attempt.succeeded
    assert vcs.head() == "base+lean-pr-testing-1"


def test_attempt_rolls_back_failure(vcs, orchestrator):
    orchestrator.begin()

    attempt = orchestrator.attempt(matches_for(2)[0])

    assert not attempt.succeeded
    assert vcs.is_clean
    assert vcs.head() == "base"


def test_attempt_starts_clean_from_dirty_tree(vcs, orchestrator):
    orchestrator.begin()
    vcs.dirty = True

    attempt = orchestrator.attempt(matches_for(4)[0])

    assert attempt.succeeded
    assert not vcs.dirty
