"""Tests for branch matching."""

import pytest

from nightlysync.sync.matcher import branch_name, match_branches


def test_branch_name_convention():
    assert branch_name("lean-pr-testing", 6123) == "lean-pr-testing-6123"


@pytest.mark.parametrize("number", [0, -3])
def test_branch_name_rejects_non_positive(number):
    with pytest.raises(ValueError):
        branch_name("lean-pr-testing", number)


def test_match_branches_returns_existing_only():
    remote = {"lean-pr-testing-101", "lean-pr-testing-103", "nightly-testing"}

    matches = match_branches([101, 102, 103], remote, "lean-pr-testing")

    assert [(m.pull_request, m.branch) for m in matches] == [
        (101, "lean-pr-testing-101"),
        (103, "lean-pr-testing-103"),
    ]


def test_match_branches_at_most_one_per_identifier():
    remote = {
        "lean-pr-testing-10",
        "lean-pr-testing-101",
        "lean-pr-testing-1010",
        "lean-pr-testing-010",
    }

    matches = match_branches([10], remote, "lean-pr-testing")

    assert [m.branch for m in matches] == ["lean-pr-testing-10"]


def test_match_branches_no_matches():
    assert match_branches([1, 2], {"main"}, "lean-pr-testing") == []
