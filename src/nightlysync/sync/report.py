"""Rendering of merge reports."""

from nightlysync.core.result import Report

SUCCESS_HEADING = "### ✅ Successfully merged branches:"
FAILURE_HEADING = "### ❌ Failed merges:"
NOTHING_MERGED = "No branches were successfully merged."
ALL_MERGED = "All branches were successfully merged! 🎉"


def format_report(
    report: Report, recovery_command: str, label: str = "lean"
) -> str:
    """Render a report as markdown.

    Failed merges get a bash block with one retry line per branch,
    ready to paste:

        # Diff: <compare link>
        scripts/merge-lean-testing-pr.sh 1234   # lean-pr-testing-1234

    Empty sections are replaced by an explicit line, so the message
    always says what happened.

    Args:
        report: Outcomes of one run
        recovery_command: Command that retries a single merge
        label: Upstream prefix for PR references (label#1234)

    Returns:
        Markdown text
    """
    lines = []

    if report.successes:
        lines += [SUCCESS_HEADING, ""]
        lines += [
            f"- {label}#{attempt.pull_request} ([diff]({attempt.compare_link}))"
            for attempt in report.successes
        ]
    else:
        lines.append(NOTHING_MERGED)
    lines.append("")

    if report.failures:
        lines += [
            FAILURE_HEADING,
            "",
            "The following branches need to be merged manually:",
            "",
            "```bash",
        ]
        for attempt in report.failures:
            lines += [
                f"# Diff: {attempt.compare_link}",
                f"{recovery_command} {attempt.pull_request}   # {attempt.branch}",
                "",
            ]
        lines.append("```")
    else:
        lines.append(ALL_MERGED)

    return "\n".join(lines) + "\n"


def compare_link(template: str, repository: str, base: str, branch: str) -> str:
    """Fill in a compare URL template such as
    'https://github.com/{repository}/compare/{base}...{branch}'."""
    return template.format(repository=repository, base=base, branch=branch)
