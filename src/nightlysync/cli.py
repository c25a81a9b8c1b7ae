#!/usr/bin/env python3
"""nightlysync CLI - keep an integration branch in step with upstream."""

import asyncio
import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from nightlysync.command.discover import DiscoverCommand
from nightlysync.command.merge import MergeCommand
from nightlysync.command.reset import ResetCommand
from nightlysync.core.config import State
from nightlysync.core.log import logger


class CliState(State):
    """Merge testing branches for upstream compiler PRs into the
    integration branch.

    When the toolchain version file changes, nightlysync finds the
    upstream PRs merged between the old and new toolchain, merges
    the matching '<prefix>-<PR>' testing branches that change more
    than auxiliary files, and reports what merged and what needs a
    human.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.git.integration_branch value)
    2. nightlysync.yaml in the current directory, user config and
       --include files
    3. .env file
    4. Environment variables
       (NIGHTLYSYNC_CONFIG__GIT__INTEGRATION_BRANCH=value)
    """

    discover: CliSubCommand[DiscoverCommand]
    merge: CliSubCommand[MergeCommand]
    reset: CliSubCommand[ResetCommand]

    def cli_cmd(self):
        """Dispatch to the active subcommand, or show help."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        # Closing the logger flushes file and OTLP sinks
        with logger:
            exit_code = asyncio.run(subcommand.run_workflow(self))
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
