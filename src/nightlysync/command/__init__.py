"""CLI command modules for nightlysync."""

from nightlysync.command.discover import DiscoverCommand
from nightlysync.command.merge import MergeCommand
from nightlysync.command.reset import ResetCommand

__all__ = ["DiscoverCommand", "MergeCommand", "ResetCommand"]
