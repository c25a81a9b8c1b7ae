"""Delivery of rendered reports.

Delivery is best-effort: deliver() logs a failed notifier and moves
on, it never fails the run.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from nightlysync.core.log import logger


class Notifier(Protocol):
    """Accepts a rendered report as an opaque message body."""

    def send(self, message: str) -> None:
        ...


class LogNotifier:
    """Writes the report to the log."""

    def send(self, message: str) -> None:
        logger.info("Merge report\n{report}", report=message)


class FileNotifier:
    """Writes the report to a file, for CI steps to pick up."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def send(self, message: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(message, encoding="utf-8")
        logger.info("Wrote report", path=str(self.path))


def deliver(message: str, notifiers: Iterable[Notifier]) -> int:
    """Send message through every notifier.

    Returns:
        Number of notifiers that delivered it
    """
    delivered = 0
    for notifier in notifiers:
        try:
            notifier.send(message)
        except Exception as e:
            logger.warn(
                "Report delivery failed",
                notifier=type(notifier).__name__,
                error=str(e),
            )
        else:
            delivered += 1
    return delivered
