"""Collaborators handed to workflow nodes as graph dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field

from nightlysync.core.config import Config
from nightlysync.git.client import GitClient, VersionControl
from nightlysync.notify import FileNotifier, LogNotifier, Notifier
from nightlysync.sync.upstream import UpstreamChangeExtractor


@dataclass
class SyncDeps:
    """Everything a node may touch outside the State object."""

    vcs: VersionControl
    extractor: UpstreamChangeExtractor
    notifiers: list[Notifier] = field(default_factory=list)


def build_deps(config: Config) -> SyncDeps:
    """Create the git-backed collaborators described by config."""
    commands = config.commands["git"]
    vcs = GitClient(config.git.workdir, commands, remote=config.git.remote)
    extractor = UpstreamChangeExtractor(
        config.upstream.url,
        commands,
        workdir=config.upstream.workdir,
        runner=vcs.runner,
    )
    notifiers: list[Notifier] = [LogNotifier()]
    if config.report.output_file is not None:
        notifiers.append(FileNotifier(config.report.output_file))
    return SyncDeps(vcs=vcs, extractor=extractor, notifiers=notifiers)
