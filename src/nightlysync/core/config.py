"""Application state and configuration."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from nightlysync.core.base import BaseConfig, BaseState
from nightlysync.core.log import Logger
from nightlysync.core.result import (
    BranchMatch,
    ExtractionResult,
    Report,
    VersionWindow,
)
from nightlysync.core.yaml_settings import YamlWithIncludesSettingsSource

# Modules reachable from {...} templates in YAML values,
# e.g. {platformdirs.user_state_dir} or {os.getcwd}
TEMPLATE_NAMESPACE = {
    'os': os,
    'platformdirs': platformdirs,
    'Path': Path,
}

# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI)
# ============================================================

class GitConfig(BaseConfig):
    """Downstream repository and integration branch."""

    workdir: Path = Field(
        description="Working directory of the downstream git clone"
    )
    remote: str = Field(
        default="origin",
        description="Remote holding the testing branches",
    )
    integration_branch: str = Field(
        description="Branch that accumulates upstream fixes "
        "(e.g. 'nightly-testing')"
    )
    branch_prefix: str = Field(
        description="Testing branch prefix; branches are named "
        "'<prefix>-<PR number>'"
    )
    version_file: str = Field(
        description="Tracked file holding the toolchain version marker"
    )
    version_delimiter: str = Field(
        default=":",
        description="The marker is the text after this delimiter",
    )
    ignore_paths: list[str] = Field(
        default_factory=list,
        description="Paths whose changes alone make a branch irrelevant",
    )
    push: bool = Field(
        default=False,
        description="Push successful merges to the remote",
    )


class UpstreamConfig(BaseConfig):
    """Upstream project whose history bounds the search."""

    url: str = Field(description="Clone URL of the upstream repository")
    workdir: Path | None = Field(
        default=None,
        description="Existing local clone to use instead of a "
        "temporary shallow clone",
    )
    label: str = Field(
        default="lean",
        description="Prefix for PR references in the report (label#123)",
    )


class ReportConfig(BaseConfig):
    """Report rendering and delivery."""

    repository: str = Field(
        description="Downstream 'owner/name' used in compare links"
    )
    compare_url: str = Field(
        default="https://github.com/{repository}/compare/{base}...{branch}",
        description="Compare link template ({repository}, {base}, {branch})",
    )
    recovery_command: str = Field(
        description="Command a human runs to retry a failed merge"
    )
    output_file: Path | None = Field(
        default=None,
        description="Also write the rendered report to this file",
    )
    notify_empty: bool = Field(
        default=True,
        description="Deliver the report even when nothing was attempted",
    )


class Config(BaseConfig):
    """Application configuration loaded from YAML/env/CLI."""

    logger: Logger = Field(
        default=None,
        description="Logger configuration and runtime instance",
    )
    git: GitConfig = Field(description="Downstream repository settings")
    upstream: UpstreamConfig = Field(description="Upstream project settings")
    report: ReportConfig = Field(description="Report settings")

    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir()) / "nightlysync"
        ),
        description="Root directory for log files "
        "(supports {platformdirs.*} templates)",
    )
    commands: dict[str, dict[str, str]] = Field(
        default_factory=dict,
        description="Command templates by category (git, ...)",
    )

    @model_validator(mode='after')
    def _setup_logger(self) -> 'Config':
        """Install the global logger once configuration is loaded."""
        from nightlysync.core.log import setup_logger

        if self.logger is None:
            self.logger = Logger()

        setup_logger(
            log_root=self.log_root,
            run_name=self.git.integration_branch,
            console=self.logger.console,
            file=self.logger.file,
            otlp=self.logger.otlp,
            level=self.logger.level,
        )
        return self

    def close(self):
        from nightlysync.core.log import logger
        logger.close()
        super().close()


# ============================================================
# RUNTIME STATE MODELS (mutable during workflow execution)
# ============================================================

class SyncState(BaseState):
    """Discovery pipeline state, filled in stage by stage."""

    window: VersionWindow | None = Field(
        default=None, description="Resolved version window"
    )
    extraction: ExtractionResult | None = Field(
        default=None, description="PR identifiers found upstream"
    )
    matches: list[BranchMatch] = Field(
        default_factory=list, description="PRs with a testing branch"
    )
    relevant: list[BranchMatch] = Field(
        default_factory=list, description="Matches worth merging"
    )
    report: Report = Field(
        default_factory=Report, description="Merge outcomes"
    )
    message: str | None = Field(
        default=None, description="Rendered report text"
    )
    status: str = Field(
        default="pending",
        description="pending, running, complete, failed",
    )


class ResetState(BaseState):
    """Reset workflow state."""

    status: str = Field(default="pending")


class Runtime(BaseModel):
    """All runtime state, by workflow."""

    sync: SyncState = Field(default_factory=SyncState)
    reset: ResetState = Field(default_factory=ResetState)

    model_config = ConfigDict(arbitrary_types_allowed=True)


# ============================================================
# STATE (config + runtime combined)
# ============================================================

class State(BaseSettings):
    """Configuration plus runtime state; flows through every workflow."""

    config: Config = Field(
        description="Application configuration (from YAML/env/CLI)"
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates during workflow execution)",
    )
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to include and merge. "
            "Use --include on CLI or include: in YAML files."
        ),
    )

    model_config = SettingsConfigDict(
        yaml_file="nightlysync.yaml",
        env_file=".env",
        env_prefix="NIGHTLYSYNC_",
        env_nested_delimiter="__",
        cli_parse_args=True,
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority: init args, YAML, .env, environment, secrets."""
        return (
            init_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )

    @model_validator(mode="after")
    def substitute_templates(self) -> "State":
        """Expand {config.*} and {platformdirs.*} templates in strings."""
        self._substitute_recursive(self.config)
        return self

    def _substitute_recursive(self, obj: Any) -> None:
        if isinstance(obj, BaseModel):
            for field_name in obj.__class__.model_fields:
                value = getattr(obj, field_name)
                new_value = self._substitute_value(value)
                if new_value is not value:
                    setattr(obj, field_name, new_value)
        elif isinstance(obj, dict):
            for key in obj:
                obj[key] = self._substitute_value(obj[key])
        elif isinstance(obj, list):
            for i, item in enumerate(obj):
                obj[i] = self._substitute_value(item)

    def _substitute_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self._substitute_string(value)
        if isinstance(value, Path):
            return Path(self._substitute_string(str(value)))
        if isinstance(value, (BaseModel, dict, list)):
            self._substitute_recursive(value)
        return value

    def _substitute_string(self, value: str) -> str:
        """Replace {dotted.path} references that resolve.

        Unresolvable references are left as they are, so command
        templates such as "{ref}" survive for later formatting.
        """
        def replace(match):
            parts = match.group(1).split(".")
            root = parts[0]
            if root in TEMPLATE_NAMESPACE:
                obj = TEMPLATE_NAMESPACE[root]
                parts = parts[1:]
            elif root == "config":
                obj = self
            else:
                return match.group(0)

            try:
                for part in parts:
                    obj = getattr(obj, part)
                if callable(obj) and root == "platformdirs":
                    obj = obj("nightlysync", appauthor=False)
                elif callable(obj):
                    obj = obj()
                return str(obj)
            except (AttributeError, TypeError):
                return match.group(0)

        return re.sub(r'\{([a-z._]+)\}', replace, value)


__all__ = ["State", "Config", "BaseConfig", "BaseState"]
