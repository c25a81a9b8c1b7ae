"""YAML configuration loading with include directive support."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic_settings import BaseSettings, YamlConfigSettingsSource

from nightlysync.core.log import logger

CONFIG_FILENAME = "nightlysync.yaml"
DEFAULTS_FILE = Path(__file__).parent.parent / "defaults" / "default.yaml"


def cli_includes(argv: list[str]) -> list[str]:
    """Collect the values of every --include option in argv."""
    includes = []
    args = iter(argv[1:])
    for arg in args:
        if arg == "--include":
            value = next(args, None)
            if value is not None:
                includes.append(value)
        elif arg.startswith("--include="):
            includes.append(arg.split("=", 1)[1])
    return includes


def deep_merge(base: dict, override: dict) -> dict:
    """Return base with override merged in; override wins."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class YamlWithIncludesSettingsSource(YamlConfigSettingsSource):
    """YAML source layering defaults, user, project and CLI files.

    Load order (later wins):
        package defaults < user config < ./nightlysync.yaml
        < files named by --include.
    Any file may carry an ``include:`` key naming further files,
    resolved relative to the including file.
    """

    def __init__(self, settings_cls: type[BaseSettings], yaml_file=None):
        includes = cli_includes(sys.argv)
        base = yaml_file or settings_cls.model_config.get("yaml_file")
        if base and includes:
            base = [base] if isinstance(base, (str, os.PathLike)) else list(base)
            yaml_file = base + includes
        else:
            yaml_file = includes or base
        super().__init__(settings_cls, yaml_file)

    def _read_files(self, files, *args, **kwargs):  # noqa: ARG002
        if isinstance(files, (str, os.PathLike)):
            files = [files]

        candidates = [
            DEFAULTS_FILE,
            Path(user_config_dir("nightlysync", appauthor=False))
            / CONFIG_FILENAME,
            Path(CONFIG_FILENAME),
        ]
        for name in files or []:
            path = Path(name).expanduser()
            if path not in candidates:
                candidates.append(path)

        result = {}
        for path in candidates:
            if not path.is_file():
                logger.debug("Configuration file not found", file=str(path))
                continue
            logger.debug("Loading configuration", file=str(path))
            result = deep_merge(result, self._load_file_recursive(path, set()))
        return result

    def _load_file_recursive(self, filepath: Path, visited: set[Path]) -> dict:
        """Load one file with its include: directives resolved.

        Raises:
            ValueError: If a file includes itself, directly or not
        """
        filepath = filepath.resolve()
        if filepath in visited:
            raise ValueError(f"Circular include: {filepath}")
        visited.add(filepath)

        with open(filepath, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        includes = data.pop("include", None) or []
        if isinstance(includes, str):
            includes = [includes]

        merged = {}
        for inc in includes:
            inc_path = Path(inc).expanduser()
            if not inc_path.is_absolute():
                inc_path = filepath.parent / inc_path
            merged = deep_merge(
                merged, self._load_file_recursive(inc_path, visited.copy())
            )
        # The including file overrides what it includes
        return deep_merge(merged, data)
