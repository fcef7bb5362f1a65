"""
TOML-based config file loading for assetglob.

Searches for `.assetglob.toml`, `assetglob.toml`, or `pyproject.toml [tool.assetglob]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

logger = logging.getLogger(__name__)


@dataclass
class AssetglobConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    so the merge logic can tell "not configured" from "set to the default value".
    """

    patterns: list[str] | None = None
    workers: int | None = None
    exclude: list[str] | None = None
    respect_gitignore: bool | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".assetglob.toml", "assetglob.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(AssetglobConfig)}

_LIST_FIELDS = {"patterns", "exclude"}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.assetglob.toml` >
    `assetglob.toml` > `pyproject.toml` (only if it has `[tool.assetglob]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_assetglob_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_assetglob_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        return "assetglob" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError):
        return False


def load_config(config_path: Path) -> AssetglobConfig:
    """
    Load an `AssetglobConfig` from a TOML file. For `pyproject.toml` only the
    `[tool.assetglob]` table is read. Kebab-case keys map to snake_case fields.
    """
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
        logger.warning("Ignoring unreadable or malformed config file %s: %s", config_path, e)
        return AssetglobConfig()

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("assetglob", {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> AssetglobConfig:
    """Parse a flat or sectioned TOML dict into AssetglobConfig."""
    # Sections like [walk] merge into the top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key not in _VALID_FIELDS:
            logger.warning("Ignoring unrecognized config key: %s", key)
            continue
        checked = _check_value(snake_key, value)
        if checked is not None:
            mapped[snake_key] = checked

    return AssetglobConfig(**mapped)


def _check_value(name: str, value: Any) -> Any:
    """
    Return `value` if it has the type `name` expects, or `None` (with a warning)
    if not. A single string is accepted where a list of strings is expected.
    """
    if name in _LIST_FIELDS:
        if isinstance(value, str):
            logger.warning("Config key %s should be a list; treating %r as one pattern", name, value)
            return [value]
        if isinstance(value, list) and all(isinstance(v, str) for v in cast(list[Any], value)):
            return value
    elif name == "workers":
        if isinstance(value, int) and not isinstance(value, bool) and value >= 1:
            return value
    elif name == "respect_gitignore":
        if isinstance(value, bool):
            return value
    logger.warning("Ignoring invalid value for config key %s: %r", name, value)
    return None


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: AssetglobConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(AssetglobConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue
        if cfg_field.name in explicit_flags:
            continue
        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
