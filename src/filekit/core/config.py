"""Configuration — per-command defaults, optionally loaded from YAML.

Lookup order for the config file:

1. ``--config FILE`` on the command line
2. ``$FILEKIT_CONFIG``
3. ``.filekit.yaml`` in the working directory (silently skipped if absent)

Example::

    encoding: utf-8
    backup_suffix: .orig
    count:
      include_hidden: false
    tree:
      max_depth: 3
      color: true
"""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from filekit.errors import ConfigError
from filekit.model.entry import FilterPolicy

DEFAULT_CONFIG_NAME = ".filekit.yaml"
ENV_CONFIG = "FILEKIT_CONFIG"
ENV_ENCODING = "FILEKIT_ENCODING"


@dataclass(frozen=True)
class CommandDefaults:
    """Filter policy plus presentation defaults for one command."""

    policy: FilterPolicy = field(default_factory=FilterPolicy)
    color: bool = False


# Count and replace include hidden files; search leaves it to -H; tree
# mirrors a plain listing and honours ignore files.
_BUILTIN: dict[str, CommandDefaults] = {
    "search": CommandDefaults(FilterPolicy(include_hidden=False)),
    "count": CommandDefaults(FilterPolicy(include_hidden=True)),
    "replace": CommandDefaults(FilterPolicy(include_hidden=True)),
    "tree": CommandDefaults(FilterPolicy(include_hidden=False, respect_ignore_files=True)),
}

_POLICY_KEYS = {f.name for f in fields(FilterPolicy)}
_COMMAND_KEYS = _POLICY_KEYS | {"color"}


@dataclass(frozen=True)
class FilekitConfig:
    """Immutable, fully-resolved configuration."""

    encoding: str = "utf-8"
    backup_suffix: str = ".bak"
    commands: Mapping[str, CommandDefaults] = field(default_factory=lambda: dict(_BUILTIN))
    source: Path | None = None

    def for_command(self, name: str) -> CommandDefaults:
        return self.commands.get(name, CommandDefaults())


def _check_bool(section: str, key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{section}.{key} must be true or false, got {value!r}")
    return value


def _merge_command(name: str, base: CommandDefaults, raw: Any) -> CommandDefaults:
    if not isinstance(raw, Mapping):
        raise ConfigError(f"section {name!r} must be a mapping")
    unknown = set(raw) - _COMMAND_KEYS
    if unknown:
        raise ConfigError(f"unknown keys in {name!r}: {', '.join(sorted(unknown))}")

    policy_changes: dict[str, Any] = {}
    for key in ("include_hidden", "respect_ignore_files"):
        if key in raw:
            policy_changes[key] = _check_bool(name, key, raw[key])
    if "max_depth" in raw:
        depth = raw["max_depth"]
        if depth is not None and (not isinstance(depth, int) or isinstance(depth, bool) or depth < 0):
            raise ConfigError(f"{name}.max_depth must be a non-negative integer or null")
        policy_changes["max_depth"] = depth

    color = _check_bool(name, "color", raw["color"]) if "color" in raw else base.color
    policy = FilterPolicy(
        include_hidden=policy_changes.get("include_hidden", base.policy.include_hidden),
        max_depth=policy_changes.get("max_depth", base.policy.max_depth),
        respect_ignore_files=policy_changes.get(
            "respect_ignore_files", base.policy.respect_ignore_files
        ),
    )
    return CommandDefaults(policy=policy, color=color)


def _check_encoding(value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"encoding must be a string, got {value!r}")
    try:
        codecs.lookup(value)
    except LookupError:
        raise ConfigError(f"unknown encoding: {value}") from None
    # Lines are split on the raw newline byte before decoding.
    try:
        ascii_compatible = "\n".encode(value) == b"\n"
    except (LookupError, UnicodeError):
        ascii_compatible = False
    if not ascii_compatible:
        raise ConfigError(f"encoding must be ASCII-compatible, got {value}")
    return value


def config_from_mapping(data: Mapping[str, Any], *, source: Path | None = None) -> FilekitConfig:
    """Validate a parsed config document and merge it over the built-ins."""
    allowed = {"encoding", "backup_suffix"} | set(_BUILTIN)
    unknown = set(data) - allowed
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(sorted(unknown))}")

    encoding = _check_encoding(data["encoding"]) if "encoding" in data else "utf-8"

    backup_suffix = data.get("backup_suffix", ".bak")
    if not isinstance(backup_suffix, str) or not backup_suffix.startswith(".") or len(backup_suffix) < 2:
        raise ConfigError(f"backup_suffix must look like '.bak', got {backup_suffix!r}")

    commands = dict(_BUILTIN)
    for name in _BUILTIN:
        if name in data and data[name] is not None:
            commands[name] = _merge_command(name, _BUILTIN[name], data[name])

    return FilekitConfig(
        encoding=encoding,
        backup_suffix=backup_suffix,
        commands=commands,
        source=source,
    )


def load_config(
    path: Path | None = None,
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> FilekitConfig:
    """Resolve the configuration for one invocation.

    An explicitly requested file (argument or environment) must exist; the
    implicit ``.filekit.yaml`` is optional.
    """
    env = os.environ if env is None else env
    explicit = path
    if explicit is None and env.get(ENV_CONFIG):
        explicit = Path(env[ENV_CONFIG])

    candidate = explicit or (cwd or Path.cwd()) / DEFAULT_CONFIG_NAME
    if explicit is None and not candidate.is_file():
        config = FilekitConfig()
    else:
        try:
            text = candidate.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"cannot read config {candidate}: {exc.strerror or exc}") from exc
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {candidate}: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigError(f"{candidate}: top level must be a mapping")
        config = config_from_mapping(data, source=candidate)

    if env.get(ENV_ENCODING):
        config = FilekitConfig(
            encoding=_check_encoding(env[ENV_ENCODING]),
            backup_suffix=config.backup_suffix,
            commands=config.commands,
            source=config.source,
        )
    return config
