from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional, TypedDict, Union

import tomllib

from runes.logger import log as _log

config_file: Path = Path("config.toml").resolve()


class DebugConfig(TypedDict):
    trace: bool
    log_file: str


class HaltOnConfig(TypedDict):
    protocol_violation: bool
    illegal_opcode: bool


class BusConfig(TypedDict):
    diagnostics_size: int


class Config(TypedDict):
    debug: DebugConfig
    halt_on: HaltOnConfig
    bus: BusConfig


DEFAULT_CONFIG: Config = {
    "debug": {"trace": False, "log_file": ""},
    "halt_on": {"protocol_violation": True, "illegal_opcode": False},
    "bus": {"diagnostics_size": 256},
}


def default_config() -> Config:
    return deepcopy(DEFAULT_CONFIG)


def _deep_merge(
    target: MutableMapping[str, Any],
    overrides: Mapping[str, Any],
) -> MutableMapping[str, Any]:
    for key, value in overrides.items():
        if isinstance(target.get(key), dict) and isinstance(value, dict):
            _deep_merge(target[key], value)
        else:
            target[key] = value
    return target


def _validate_config(cfg: Config) -> None:
    if not isinstance(cfg["debug"]["trace"], bool):
        raise ValueError("debug.trace must be a boolean")

    if not isinstance(cfg["debug"]["log_file"], str):
        raise ValueError("debug.log_file must be a string")

    for key in ("protocol_violation", "illegal_opcode"):
        if not isinstance(cfg["halt_on"][key], bool):
            raise ValueError(f"halt_on.{key} must be a boolean")

    size = cfg["bus"]["diagnostics_size"]
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ValueError("bus.diagnostics_size must be a positive integer")


def load_config(path: Optional[Union[str, Path]] = None) -> Config:
    """
    Load the TOML configuration at ``path`` (``./config.toml`` by default).

    Missing files give the defaults. Unreadable or invalid files are logged
    and also give the defaults.
    """
    file = Path(path) if path is not None else config_file
    if not file.exists():
        return default_config()

    config = default_config()

    try:
        with open(file, "rb") as f:
            data = tomllib.load(f)

        if not isinstance(data, dict):
            raise ValueError("Config file root must be a table (dict).")

        _deep_merge(config, data)
        _validate_config(config)

    except (OSError, tomllib.TOMLDecodeError, ValueError) as e:
        _log.error(f"Failed to load config: {e}", exc_info=(type(e), e, e.__traceback__))
        return default_config()

    return config
