"""
config.py
Load defaults from TOML (Python 3.11+ tomllib) and build the validated,
immutable Configuration for one run.
Search order for raidgrow.toml:
  1) explicit --config path
  2) adjacent DEFAULT_CONFIG_PATH (bundle root / 'raidgrow.toml')
  3) /etc/raidgrow.toml
A missing file means built-in defaults.
"""

from __future__ import annotations
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, Iterable, Optional
from .types import Settings, Configuration, MODES, LEVELS
from .bundle import DEFAULT_CONFIG_PATH
from .errors import ConfigurationError, LayoutError
from .layout import resolve
from .util import dev_path

ARRAY_DEVICE_RE = re.compile(r"^/dev/md[0-9]+$")


def _gv(d: Dict[str, Any], path: list[str], default=None):
    cur = d
    for k in path:
        if not isinstance(cur, dict) or k not in cur:
            return default
        cur = cur[k]
    return cur


def _load_toml(path: Path) -> Dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def find_config(path_arg: str | None) -> Path:
    """Pick the best config path based on CLI arg and availability."""
    if path_arg:
        # User explicitly specified a config - it must exist
        p = Path(path_arg)
        if not p.exists():
            raise FileNotFoundError(f"Specified config file does not exist: {path_arg}")
        return p

    p = Path(DEFAULT_CONFIG_PATH)
    if p.exists():
        return p
    return Path("/etc/raidgrow.toml")


def load_settings(path: Optional[Path]) -> Settings:
    cfg = _load_toml(path) if path is not None and path.exists() else {}

    def gv(keys, default=None):
        return _gv(cfg, keys, default)

    return Settings(
        level=int(gv(["defaults", "level"], 5)),
        chunk_kb=int(gv(["defaults", "chunk_kb"], 32)),
        layout=gv(["defaults", "layout"]) or None,
        run_summary_dir=Path(gv(["output", "run_summary_dir"], "/var/log/raidgrow")),
        write_summary=bool(gv(["output", "write_summary"], True)),
        log_level=str(gv(["runtime", "log_level"], "INFO")).upper(),
    )


def split_partitions(value: Optional[str]) -> tuple[str, ...]:
    """'sdb1,/dev/sdc1' -> ('/dev/sdb1', '/dev/sdc1')"""
    if not value:
        return ()
    return tuple(dev_path(p) for p in value.split(",") if p.strip())


def build_configuration(
    mode: Optional[str],
    volume_group: Optional[str],
    array_device: Optional[str],
    partitions: Iterable[str],
    settings: Settings,
    level: Optional[int] = None,
    chunk_kb: Optional[int] = None,
    layout: Optional[str] = None,
    simulate: bool = False,
) -> Configuration:
    """Merge CLI values over TOML defaults and validate the result."""
    config = Configuration(
        mode=mode or "",
        volume_group=(volume_group or "").strip(),
        array_device=dev_path(array_device) if array_device else None,
        partitions=tuple(dev_path(p) for p in partitions),
        level=settings.level if level is None else level,
        chunk_kb=settings.chunk_kb if chunk_kb is None else chunk_kb,
        layout=layout if layout is not None else settings.layout,
        simulate=simulate,
    )
    validate_configuration(config)
    if config.mode == "create" and config.layout:
        # only create uses the requested layout; extend/remove use the discovered one
        try:
            resolve(config.level, config.layout)
        except LayoutError as e:
            raise ConfigurationError(str(e))
    return config


def validate_configuration(config: Configuration) -> None:
    if config.mode not in MODES:
        raise ConfigurationError("You must specify one of --create, --extend or --remove")
    if not config.volume_group:
        raise ConfigurationError("Volume group must be specified")
    if config.level not in LEVELS:
        raise ConfigurationError(f"Invalid RAID level: {config.level}")
    if not 1 <= config.chunk_kb <= 1024:
        raise ConfigurationError(f"Chunk size must be between 1-1024, got {config.chunk_kb}")
    if config.array_device is not None and not ARRAY_DEVICE_RE.match(config.array_device):
        raise ConfigurationError(f"Invalid RAID device: {config.array_device}")
    if config.mode in ("extend", "remove") and not config.array_device:
        raise ConfigurationError(f"RAID device must be specified for --{config.mode}")
    if config.mode in ("create", "extend") and not config.partitions:
        raise ConfigurationError("Partitions must be specified")
    dupes = sorted({p for p in config.partitions if config.partitions.count(p) > 1})
    if dupes:
        raise ConfigurationError(f"Partitions listed more than once: {', '.join(dupes)}")
