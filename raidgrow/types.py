"""
types.py
Dataclasses used across modules: Settings, Configuration, ArrayTopology,
Step, StepResult, RunResult.

Configuration and ArrayTopology are frozen: they are built once and only read
afterwards.
"""
from __future__ import annotations
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Tuple, Dict, Any

MODES = ("create", "extend", "remove")
LEVELS = (0, 1, 5, 10)


@dataclass
class Settings:
    # defaults
    level: int
    chunk_kb: int
    layout: Optional[str]
    # output
    run_summary_dir: Path
    write_summary: bool
    # runtime
    log_level: str


@dataclass(frozen=True)
class Configuration:
    mode: str
    volume_group: str
    array_device: Optional[str]
    partitions: Tuple[str, ...]
    level: int
    chunk_kb: int
    layout: Optional[str] = None
    simulate: bool = False


@dataclass(frozen=True)
class ArrayTopology:
    device: str
    level: int
    members: Tuple[str, ...]
    chunk_kb: int
    layout: Optional[str] = None

    def member_paths(self) -> List[str]:
        return [f"/dev/{m}" for m in self.members]


@dataclass(frozen=True)
class Step:
    argv: Tuple[str, ...]
    tolerate: bool = False
    description: str = ""
    capture: bool = False

    @property
    def command(self) -> str:
        return shlex.join(self.argv)


@dataclass
class StepResult:
    step: Step
    ok: bool
    rc: int
    output: str = ""
    simulated: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "command": self.step.command,
            "description": self.step.description,
            "tolerate": self.step.tolerate,
            "ok": self.ok,
            "rc": self.rc,
            "simulated": self.simulated,
        }


@dataclass
class RunResult:
    mode: str
    device: Optional[str] = None
    status: str = "ok"
    error: Optional[str] = None
    states: List[str] = field(default_factory=list)
    steps: List[StepResult] = field(default_factory=list)
    topology: Optional[ArrayTopology] = None
    duration_sec: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def as_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "device": self.device,
            "status": self.status,
            "error": self.error,
            "states": list(self.states),
            "steps": [s.as_dict() for s in self.steps],
            "topology": self.topology.__dict__ if self.topology else None,
            "duration_sec": self.duration_sec,
        }
