"""
engine.py
Coordinates the create / extend / remove workflows:
  - create: detach claimed partitions -> allocate md slot -> rebuild -> reattach
  - extend: discover topology -> detach array -> stop + zero members -> rebuild
            (old members first, then new partitions) -> reattach
  - remove: discover topology -> detach array -> stop + zero members

Steps run strictly in order. The first fatal step failure ends the run;
steps already applied are not rolled back.
"""

from __future__ import annotations
import time
from typing import Callable, List, Optional
from . import commands
from .errors import ConfigurationError, RaidGrowError, StepExecutionError
from .layout import resolve
from .mdstat import TopologyReader
from .runner import CommandRunner
from .types import ArrayTopology, Configuration, Step, RunResult
from .util import dev_path, first_free_array, short_name
from .config import validate_configuration

INIT = "init"
DISCOVERING = "discovering"
DETACHING = "detaching"
REBUILDING = "rebuilding"
REATTACHING = "reattaching"
DONE = "done"
FAILED = "failed"


class Engine:
    def __init__(
        self,
        config: Configuration,
        runner: Optional[CommandRunner] = None,
        reader: Optional[TopologyReader] = None,
        allocate: Callable[[], str] = first_free_array,
    ):
        self.config = config
        self.runner = runner or CommandRunner(simulate=config.simulate)
        self.reader = reader or TopologyReader()
        self.allocate = allocate
        self.result = RunResult(mode=config.mode, device=config.array_device)
        self.state = INIT

    def _enter(self, state: str) -> None:
        self.state = state
        self.result.states.append(state)

    def _step(self, step: Step) -> bool:
        """Run one step; a fatal failure raises StepExecutionError."""
        res = self.runner.run(step)
        self.result.steps.append(res)
        if not res.ok and not step.tolerate:
            raise StepExecutionError(step.command, res.rc, res.output)
        return res.ok

    def run(self) -> RunResult:
        started = time.time()
        self._enter(INIT)
        try:
            validate_configuration(self.config)
            if self.config.mode == "create":
                self._create()
            elif self.config.mode == "extend":
                self._extend()
            else:
                self._remove()
            self._enter(DONE)
        except RaidGrowError as e:
            self.result.status = e.kind
            self.result.error = e.message
            self._enter(FAILED)
        self.result.duration_sec = round(time.time() - started, 2)
        return self.result

    # -- workflows ---------------------------------------------------------

    def _create(self) -> None:
        cfg = self.config
        layout = resolve(cfg.level, cfg.layout) if cfg.layout else None

        self._enter(DETACHING)
        for part in cfg.partitions:
            if self._step(commands.check_physical_volume(part)):
                print(f"[info] Removing {part} from volume group {cfg.volume_group}")
                self._release_pv(part)

        device = cfg.array_device or self.allocate()
        self.result.device = device
        self._rebuild(device, cfg.level, cfg.chunk_kb, layout, list(cfg.partitions))

    def _extend(self) -> None:
        cfg = self.config
        topo = self._discover()
        new_parts = list(cfg.partitions)
        already = [p for p in new_parts if short_name(p) in topo.members]
        if already:
            raise ConfigurationError(
                f"Partition(s) already members of {topo.device}: {', '.join(already)}"
            )
        self._retire(topo)
        members = topo.member_paths() + new_parts
        self._rebuild(topo.device, topo.level, topo.chunk_kb, topo.layout, members)

    def _remove(self) -> None:
        topo = self._discover()
        self._retire(topo)

    # -- phases ------------------------------------------------------------

    def _discover(self) -> ArrayTopology:
        self._enter(DISCOVERING)
        print(f"[info] Determining current partitions in {self.config.array_device}")
        topo = self.reader.read_topology(self.config.array_device, self.config.chunk_kb)
        if topo.layout:
            topo = ArrayTopology(
                topo.device, topo.level, topo.members, topo.chunk_kb,
                resolve(topo.level, topo.layout),
            )
        self.result.topology = topo
        for m in topo.members:
            print(f"[info]  + {m}")
        return topo

    def _release_pv(self, device: str) -> None:
        for step in commands.detach_from_group(self.config.volume_group, device):
            self._step(step)
        self._step(commands.wipe_signature(device))

    def _retire(self, topo: ArrayTopology) -> None:
        self._enter(DETACHING)
        print(f"[info] Removing RAID device {topo.device} from {self.config.volume_group}")
        self._release_pv(topo.device)
        print(f"[info] Stopping RAID device {topo.device}")
        self._step(commands.stop_array(topo.device))
        for part in topo.member_paths():
            self._step(commands.zero_array_signature(part))

    def _rebuild(
        self,
        device: str,
        level: int,
        chunk_kb: int,
        layout: Optional[str],
        members: List[str],
    ) -> None:
        self._enter(REBUILDING)
        members = [dev_path(m) for m in members]
        print(f"[info] Creating RAID device {device} (raid{level}, {len(members)} partitions)")
        self._step(commands.create_array(device, level, chunk_kb, layout, members))
        self._step(commands.init_physical_volume(device))

        self._enter(REATTACHING)
        self._step(commands.extend_group(self.config.volume_group, device))
