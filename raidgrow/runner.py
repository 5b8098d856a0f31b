"""
runner.py
CommandRunner: the only component that mutates host state.

Every step is echoed before it acts. In simulate mode nothing is executed and
each step reports success, so a dry run walks the same sequence as a real one.
"""

from __future__ import annotations
from typing import Callable, List
from .types import Step, StepResult
from .util import run


class CommandRunner:
    def __init__(self, simulate: bool = False, executor: Callable = run, verbose: bool = False):
        self.simulate = simulate
        self.executor = executor
        self.verbose = verbose
        self.history: List[StepResult] = []

    def run(self, step: Step) -> StepResult:
        if self.simulate:
            self.executor(list(step.argv), capture=step.capture, dry=True)
            result = StepResult(step, ok=True, rc=0, simulated=True)
            self.history.append(result)
            return result

        print(f"[exec] {step.command}")
        try:
            rc, out = self.executor(list(step.argv), capture=step.capture)
        except OSError as e:
            # executable missing or not runnable
            rc, out = 127, str(e)
        if self.verbose and out.strip():
            print(out.rstrip())
        result = StepResult(step, ok=(rc == 0), rc=rc, output=out)
        if rc != 0 and step.tolerate:
            print(f"[info] tolerated failure (rc={rc}): {step.description or step.command}")
        self.history.append(result)
        return result
