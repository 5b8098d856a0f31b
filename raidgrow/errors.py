"""
errors.py
Exception taxonomy for raidgrow.

ConfigurationError, TopologyError and LayoutError are raised before any
mutating step is issued. StepExecutionError describes an external step that
failed and was not marked tolerable.
"""
from __future__ import annotations


class RaidGrowError(Exception):
    """Base exception for raidgrow errors."""
    kind = "error"

    def __init__(self, message: str = "raidgrow error occurred"):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(RaidGrowError):
    """Invalid or missing operation parameters."""
    kind = "config_error"


class TopologyError(RaidGrowError):
    """The state of an existing array cannot be determined."""
    kind = "topology_error"


class LayoutError(RaidGrowError):
    """Layout string does not fit the grammar of the RAID level."""
    kind = "layout_error"


class StepExecutionError(RaidGrowError):
    """An external step reported failure."""
    kind = "step_failed"

    def __init__(self, command: str, rc: int, output: str = ""):
        self.command = command
        self.rc = rc
        self.output = output
        message = f"command failed (rc={rc}): {command}"
        if output.strip():
            message += f"\n{output.strip()}"
        super().__init__(message)
