"""
commands.py
Typed LVM/mdadm operations. Each function returns Step objects carrying an
argv list; nothing here builds shell strings or executes anything.
"""

from __future__ import annotations
from typing import List, Optional, Sequence
from .types import Step


def check_physical_volume(device: str) -> Step:
    """pvdisplay succeeds only when the device is an LVM physical volume."""
    return Step(
        ("pvdisplay", device),
        tolerate=True,
        description=f"check whether {device} is a physical volume",
        capture=True,
    )


def detach_from_group(volume_group: str, device: str) -> List[Step]:
    """Move extents off the PV, then drop it from the volume group."""
    return [
        Step(
            ("pvmove", "--autobackup", "y", device),
            tolerate=True,
            description=f"move allocated extents off {device}",
        ),
        Step(
            ("vgreduce", "--autobackup", "y", volume_group, device),
            description=f"remove {device} from volume group {volume_group}",
        ),
    ]


def wipe_signature(device: str) -> Step:
    return Step(("pvremove", device), description=f"wipe LVM label on {device}")


def stop_array(device: str) -> Step:
    return Step(("mdadm", "--stop", device), description=f"stop array {device}")


def zero_array_signature(partition: str) -> Step:
    return Step(
        ("mdadm", "--zero-superblock", partition),
        description=f"zero md superblock on {partition}",
    )


def create_array(
    device: str,
    level: int,
    chunk_kb: int,
    layout: Optional[str],
    members: Sequence[str],
) -> Step:
    argv = [
        "mdadm",
        "--create",
        "--verbose",
        "--run",
        device,
        f"--level={level}",
        f"--raid-devices={len(members)}",
    ]
    # mirrors have no stripe unit
    if level != 1:
        argv.append(f"--chunk={chunk_kb}")
    if layout:
        argv.append(f"--layout={layout}")
    argv.extend(members)
    return Step(
        tuple(argv),
        description=f"create raid{level} {device} from {len(members)} partition(s)",
    )


def init_physical_volume(device: str) -> Step:
    return Step(("pvcreate", device), description=f"initialize {device} as physical volume")


def extend_group(volume_group: str, device: str) -> Step:
    return Step(
        ("vgextend", "--autobackup", "y", volume_group, device),
        description=f"add {device} to volume group {volume_group}",
    )
