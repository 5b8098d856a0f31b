"""
layout.py
Validate and normalize md layouts for the supported RAID levels.

raid5:  left-asymmetric | left-symmetric | right-asymmetric | right-symmetric
raid10: near=N | far=N | offset=N (N >= 1), compressed to n2 / f2 / o2
raid0/raid1: layout does not apply
"""

from __future__ import annotations
import re
from typing import Optional
from .errors import LayoutError

RAID5_LAYOUTS = (
    "left-asymmetric",
    "left-symmetric",
    "right-asymmetric",
    "right-symmetric",
)
RAID10_TYPES = ("near", "far", "offset")

_RAID10_LONG = re.compile(r"^(near|far|offset)=(\d+)$")
_RAID10_SHORT = re.compile(r"^([nfo])(\d+)$")


def resolve(level: int, raw: Optional[str]) -> Optional[str]:
    value = (raw or "").strip().lower()
    if level == 5:
        if value not in RAID5_LAYOUTS:
            raise LayoutError(
                f"Invalid raid5 layout: {raw!r} (expected one of {', '.join(RAID5_LAYOUTS)})"
            )
        return value
    if level == 10:
        m = _RAID10_LONG.match(value) or _RAID10_SHORT.match(value)
        if not m or int(m.group(2)) < 1:
            raise LayoutError(
                f"Invalid raid10 layout: {raw!r} (expected near=N, far=N or offset=N with N >= 1)"
            )
        return f"{m.group(1)[0]}{int(m.group(2))}"
    return None
