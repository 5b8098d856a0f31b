"""
mdstat.py
Read the live topology of an md array:
- /proc/mdstat status line -> RAID level and member partitions
- /sys/block/<md>/md/chunk_size -> chunk size (bytes, reported in KiB)
- mdadm --detail -> Layout field for raid5/raid10

The parsers are pure functions over text; TopologyReader wires them to the
live system through injectable sources.
"""

from __future__ import annotations
import re
from pathlib import Path
from typing import Callable, List, Optional, Tuple
from .errors import TopologyError
from .types import ArrayTopology, LEVELS
from .util import run, short_name

MDSTAT_PATH = Path("/proc/mdstat")
SYSFS_BLOCK = Path("/sys/block")

# role flags may repeat: sdc1[1](W)(F)
_MEMBER = re.compile(r"^(?P<name>[^\s\[\]()]+)\[(?P<index>\d+)\](?:\([A-Za-z]\))*$")
# whole field, so combined raid10 layouts (near=2, far=2) stay intact
_LAYOUT = re.compile(r"^\s*Layout\s*:[ \t]*(?P<layout>\S[^\n]*?)[ \t]*$", re.MULTILINE)


def array_names(text: str) -> List[str]:
    """Names of all arrays listed in mdstat (md0, md127, ...)."""
    return [
        line.split()[0]
        for line in text.splitlines()
        if re.match(r"^md\d+\s*:", line)
    ]


def parse_mdstat(text: str, device: str) -> Tuple[int, Tuple[str, ...]]:
    """Return (level, members) for the array named by device."""
    name = short_name(device)
    line_re = re.compile(rf"^{re.escape(name)}\s*:\s*(?P<rest>.*)$")
    rest = None
    for line in text.splitlines():
        m = line_re.match(line)
        if m:
            rest = m.group("rest").split()
            break
    if rest is None:
        raise TopologyError(f"Could not find {name} in mdstat (array unknown or not assembled)")
    if not rest or rest[0] != "active":
        state = rest[0] if rest else "unknown"
        raise TopologyError(f"Array {name} is not active (state: {state})")

    # skip flags such as (auto-read-only)
    tokens = [t for t in rest[1:] if not t.startswith("(")]
    if not tokens or not re.match(r"^raid\d+$", tokens[0]):
        raise TopologyError(f"Could not determine RAID level of {name} from mdstat")
    level = int(tokens[0][len("raid"):])
    if level not in LEVELS:
        raise TopologyError(f"Unknown RAID level ({level}) for {name}")

    members: List[str] = []
    for tok in tokens[1:]:
        m = _MEMBER.match(tok)
        if not m:
            raise TopologyError(f"Could not get partition information from {tok!r} for {name}")
        if m.group("name") not in members:
            members.append(m.group("name"))
    if not members:
        raise TopologyError(f"Could not get partition information for {name}")
    return level, tuple(members)


def parse_detail_layout(text: str) -> Optional[str]:
    """First 'Layout :' value in mdadm --detail output."""
    m = _LAYOUT.search(text)
    return m.group("layout") if m else None


def read_live_status() -> str:
    return MDSTAT_PATH.read_text()


def read_chunk_attribute(device: str) -> Optional[int]:
    """Chunk size in bytes from sysfs, or None when unavailable."""
    p = SYSFS_BLOCK / short_name(device) / "md" / "chunk_size"
    try:
        return int(p.read_text().strip())
    except (OSError, ValueError):
        return None


def read_detail_report(device: str) -> str:
    try:
        rc, out = run(["mdadm", "--detail", device], capture=True)
    except OSError as e:
        raise TopologyError(f"Cannot run mdadm --detail {device}: {e}")
    if rc != 0:
        raise TopologyError(f"mdadm --detail {device} failed (rc={rc}): {out.strip()}")
    return out


class TopologyReader:
    def __init__(
        self,
        read_live_status: Callable[[], str] = read_live_status,
        read_chunk_attribute: Callable[[str], Optional[int]] = read_chunk_attribute,
        read_detail_report: Callable[[str], str] = read_detail_report,
    ):
        self.read_live_status = read_live_status
        self.read_chunk_attribute = read_chunk_attribute
        self.read_detail_report = read_detail_report

    def read_topology(self, device: str, configured_chunk_kb: int) -> ArrayTopology:
        try:
            text = self.read_live_status()
        except OSError as e:
            raise TopologyError(f"Cannot read array status: {e}")
        level, members = parse_mdstat(text, device)

        chunk_kb = configured_chunk_kb
        chunk_bytes = self.read_chunk_attribute(device)
        if chunk_bytes:
            chunk_kb = chunk_bytes // 1024

        layout = None
        if level in (5, 10):
            layout = parse_detail_layout(self.read_detail_report(device))
            if not layout:
                raise TopologyError(f"Could not determine layout of raid{level} array {device}")

        return ArrayTopology(device, level, members, chunk_kb, layout)


def print_topology(topo: ArrayTopology) -> None:
    """Human-readable summary for --show."""
    print(f"{'DEVICE':<12} {'LEVEL':<7} {'CHUNK(KB)':>9} {'LAYOUT':<18} MEMBERS")
    print(
        f"{topo.device:<12} {'raid' + str(topo.level):<7} {topo.chunk_kb:>9} "
        f"{topo.layout or '-':<18} {','.join(topo.members)}"
    )
