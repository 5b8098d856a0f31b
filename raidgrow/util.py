"""
util.py
Cross-cutting utilities:
- Process execution (list of args, never a shell string) with dry-run support
- PATH helpers for the required LVM/mdadm tools
- Small helpers: device name normalization, md slot allocation, JSON writing
"""

from __future__ import annotations
import json, os, shlex, shutil, subprocess, sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Sequence

REQUIRED_TOOLS = {
    "mdadm": "mdadm",
    "pvdisplay": "lvm2",
    "pvmove": "lvm2",
    "vgreduce": "lvm2",
    "pvremove": "lvm2",
    "pvcreate": "lvm2",
    "vgextend": "lvm2",
}


def run(cmd: Sequence[str], capture=False, dry=False):
    """
    Execute a command given as a list of arguments.
    - dry: print the command and report success without executing it.
    - capture: return stdout+stderr instead of streaming to the console.
    - Returns (rc, output_str).
    """
    cmd_list = [str(c) for c in cmd]
    if dry:
        print("[dry-run]", shlex.join(cmd_list))
        return 0, ""
    try:
        if capture:
            out = subprocess.check_output(cmd_list, stderr=subprocess.STDOUT)
            return 0, out.decode("utf-8", "replace")
        else:
            rc = subprocess.call(cmd_list)
            return rc, ""
    except subprocess.CalledProcessError as e:
        return e.returncode, e.output.decode("utf-8", "replace") if e.output else ""


def which_quiet(name: str) -> bool:
    """Check if command exists silently."""
    return bool(shutil.which(name))


def missing_tools() -> List[str]:
    """Return required tools that are not on PATH."""
    return [tool for tool in REQUIRED_TOOLS if not which_quiet(tool)]


def print_install_hint(missing: List[str]) -> None:
    packages = sorted({REQUIRED_TOOLS[t] for t in missing})
    print(f"❌ Error: Missing required tools: {', '.join(missing)}", file=sys.stderr)
    print(f"💡 Hint: Install them with: sudo apt install {' '.join(packages)}", file=sys.stderr)


def dev_path(name: str) -> str:
    """Prefix bare device names (sdb1, md0) with /dev/."""
    name = name.strip()
    if name.startswith("/"):
        return name
    return f"/dev/{name}"


def short_name(device: str) -> str:
    """/dev/md0 -> md0"""
    return device.rsplit("/", 1)[-1]


def first_free_array(exists: Callable[[str], bool] = os.path.exists) -> str:
    """Return the first /dev/mdN path that is not present on the system."""
    i = 0
    while exists(f"/dev/md{i}"):
        i += 1
    return f"/dev/md{i}"


def utc_datestr(fmt):
    return datetime.now(timezone.utc).strftime(fmt)


def ensure_dir(p: Path):
    """Create directory with better error reporting."""
    try:
        p.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        raise PermissionError(f"Cannot create directory {p} - insufficient permissions")
    except OSError as e:
        raise OSError(f"Cannot create directory {p}: {e}")


def write_json(path: Path, obj):
    ensure_dir(path.parent)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(obj, indent=2, sort_keys=True))
    tmp.replace(path)
