"""
raidgrow package
- Grow, create or retire an md RAID array that backs an LVM volume group, online.
"""
__all__ = ["cli", "config", "engine", "runner", "commands", "mdstat", "layout", "util", "types", "errors", "bundle"]
__version__ = "0.3.0"
