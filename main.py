#!/usr/bin/env python3
"""
main.py - run raidgrow from a source checkout without installing it.
"""
import sys
from pathlib import Path

if __name__ == "__main__":
    sys.path.insert(0, str(Path(__file__).resolve().parent))
    from raidgrow.cli import main
    sys.exit(main())
