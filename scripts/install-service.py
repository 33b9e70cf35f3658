#!/usr/bin/env python3
"""Simple script to install a configured command as an rc.d service."""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from runcom_service.__main__ import main

if __name__ == "__main__":
    sys.exit(main(["--install", *sys.argv[1:]]))
