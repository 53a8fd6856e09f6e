#!/usr/bin/env python3
"""
Log Miner CLI wrapper for running from a checkout.

Usage:
    tail -f /var/log/syslog | python scripts/logminer.py -i 4
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from logminer.cli import main


if __name__ == "__main__":
    sys.exit(main())
