#!/usr/bin/env python3
"""Entry point for a scheduler (cron, systemd timer): run one scan and exit."""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobalert.cli import main

if __name__ == "__main__":
    main(["run", *sys.argv[1:]])
