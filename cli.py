#!/usr/bin/env python3
"""
osc launcher for a source checkout.

Runs the same command line client as the installed `osc` script.

Usage:
    python cli.py --help
    python cli.py --os-cloud devstack compute server list
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from ostack.cli.app import main  # noqa: E402

if __name__ == "__main__":
    main()
