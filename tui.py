#!/usr/bin/env python3
"""
ostui launcher for a source checkout.

Runs the same terminal dashboard as the installed `ostui` script.

Usage:
    python tui.py
    python tui.py --os-cloud devstack --debug
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from ostack.tui.app import main  # noqa: E402

if __name__ == "__main__":
    main()
