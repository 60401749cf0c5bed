#!/usr/bin/env python3
"""
HubSpot CRM objects - interactive console.

The menus and flows live in `cli/app.py`; this script only makes the
repository root importable when run directly from a checkout.
"""
from __future__ import annotations

import sys
from pathlib import Path

# Add the parent directory to Python path to allow imports from sibling directories
parent_dir = Path(__file__).parent.parent
sys.path.insert(0, str(parent_dir))

from cli.app import main  # noqa: E402


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(0)
