#!/usr/bin/env python3
"""CLI tool for reading and writing reflections on a running Orbit service.

Configure the target with ORBIT_API_URL and ORBIT_API_TOKEN.
"""

from __future__ import annotations

import os
import sys

# Allow running from repo root: add backend/ to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "backend"))

from orbit.cli import main

if __name__ == "__main__":
    sys.exit(main())
