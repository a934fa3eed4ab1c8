#!/usr/bin/env python3
"""CLI tool for minting an owner access token for local development.

Signs with the same JWT_SECRET the service uses, so the printed token can be
exported as ORBIT_API_TOKEN for orbit-reflect.
"""

from __future__ import annotations

import argparse
import os
import sys
from datetime import timedelta

# Allow running from repo root: add backend/ to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "backend"))

from orbit.auth import create_access_token


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Mint an access token for an Orbit owner."
    )
    parser.add_argument("owner_id", help="Owner id to place in the sub claim")
    parser.add_argument(
        "--minutes",
        type=int,
        default=None,
        help="Token lifetime in minutes (default: JWT_ACCESS_TOKEN_EXPIRE_MINUTES)",
    )
    args = parser.parse_args()

    try:
        expires_in = timedelta(minutes=args.minutes) if args.minutes is not None else None
        print(create_access_token(args.owner_id, expires_in=expires_in))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
