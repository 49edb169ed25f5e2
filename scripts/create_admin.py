#!/usr/bin/env python3
"""
Create an administrator account for the /api/admin endpoints.

Usage:
  python scripts/create_admin.py <username> <password>

Requires app environment (DATABASE_URL etc.) via create_app().
"""

from __future__ import annotations

import argparse
import os
import sys

# Allow running from repo root
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from dotenv import load_dotenv

from loggen import create_app
from loggen.auth import create_admin
from loggen.errors import LoggenError

load_dotenv()


def main():
    ap = argparse.ArgumentParser(description="Create a Loggen administrator")
    ap.add_argument("username", help="Admin username")
    ap.add_argument("password", help="Admin password (stored hashed)")
    args = ap.parse_args()

    app = create_app()
    with app.app_context():
        try:
            admin = create_admin(args.username, args.password)
        except LoggenError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            sys.exit(1)
        print(f"Admin created: {admin.username}")


if __name__ == "__main__":
    main()
