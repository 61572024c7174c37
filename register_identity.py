#!/usr/bin/env python3
"""
Register a user from the identity provider in the Task Tracker database.

The API never creates users itself; accounts come from the external
identity provider.  This script inserts a user with the given email, or
refreshes the name and avatar of an existing one, so the person can be
invited to projects and assigned tasks.  It also applies any pending
migrations first, so it works against a fresh database.

Usage:
    python register_identity.py --db ./task_tracker.db --email alpha@example.com --name "Alpha Tester"
"""

import argparse
import os
import sys

from task_tracker_api.app.core.config import settings
from task_tracker_api.app.core.db import init_db, transaction
from task_tracker_api.app.core.errors import StoreError
from task_tracker_api.app.repositories import user_repository


def main():
    ap = argparse.ArgumentParser(description="Register or refresh a Task Tracker user (SQLite).")
    ap.add_argument("--db", help="Path to SQLite DB file. Defaults to DATABASE_URL.")
    ap.add_argument("--email", required=True, help="User email as known to the identity provider")
    ap.add_argument("--name", help="Display name")
    ap.add_argument("--image", help="Avatar URL")
    args = ap.parse_args()

    if "@" not in args.email:
        print(f"[!] Not an email address: {args.email}", file=sys.stderr)
        sys.exit(1)

    if args.db:
        settings.database_url = os.path.abspath(args.db)

    try:
        init_db()
        with transaction() as conn:
            user = user_repository.upsert(conn, args.email, name=args.name, image=args.image)
    except StoreError as e:
        print(f"[!] {e}", file=sys.stderr)
        sys.exit(2)
    print(f"[+] User {user['id']} registered: {user['email']}")


if __name__ == "__main__":
    main()
