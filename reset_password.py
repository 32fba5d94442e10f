#!/usr/bin/env python3
"""
Set a new local password for a user in the Nightlife SQLite database.

Also useful for accounts created by GitHub login, which have no local
password until one is set here.  Existing hashes are never read or
printed.

Usage:
    python reset_password.py --db ./nightlife_api/nightlife.db --username alice --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys
from typing import List, Optional

from nightlife_api.app.core.security import hash_password


def reset_password(db_path: str, username: str, new_password: str) -> bool:
    """Store a fresh hash for ``username``; return ``False`` if no such user."""
    hashed = hash_password(new_password)
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        cur.execute(
            "UPDATE users SET password_hash = ? WHERE username = ?",
            (hashed, username),
        )
        conn.commit()
        return cur.rowcount == 1
    finally:
        conn.close()


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Reset a Nightlife user's password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./nightlife_api/nightlife.db)")
    ap.add_argument("--username", required=True, help="Username to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args(argv)

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        return 1

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        return 1

    if not reset_password(args.db, args.username, new_password):
        print(f"[!] No user found with username: {args.username}", file=sys.stderr)
        return 2
    print(f"[+] Password updated for user: {args.username}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
