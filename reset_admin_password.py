#!/usr/bin/env python3
"""
Reset an account password in the Venue Booking SQLite database.

This script does not read or reveal any existing password.  It stores a
new PBKDF2-HMAC-SHA256 hash (format "salthex$hashhex") for the given
organizer or customer email.

Usage:
    python reset_admin_password.py --db ./venue_booking.db --email admin@example.com --password "NewStrongPass!234"
    python reset_admin_password.py --db ./venue_booking.db --email jane@example.com --customer

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys

from venue_booking_api.app.core.security import hash_password


def main():
    ap = argparse.ArgumentParser(description="Reset a Venue Booking account password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./venue_booking.db)")
    ap.add_argument("--email", required=True, help="Account email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    ap.add_argument("--customer", action="store_true", help="Update a customer instead of an organizer")
    args = ap.parse_args()

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)

    table = "users" if args.customer else "organizers"
    email = args.email.lower()
    conn = sqlite3.connect(args.db)
    try:
        cur = conn.cursor()
        cur.execute(f"SELECT id FROM {table} WHERE email = ?", (email,))
        if not cur.fetchone():
            print(f"[!] No account found in {table} with email: {email}", file=sys.stderr)
            sys.exit(2)

        cur.execute(
            f"UPDATE {table} SET password_hash = ? WHERE email = ?",
            (hash_password(new_password), email),
        )
        conn.commit()
        print(f"[+] Password updated for {table[:-1]}: {email}")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
