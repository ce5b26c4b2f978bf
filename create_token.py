"""Mint a long-lived organizer token for scripts and manual API calls.

Usage:
    python create_token.py admin@example.com [days]
"""
import sys

from venue_booking_api.app.core.db import init_db
from venue_booking_api.app.core.security import ROLE_ORGANIZER, create_access_token
from venue_booking_api.app.repositories.account_repository import OrganizerRepository


def main() -> None:
    if len(sys.argv) < 2:
        print(__doc__, file=sys.stderr)
        sys.exit(1)
    email = sys.argv[1].lower()
    days = int(sys.argv[2]) if len(sys.argv) > 2 else 365

    init_db()
    organizer = OrganizerRepository.find_by_email(email)
    if not organizer:
        print(f"[!] No organizer found with email: {email}", file=sys.stderr)
        sys.exit(2)
    claims = {"sub": organizer["email"], "user_id": organizer["id"], "role": ROLE_ORGANIZER}
    print(create_access_token(claims, expires_delta=days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
