"""
Create an approved user (e.g. the first super admin). Run from project root:
  python -m tracker.scripts.create_user USERNAME PASSWORD [role]
Example:
  python -m tracker.scripts.create_user admin 'Secur3-pass' super_admin
"""
import argparse
import sys

from tracker.core.database import SessionLocal
from tracker.core.errors import TrackerError
from tracker.services.access import ROLES, SUPER_ADMIN
from tracker.services.users import admin_create_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an approved tracker user.")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument(
        "password",
        help="Password (8+ chars, a letter and a number or one of @$!%%*#?&)",
    )
    parser.add_argument("role", nargs="?", default=SUPER_ADMIN, choices=list(ROLES))
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = admin_create_user(db, args.username, args.password, args.role)
        print(f"Created user '{user.username}' with role '{user.role}'.")
        return 0
    except TrackerError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
