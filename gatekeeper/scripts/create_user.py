"""
Create a user (e.g. the first admin). Run from project root:
  python -m gatekeeper.scripts.create_user EMAIL PASSWORD FIRST_NAME LAST_NAME [role]
Example:
  python -m gatekeeper.scripts.create_user admin@example.com 'S3cure!pass' Ada Admin admin
"""
import argparse
import sys

from pydantic import ValidationError

from gatekeeper.core.database import SessionLocal
from gatekeeper.core.errors import ApiError
from gatekeeper.core.logging import setup_logging
from gatekeeper.schemas.users import UserCreate
from gatekeeper.services.users import create_user, get_user_by_email


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    parser = argparse.ArgumentParser(description="Create a Gatekeeper user (no registration UI).")
    parser.add_argument("email", help="Account email (stored lower-cased)")
    parser.add_argument("password", help="Password satisfying the password policy")
    parser.add_argument("first_name")
    parser.add_argument("last_name")
    parser.add_argument("role", nargs="?", default="client", help="Existing role name (default: client)")
    args = parser.parse_args(argv)

    try:
        body = UserCreate(
            email=args.email,
            password=args.password,
            first_name=args.first_name,
            last_name=args.last_name,
            role=args.role,
        )
    except ValidationError as e:
        print(f"Invalid user: {e}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        if get_user_by_email(db, body.email) is not None:
            print(f"User '{body.email}' already exists.", file=sys.stderr)
            return 1
        try:
            user = create_user(db, body)
        except ApiError as e:
            details = "; ".join(e.errors or [])
            print(f"{e.message}: {details}" if details else e.message, file=sys.stderr)
            return 1
        print(f"Created user '{user.email}' with role '{user.role.name}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
