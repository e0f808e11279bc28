"""
Create a principal (e.g. the first admin). Run from project root:
  python -m storefront.scripts.create_user USERNAME PASSWORD [role] [--staff-id N] [--name NAME]
Example:
  python -m storefront.scripts.create_user owner your-secure-password admin --name "Shop Owner"
"""
import argparse
import logging
import sys

from storefront.core.config import settings
from storefront.core.database import SessionLocal
from storefront.core.errors import DuplicateUsernameError
from storefront.core.permissions import Role
from storefront.core.security import PASSWORD_MAX_LEN, USERNAME_MAX_LEN
from storefront.services.identity import create_principal


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a storefront user (no registration UI).")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument(
        "password",
        help=f"Password ({settings.PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LEN} chars)",
    )
    parser.add_argument(
        "role", nargs="?", default=Role.ADMIN.value, choices=[r.value for r in Role]
    )
    parser.add_argument("--staff-id", type=int, default=None, help="Staff record id (staff only)")
    parser.add_argument("--name", default=None, help="Display name")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not (settings.PASSWORD_MIN_LENGTH <= len(args.password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {settings.PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1
    if args.staff_id is not None and args.role != Role.STAFF.value:
        print("--staff-id is only valid for the staff role.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = create_principal(
            db,
            username=username,
            password=args.password,
            role=args.role,
            staff_id=args.staff_id,
            name=args.name,
        )
    except DuplicateUsernameError:
        print(f"User '{username}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{username}' with role '{args.role}' (id {user.id}).")
    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    sys.exit(main())
