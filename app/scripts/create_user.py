"""
Create an admin user without going through the registration page. Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD
Example:
  python -m app.scripts.create_user editor your-secure-password
"""
import argparse
import sys

from app.core.database import SessionLocal
from app.core.errors import ConflictError
from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from app.services.auth import register_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Quillpost admin user.")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        register_user(db, username, args.password)
    except ConflictError:
        print(f"User '{username}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{username}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
