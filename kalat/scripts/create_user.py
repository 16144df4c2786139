"""
Provision an archive account (there is no registration UI). Run from project root:
  python -m kalat.scripts.create_user USERNAME PASSWORD [role]
Example:
  python -m kalat.scripts.create_user curator a-long-passphrase admin

Accounts cannot be changed or removed afterwards; pick the role carefully.
"""
import argparse
import sys

from kalat.core.config import get_settings
from kalat.core.database import SessionLocal
from kalat.core.errors import AccountExists
from kalat.core.security import PASSWORD_MAX_LEN, USERNAME_MAX_LEN
from kalat.services.credentials import CredentialStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Kalat account.")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars, case-sensitive)")
    parser.add_argument("password", help=f"Password (1-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not args.password or len(args.password) > PASSWORD_MAX_LEN:
        print(f"Password must be 1-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        store = CredentialStore(db, get_settings().BCRYPT_ROUNDS)
        store.create(username, args.password, args.role)
    except AccountExists as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created account '{username}' with role '{args.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
