"""
Create a user directly in the record store. Run from project root:
  python -m chirpy.scripts.create_user EMAIL PASSWORD [--red] [--database PATH]
Example:
  python -m chirpy.scripts.create_user admin@example.com your-secure-password --red
"""
import argparse
import logging
import sys

from chirpy.core.config import get_settings
from chirpy.core.database import ChirpyDB
from chirpy.core.errors import ChirpyError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Chirpy user (seed data / admin use).")
    parser.add_argument("email", help="Email address (must be unused)")
    parser.add_argument("password", help="Password")
    parser.add_argument("--red", action="store_true", help="Also upgrade the user to Chirpy Red")
    parser.add_argument("--database", default=None, help="Database file (default: DATABASE_PATH)")
    args = parser.parse_args(argv)

    email = args.email.strip()
    if not email or len(email) > 255:
        print("Invalid email length.", file=sys.stderr)
        return 1

    settings = get_settings()
    path = args.database or settings.DATABASE_PATH
    try:
        with ChirpyDB.open(path, bcrypt_rounds=settings.BCRYPT_ROUNDS) as db:
            user = db.create_user(email, args.password)
            if args.red:
                db.upgrade_user(user.id)
    except ChirpyError as e:
        print(e.message, file=sys.stderr)
        return 1
    print(f"Created user {user.id} '{email}'{' (Chirpy Red)' if args.red else ''}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
