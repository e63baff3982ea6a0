"""
Print a password hash for PORTFOLIO_ADMIN_PASSWORD_HASH.
"""

from __future__ import annotations

import argparse
import getpass
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portfolio.auth import hash_password


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--password",
        help="Password to hash. Prompted for when omitted.",
    )
    args = parser.parse_args()

    password = args.password or getpass.getpass("Admin password: ")
    if not password:
        print("Password must not be empty", file=sys.stderr)
        return 1
    print(hash_password(password))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
