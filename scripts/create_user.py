"""Create an account directly in the data directory.

Usage:
  python scripts/create_user.py --name Alice --email alice@example.com --password '...' --role user

NOTE: Intended for local/dev. Do not run it while the API is serving from
the same data directory: the running process will not see the lock.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from taskboard.auth.crud import provision
from taskboard.config import load_config
from taskboard.errors import ServiceError
from taskboard.store import Store


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--name", required=True)
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    ap.add_argument("--role", choices=["user", "admin"], default="user")
    args = ap.parse_args()

    cfg = load_config()
    store = Store(cfg.DATA_DIR)

    try:
        profile = provision(store, name=args.name, email=args.email, password=args.password, role=args.role)
    except ServiceError as e:
        print(f"Failed: {e.message}")
        sys.exit(1)

    print("Created account:")
    print(profile)


if __name__ == "__main__":
    main()
