from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.choir_system.choir_system.database.bootstrap import ensure_admin_user
from src.choir_system.choir_system.database.connection import DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    parser = argparse.ArgumentParser(description="Create the approved President account if missing.")
    parser.add_argument("--username", default=settings.ADMIN_USERNAME)
    parser.add_argument("--password", default=settings.ADMIN_PASSWORD)
    parser.add_argument("--email", default=settings.ADMIN_EMAIL)
    parser.add_argument("--name", default=settings.ADMIN_NAME)
    args = parser.parse_args()

    if not args.password:
        parser.error("an admin password is required (--password or ADMIN_PASSWORD)")

    created = ensure_admin_user(
        db_config,
        username=args.username,
        password=args.password,
        email=args.email,
        name=args.name,
    )
    state = "created" if created else "already present"
    print(f"OK: admin '{args.username}' {state} -> {DBConfig.from_dict(db_config).describe()}")


if __name__ == "__main__":
    main()
