from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hr_portal.hr_portal.core.enums import Role
from src.hr_portal.hr_portal.database.bootstrap import upsert_account


def main() -> None:
    parser = argparse.ArgumentParser(description="Create (or reset) an active admin account.")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--name", default="Administrator")
    parser.add_argument("--department", default="HR")
    parser.add_argument("--position", default="HR Manager")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    uid = upsert_account(
        db_config,
        email=args.email.strip().lower(),
        password=args.password,
        display_name=args.name,
        role=Role.ADMIN,
        department=args.department,
        position=args.position,
    )
    print(f"OK: admin {args.email} ready (uid={uid})")


if __name__ == "__main__":
    main()
