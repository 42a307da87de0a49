"""Example: using the service layer without Flask.

Controllers are a thin layer; the business rules live in the services.
"""

import importlib
import sys

from config import get_settings_module

from src.hr_portal.hr_portal.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    user_id = sys.argv[1] if len(sys.argv) > 1 else None
    if not user_id:
        print("usage: python -m examples.example_usage <uid>")
        return

    print(container.attendance_service.get_monthly_summary(user_id))
    print(container.leave_service.get_balance(user_id))


if __name__ == "__main__":
    main()
