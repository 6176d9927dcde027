"""Create an admin account (and its linked, already verified user).

Usage: python scripts/create_admin.py <first_name> <last_name> <email> <password>
"""

from __future__ import annotations

import importlib
import sys

from dotenv import load_dotenv

from authflow.config import get_settings_module
from authflow.container import build_container
from authflow.core.exceptions import DomainError


def main(argv: list[str]) -> int:
    if len(argv) != 4:
        print(__doc__.strip())
        return 2

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings=settings)

    first_name, last_name, email, password = argv
    try:
        admin = container.admin_service.register_admin(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password,
        )
    except DomainError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"OK: admin id={admin.admin_id} email={admin.email} user_id={admin.user_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
