"""Idempotent dev user creation script.

Run locally with the repo's environment loaded:
  python scripts/create_dev_user.py

Set DEV_USER_ADMIN=1 to create the user with admin rights.
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path


sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from sqlalchemy import select  # noqa: E402

from crud.user import user_crud  # noqa: E402
from dependencies.db import AsyncSessionLocal  # noqa: E402
from models.users import User  # noqa: E402


DEV_USERNAME = os.getenv("DEV_USER_USERNAME", "dev")
DEV_EMAIL = os.getenv("DEV_USER_EMAIL", "dev@example.com")
DEV_PASSWORD = os.getenv("DEV_USER_PASSWORD", "devdevdevdevdev")
DEV_ADMIN = os.getenv("DEV_USER_ADMIN", "0").lower() in {"1", "true", "yes"}


async def main() -> None:
    async with AsyncSessionLocal() as session:
        # Check for existing user by username or email
        stmt = (
            select(User.id)
            .where((User.username == DEV_USERNAME) | (User.email == DEV_EMAIL))
            .limit(1)
        )
        existing_id = await session.scalar(stmt)
        if existing_id is not None:
            print(f"Dev user already exists (id={existing_id}) - skipping")
            return

        await user_crud.create(
            session,
            username=DEV_USERNAME,
            email=DEV_EMAIL,
            password=DEV_PASSWORD,
            is_admin=DEV_ADMIN,
        )
        print(f"Created dev user: {DEV_USERNAME} <{DEV_EMAIL}>")


if __name__ == "__main__":
    asyncio.run(main())
