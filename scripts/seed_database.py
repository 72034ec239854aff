"""Seed the recipe catalog from the repo root.

Usage:
  python scripts/seed_database.py

Reads DATABASE_URL (or POSTGRES_*) the same way the API does.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path


sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from seed_database import main  # noqa: E402


if __name__ == "__main__":
    asyncio.run(main())
