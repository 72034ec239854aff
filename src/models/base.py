from datetime import UTC, datetime

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Python-side timestamp default, so values exist without a refresh."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    pass
