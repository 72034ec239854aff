from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import UUID, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow
from .recipe_ingredients import recipe_ingredients


if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from .ingredients import Ingredient
    from .users import User


class Recipe(Base):
    __tablename__ = "recipes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    # Weak reference to the owner; seeded recipes have none.
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )

    # Relationships
    ingredients: Mapped[list[Ingredient]] = relationship(
        "Ingredient", secondary=recipe_ingredients, back_populates="recipes"
    )
    user: Mapped[User | None] = relationship("User", back_populates="recipes")
