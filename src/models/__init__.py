"""Expose commonly used ORM models at package level.

These re-exports are intentional so callers can import from
``models`` (e.g. `from models import Recipe`). The `F401` noqa suppresses
unused-import warnings for the explicit re-exports.
"""

from .base import Base  # noqa: F401
from .ingredients import Ingredient  # noqa: F401
from .recipe_ingredients import recipe_ingredients  # noqa: F401
from .recipes import Recipe  # noqa: F401
from .users import User  # noqa: F401
