"""initial schema

Revision ID: 20261019_00
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op


# revision identifiers, used by Alembic.
revision = "20261019_00"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    insp = sa.inspect(bind)

    if not insp.has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.UUID(as_uuid=True), primary_key=True),
            sa.Column("username", sa.String(length=50), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("hashed_password", sa.String(length=255), nullable=False),
            sa.Column(
                "is_admin",
                sa.Boolean(),
                nullable=False,
                server_default=sa.false(),
            ),
            *_timestamps(),
            sa.CheckConstraint(
                "length(username) BETWEEN 3 AND 50", name="ck_users_username_len"
            ),
        )
        op.create_index("ix_users_id", "users", ["id"])
        op.create_index("ix_users_username", "users", ["username"], unique=True)
        op.create_index("ix_users_email", "users", ["email"], unique=True)

    if not insp.has_table("recipes"):
        op.create_table(
            "recipes",
            sa.Column("id", sa.UUID(as_uuid=True), primary_key=True),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column(
                "user_id",
                sa.UUID(as_uuid=True),
                sa.ForeignKey("users.id"),
                nullable=True,
            ),
            *_timestamps(),
        )
        op.create_index("ix_recipes_id", "recipes", ["id"])
        op.create_index("ix_recipes_name", "recipes", ["name"])

    if not insp.has_table("ingredients"):
        op.create_table(
            "ingredients",
            sa.Column("id", sa.UUID(as_uuid=True), primary_key=True),
            sa.Column("name", sa.String(length=255), nullable=False),
            *_timestamps(),
        )
        op.create_index("ix_ingredients_id", "ingredients", ["id"])
        op.create_index("ix_ingredients_name", "ingredients", ["name"])

    if not insp.has_table("ingredients_recipes"):
        op.create_table(
            "ingredients_recipes",
            sa.Column(
                "ingredient_id",
                sa.UUID(as_uuid=True),
                sa.ForeignKey("ingredients.id", ondelete="CASCADE"),
                primary_key=True,
            ),
            sa.Column(
                "recipe_id",
                sa.UUID(as_uuid=True),
                sa.ForeignKey("recipes.id", ondelete="CASCADE"),
                primary_key=True,
            ),
        )
        op.create_index(
            "ix_ingredients_recipes_recipe_id", "ingredients_recipes", ["recipe_id"]
        )


def downgrade() -> None:
    op.drop_index(
        "ix_ingredients_recipes_recipe_id", table_name="ingredients_recipes"
    )
    op.drop_table("ingredients_recipes")
    op.drop_index("ix_ingredients_name", table_name="ingredients")
    op.drop_index("ix_ingredients_id", table_name="ingredients")
    op.drop_table("ingredients")
    op.drop_index("ix_recipes_name", table_name="recipes")
    op.drop_index("ix_recipes_id", table_name="recipes")
    op.drop_table("recipes")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
