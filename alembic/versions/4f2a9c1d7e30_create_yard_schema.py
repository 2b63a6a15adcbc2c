"""create yard schema

Revision ID: 4f2a9c1d7e30
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f2a9c1d7e30"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# Shared by several tables, so created once up front
rarity = postgresql.ENUM(
    "common", "uncommon", "rare", "epic", "legendary", name="rarity", create_type=False
)
item_category = postgresql.ENUM("food", "toy", "accessory", name="itemcategory", create_type=False)


def timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
            onupdate=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    rarity.create(bind, checkfirst=True)
    item_category.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("username", sa.String(20), nullable=True, unique=True, index=True),
        *timestamps(),
    )

    op.create_table(
        "goodies",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("category", item_category, nullable=False),
        sa.Column("rarity", rarity, nullable=False),
        sa.Column("cost", sa.Integer(), nullable=False),
        sa.Column("hidden", sa.Boolean(), nullable=False, server_default=sa.false()),
        *timestamps(),
    )

    op.create_table(
        "cats",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("rarity", rarity, nullable=False, index=True),
        sa.Column("reward_multiplier", sa.Float(), nullable=False, server_default="1.0"),
        *timestamps(),
    )

    op.create_table(
        "inventory_items",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("goodie_id", sa.Integer(), sa.ForeignKey("goodies.id"), nullable=True, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("category", item_category, nullable=False),
        sa.Column("rarity", rarity, nullable=False),
        sa.Column("cost", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("purchased_at", sa.DateTime(timezone=True), nullable=True),
        *timestamps(),
    )

    op.create_table(
        "placed_items",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("slot_id", sa.String(20), nullable=False),
        sa.Column("placement_key", sa.String(100), nullable=False, index=True),
        sa.Column("goodie_id", sa.Integer(), sa.ForeignKey("goodies.id"), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("category", item_category, nullable=False),
        sa.Column("rarity", rarity, nullable=False),
        sa.Column("cost", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("placed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("max_visits", sa.Integer(), nullable=True),
        sa.Column("remaining_visits", sa.Integer(), nullable=True),
        *timestamps(),
        sa.UniqueConstraint("user_id", "slot_id", name="uq_placed_user_slot"),
    )

    op.create_table(
        "cat_visits",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("cat_id", sa.Integer(), sa.ForeignKey("cats.id"), nullable=False),
        sa.Column("food_item_id", sa.String(100), nullable=False),
        sa.Column("toy_item_ids", sa.JSON(), nullable=False),
        sa.Column("spoon_reward", sa.Integer(), nullable=False),
        sa.Column("visited_at", sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.false(), index=True),
        *timestamps(),
    )

    op.create_table(
        "spoon_accounts",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("total_points", sa.Integer(), nullable=False, server_default="0"),
        *timestamps(),
    )

    op.create_table(
        "spoon_transactions",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("action_type", sa.String(50), nullable=False, index=True),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("target_id", sa.String(255), nullable=True, index=True),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("context", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, index=True),
    )


def downgrade() -> None:
    op.drop_table("spoon_transactions")
    op.drop_table("spoon_accounts")
    op.drop_table("cat_visits")
    op.drop_table("placed_items")
    op.drop_table("inventory_items")
    op.drop_table("cats")
    op.drop_table("goodies")
    op.drop_table("users")

    bind = op.get_bind()
    item_category.drop(bind, checkfirst=True)
    rarity.drop(bind, checkfirst=True)
