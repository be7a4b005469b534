"""Create per-user comparison settings table."""

import sqlalchemy as sa

from alembic import op

revision = "3b7e1c9a4d20"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create `comparison_settings` keyed by owning user id."""
    op.create_table(
        "comparison_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("value_json", sa.Text(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.UniqueConstraint("user_id", name="uq_comparison_settings_user_id"),
    )


def downgrade() -> None:
    """Drop `comparison_settings`."""
    op.drop_table("comparison_settings")
