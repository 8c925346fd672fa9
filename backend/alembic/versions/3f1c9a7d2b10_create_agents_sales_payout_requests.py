"""create agents, sales and payout_requests

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "3f1c9a7d2b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # -----------------------------------------------------
    # 1) agents (id mirrors the Supabase Auth user id)
    # -----------------------------------------------------
    op.create_table(
        "agents",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="consultant"),
        sa.Column("agent_id", sa.String(length=20), nullable=True),
        sa.Column("contact_details", sa.String(length=200), nullable=True),
        sa.Column("province", sa.String(length=100), nullable=True),
        sa.Column("town", sa.String(length=100), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("about_me", sa.Text(), nullable=True),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.Column("training_completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_agents_email", "agents", ["email"])
    op.create_index("ix_agents_agent_id", "agents", ["agent_id"])
    op.create_index("ix_agents_province", "agents", ["province"])

    # -----------------------------------------------------
    # 2) sales
    # -----------------------------------------------------
    op.create_table(
        "sales",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column(
            "agent_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("agents.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sale_count", sa.Integer(), nullable=False),
        sa.Column("sale_names", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("sale_count > 0", name="ck_sales_sale_count_positive"),
    )
    op.create_index("ix_sales_agent_id", "sales", ["agent_id"])
    op.create_index("ix_sales_agent_status", "sales", ["agent_id", "status"])

    # -----------------------------------------------------
    # 3) payout_requests
    # -----------------------------------------------------
    op.create_table(
        "payout_requests",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column(
            "agent_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("agents.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount_requested", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="requested"),
        sa.Column("sales_data", sa.Text(), nullable=False, server_default=""),
        sa.Column(
            "included_sale_ids",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_payout_requests_agent_id", "payout_requests", ["agent_id"])


def downgrade() -> None:
    op.drop_index("ix_payout_requests_agent_id", table_name="payout_requests")
    op.drop_table("payout_requests")

    op.drop_index("ix_sales_agent_status", table_name="sales")
    op.drop_index("ix_sales_agent_id", table_name="sales")
    op.drop_table("sales")

    op.drop_index("ix_agents_province", table_name="agents")
    op.drop_index("ix_agents_agent_id", table_name="agents")
    op.drop_index("ix_agents_email", table_name="agents")
    op.drop_table("agents")
