"""initial schema: ticket counters, orders, audit log

Revision ID: 4b8d2e61c0a7
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "4b8d2e61c0a7"
down_revision = None
branch_labels = None
depends_on = None


ticket_category = postgresql.ENUM("ticket", "drink", name="ticket_category", create_type=False)
order_status = postgresql.ENUM("pending", "paid", "preparing", "completed", name="order_status", create_type=False)


def upgrade() -> None:
    bind = op.get_bind()
    ticket_category.create(bind, checkfirst=True)
    order_status.create(bind, checkfirst=True)

    op.create_table(
        "ticket_counters",
        sa.Column("category", ticket_category, primary_key=True),
        sa.Column("current_number", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("current_number >= 0", name="ck_ticket_counters_current_number_nonnegative"),
    )

    op.create_table(
        "orders",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("ticket_number", sa.String(length=16), nullable=False),
        sa.Column("category", ticket_category, nullable=False),
        sa.Column("status", order_status, nullable=False),
        sa.Column("total_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("session_token", sa.String(length=120), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index(op.f("ix_orders_ticket_number"), "orders", ["ticket_number"])
    op.create_index(op.f("ix_orders_session_token"), "orders", ["session_token"])

    op.create_table(
        "order_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "order_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("orders.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("unit_price_cents", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("subtotal_cents", sa.Integer(), nullable=False),
    )
    op.create_index(op.f("ix_order_items_order_id"), "order_items", ["order_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("actor", sa.String(length=200), nullable=False),
        sa.Column("entity_type", sa.String(length=100), nullable=False),
        sa.Column("entity_key", sa.String(length=64), nullable=False),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("before", sa.JSON(), nullable=True),
        sa.Column("after", sa.JSON(), nullable=True),
    )
    op.create_index(op.f("ix_audit_logs_entity_key"), "audit_logs", ["entity_key"])


def downgrade() -> None:
    op.drop_index(op.f("ix_audit_logs_entity_key"), table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index(op.f("ix_order_items_order_id"), table_name="order_items")
    op.drop_table("order_items")
    op.drop_index(op.f("ix_orders_session_token"), table_name="orders")
    op.drop_index(op.f("ix_orders_ticket_number"), table_name="orders")
    op.drop_table("orders")
    op.drop_table("ticket_counters")

    bind = op.get_bind()
    order_status.drop(bind, checkfirst=True)
    ticket_category.drop(bind, checkfirst=True)
