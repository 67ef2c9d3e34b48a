"""departments, categories, budget requests and line items

Revision ID: 0001_budget_requests
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


def _ensure_index(inspector, table: str, name: str, columns: list[str]) -> None:
    existing = {index["name"] for index in inspector.get_indexes(table)}
    if name not in existing:
        op.create_index(name, table, columns)


def _has_table(inspector, name: str) -> bool:
    return inspector.has_table(name)


revision = "0001_budget_requests"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not _has_table(inspector, "departments"):
        op.create_table(
            "departments",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=100), nullable=False),
            sa.Column("code", sa.String(length=20), nullable=False, unique=True),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("head_name", sa.String(length=100), nullable=False),
            sa.Column("contact_email", sa.String(), nullable=False),
            sa.Column("contact_phone", sa.String(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        )
    _ensure_index(inspector, "departments", "ix_departments_code", ["code"])

    if not _has_table(inspector, "budget_categories"):
        op.create_table(
            "budget_categories",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=100), nullable=False),
            sa.Column("code", sa.String(length=20), nullable=False, unique=True),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        )
    _ensure_index(inspector, "budget_categories", "ix_budget_categories_code", ["code"])

    if not _has_table(inspector, "budget_requests"):
        op.create_table(
            "budget_requests",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("title", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=False),
            sa.Column("department_id", sa.Integer(), sa.ForeignKey("departments.id"), nullable=False),
            sa.Column("category_id", sa.Integer(), sa.ForeignKey("budget_categories.id"), nullable=False),
            sa.Column("requested_amount", sa.Numeric(12, 2), nullable=False),
            sa.Column("justification", sa.Text(), nullable=False),
            sa.Column("priority", sa.String(length=16), nullable=False),
            sa.Column("status", sa.String(length=16), nullable=False, server_default="draft"),
            sa.Column("fiscal_year", sa.Integer(), nullable=False),
            sa.Column("expected_start_date", sa.Date(), nullable=False),
            sa.Column("expected_end_date", sa.Date(), nullable=False),
            sa.Column("submitted_by", sa.String(), nullable=False),
            sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("reviewed_by", sa.String(), nullable=True),
            sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("review_notes", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.CheckConstraint(
                "status IN ('draft', 'processing', 'review', 'approved', 'rejected')",
                name="ck_budget_requests_status",
            ),
            sa.CheckConstraint(
                "priority IN ('low', 'medium', 'high', 'critical')",
                name="ck_budget_requests_priority",
            ),
        )
    _ensure_index(inspector, "budget_requests", "ix_budget_requests_department_id", ["department_id"])
    _ensure_index(inspector, "budget_requests", "ix_budget_requests_category_id", ["category_id"])
    _ensure_index(inspector, "budget_requests", "ix_budget_requests_status", ["status"])
    _ensure_index(inspector, "budget_requests", "ix_budget_requests_priority", ["priority"])
    _ensure_index(inspector, "budget_requests", "ix_budget_requests_fiscal_year", ["fiscal_year"])
    _ensure_index(inspector, "budget_requests", "ix_budget_requests_created_at", ["created_at"])

    if not _has_table(inspector, "budget_line_items"):
        op.create_table(
            "budget_line_items",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column(
                "budget_request_id",
                sa.Integer(),
                sa.ForeignKey("budget_requests.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("description", sa.Text(), nullable=False),
            sa.Column("quantity", sa.Integer(), nullable=False),
            sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
            sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.CheckConstraint("quantity > 0", name="ck_budget_line_items_quantity_positive"),
            sa.CheckConstraint("unit_price > 0", name="ck_budget_line_items_unit_price_positive"),
        )
    _ensure_index(inspector, "budget_line_items", "ix_budget_line_items_budget_request_id", ["budget_request_id"])

    if not _has_table(inspector, "audit_logs"):
        op.create_table(
            "audit_logs",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.Column("actor", sa.String(), nullable=True),
            sa.Column("action", sa.String(), nullable=False),
            sa.Column("target_entity_type", sa.String(), nullable=True),
            sa.Column("target_entity_id", sa.String(), nullable=True),
            sa.Column("before", sa.Text(), nullable=True),
            sa.Column("after", sa.Text(), nullable=True),
        )
    _ensure_index(inspector, "audit_logs", "ix_audit_logs_action", ["action"])
    _ensure_index(inspector, "audit_logs", "ix_audit_logs_timestamp", ["timestamp"])


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("budget_line_items")
    op.drop_table("budget_requests")
    op.drop_table("budget_categories")
    op.drop_table("departments")
