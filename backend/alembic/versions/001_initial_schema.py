"""initial schema

Revision ID: 001
Revises: 
Create Date: 2026-10-19 09:00:00
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "user_preferences",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("monthly_budget", sa.Numeric(12, 2), nullable=True),
        sa.Column("currency_symbol", sa.String(5), nullable=False),
    )

    op.create_table(
        "categories",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("type", sa.Enum("expense", "income", name="categorytype"), nullable=False),
        sa.Column("icon", sa.String(50), nullable=True),
        sa.Column("budget", sa.Numeric(12, 2), nullable=True),
        sa.Column("is_system", sa.Boolean(), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "name", name="uq_category_user_name"),
    )

    op.create_table(
        "payment_methods",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column(
            "type",
            sa.Enum("cash", "card", "bank_transfer", "other", name="paymentmethodtype"),
            nullable=False,
        ),
        sa.Column("is_default", sa.Boolean(), nullable=False),
    )

    for table, index in (("expenses", "idx_expense_user_date"), ("incomes", "idx_income_user_date")):
        op.create_table(
            table,
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("description", sa.String(255), nullable=False),
            sa.Column("amount", sa.Numeric(12, 2), nullable=False),
            sa.Column("category_id", sa.String(36), sa.ForeignKey("categories.id"), nullable=False),
            sa.Column("payment_method_id", sa.String(36), sa.ForeignKey("payment_methods.id"), nullable=True),
            sa.Column("date", sa.Date(), nullable=False),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("is_void", sa.Boolean(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
        )
        op.create_index(f"ix_{table}_date", table, ["date"])
        op.create_index(index, table, ["user_id", "date"])

    op.create_table(
        "recurring_patterns",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "type",
            sa.Enum("DAILY", "WEEKLY", "MONTHLY", "YEARLY", name="recurringtype"),
            nullable=False,
        ),
        sa.Column("frequency", sa.Integer(), nullable=False),
        sa.Column("day_of_month", sa.Integer(), nullable=True),
        sa.Column("day_of_week", sa.Integer(), nullable=True),
        sa.Column("month_of_year", sa.Integer(), nullable=True),
        sa.CheckConstraint("frequency > 0", name="ck_pattern_frequency_positive"),
    )

    for table, template in (("recurring_expenses", "expense"), ("recurring_incomes", "income")):
        op.create_table(
            table,
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column(f"{template}_id", sa.String(36), sa.ForeignKey(f"{template}s.id"), nullable=False, unique=True),
            sa.Column("pattern_id", sa.String(36), sa.ForeignKey("recurring_patterns.id"), nullable=False),
            sa.Column("start_date", sa.Date(), nullable=False),
            sa.Column("end_date", sa.Date(), nullable=True),
            sa.Column("last_processed", sa.Date(), nullable=True),
            sa.Column("next_process_date", sa.Date(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
        )
        op.create_index(f"ix_{table}_next_process_date", table, ["next_process_date"])


def downgrade() -> None:
    op.drop_table("recurring_incomes")
    op.drop_table("recurring_expenses")
    op.drop_table("recurring_patterns")
    op.drop_table("incomes")
    op.drop_table("expenses")
    op.drop_table("payment_methods")
    op.drop_table("categories")
    op.drop_table("user_preferences")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
