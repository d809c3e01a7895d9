"""Transaction code catalog and the posting link to it."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None

TRANSACTION_CATEGORY = sa.Enum(
    "ACCOMMODATION",
    "FOOD_BEVERAGE",
    "SERVICES",
    "TELECOM",
    "TAX",
    "PAYMENT",
    "ADJUSTMENT",
    name="transactioncategory",
)


def upgrade() -> None:
    op.create_table(
        "transaction_codes",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("code", sa.String(length=16), nullable=False, unique=True),
        sa.Column("name_en", sa.String(length=255), nullable=False),
        sa.Column("name_ar", sa.String(length=255), nullable=True),
        sa.Column("category", TRANSACTION_CATEGORY, nullable=False),
        sa.Column("default_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("gl_account", sa.String(length=32), nullable=True),
        sa.Column(
            "is_tax_exempt", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("is_revenue", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer(), nullable=True),
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
        ),
    )

    with op.batch_alter_table("folio_postings") as batch_op:
        batch_op.add_column(
            sa.Column("transaction_code_id", sa.Uuid(as_uuid=True), nullable=True)
        )
        batch_op.create_foreign_key(
            "fk_folio_postings_transaction_code_id",
            "transaction_codes",
            ["transaction_code_id"],
            ["id"],
            ondelete="SET NULL",
        )


def downgrade() -> None:
    with op.batch_alter_table("folio_postings") as batch_op:
        batch_op.drop_constraint(
            "fk_folio_postings_transaction_code_id", type_="foreignkey"
        )
        batch_op.drop_column("transaction_code_id")
    op.drop_table("transaction_codes")
    TRANSACTION_CATEGORY.drop(op.get_bind(), checkfirst=True)
