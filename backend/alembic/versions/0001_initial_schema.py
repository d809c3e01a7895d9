"""Initial billing schema: users, guests, units, reservations, folios, invoices."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

# Enum columns persist member names.
USER_ROLE = sa.Enum(
    "ADMIN",
    "OPERATIONS_MANAGER",
    "STAFF",
    "HOUSEKEEPING",
    "MAINTENANCE",
    "OWNER",
    name="userrole",
)
USER_STATUS = sa.Enum("INVITED", "ACTIVE", "SUSPENDED", name="userstatus")
RESERVATION_STATUS = sa.Enum(
    "PENDING",
    "CONFIRMED",
    "CHECKED_IN",
    "CHECKED_OUT",
    "CANCELLED",
    "NO_SHOW",
    name="reservationstatus",
)
PAYMENT_STATUS = sa.Enum(
    "PENDING", "PARTIAL", "PAID", "REFUNDED", "FAILED", name="paymentstatus"
)
FOLIO_STATUS = sa.Enum("OPEN", "CLOSED", "TRANSFERRED", "SETTLED", name="foliostatus")
POSTING_TYPE = sa.Enum("CHARGE", "ADJUSTMENT", "PAYMENT", "REFUND", name="postingtype")


def _timestamps() -> list[sa.Column]:
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
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("role", USER_ROLE, nullable=False),
        sa.Column("status", USER_STATUS, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "guests",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("vat_number", sa.String(length=32), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "properties",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name_en", sa.String(length=255), nullable=False),
        sa.Column("name_ar", sa.String(length=255), nullable=False),
        sa.Column("address", sa.String(length=512), nullable=True),
        sa.Column("address_ar", sa.String(length=512), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "units",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "property_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("properties.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name_en", sa.String(length=255), nullable=False),
        sa.Column("name_ar", sa.String(length=255), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "reservations",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("confirmation_code", sa.String(length=32), nullable=False, unique=True),
        sa.Column(
            "guest_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("guests.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "unit_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("units.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("nights", sa.Integer(), nullable=True),
        sa.Column(
            "total_amount", sa.Numeric(12, 2), nullable=False, server_default="0"
        ),
        sa.Column("taxes_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("fees_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("status", RESERVATION_STATUS, nullable=False),
        sa.Column("payment_status", PAYMENT_STATUS, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "folios",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("folio_number", sa.String(length=32), nullable=False, unique=True),
        sa.Column(
            "folio_type", sa.String(length=32), nullable=False, server_default="guest"
        ),
        sa.Column("status", FOLIO_STATUS, nullable=False),
        sa.Column("balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("credit_limit", sa.Numeric(12, 2), nullable=True),
        sa.Column("notes", sa.String(length=1024), nullable=True),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "reservation_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("reservations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "guest_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("guests.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )

    op.create_table(
        "folio_postings",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "folio_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("folios.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("posting_date", sa.Date(), nullable=False),
        sa.Column("posting_type", POSTING_TYPE, nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("tax_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=True),
        sa.Column("reference", sa.String(length=64), nullable=True),
        sa.Column("posted_by", sa.String(length=255), nullable=True),
        sa.Column(
            "is_reversed", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("reversed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reversed_by", sa.String(length=255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_folio_postings_folio_id", "folio_postings", ["folio_id"])

    op.create_table(
        "invoices",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("invoice_no", sa.String(length=32), nullable=False, unique=True),
        sa.Column(
            "invoice_type",
            sa.String(length=32),
            nullable=False,
            server_default="standard",
        ),
        sa.Column(
            "reservation_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("reservations.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("issued_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("tax_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("seller_vat_number", sa.String(length=32), nullable=True),
        sa.Column("buyer_vat_number", sa.String(length=32), nullable=True),
        sa.Column("zatca_qr_code", sa.Text(), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.String(length=1024), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("reservation_id", name="uq_invoice_reservation"),
    )


def downgrade() -> None:
    op.drop_table("invoices")
    op.drop_index("ix_folio_postings_folio_id", table_name="folio_postings")
    op.drop_table("folio_postings")
    op.drop_table("folios")
    op.drop_table("reservations")
    op.drop_table("units")
    op.drop_table("properties")
    op.drop_table("guests")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (
        POSTING_TYPE,
        FOLIO_STATUS,
        PAYMENT_STATUS,
        RESERVATION_STATUS,
        USER_STATUS,
        USER_ROLE,
    ):
        enum_type.drop(bind, checkfirst=True)
