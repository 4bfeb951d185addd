from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20251019120000_init_tracking"
down_revision = None
branch_labels = None
depends_on = None

def _text(name, length=None):
    return sa.Column(name, sa.String(length=length) if length else sa.Text(), nullable=True)

def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True, index=True),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "shipments",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True),
        sa.Column("tracking_number", sa.String(length=64), nullable=False, unique=True, index=True),
        _text("order_reference_number", 128),
        _text("customer_name", 255),
        _text("email", 255),
        _text("phone_number", 64),
        _text("status_details"),
        _text("status_color", 32),
        _text("sender_name", 255),
        _text("origin_street_address", 255),
        _text("origin_city", 120),
        _text("origin_state", 120),
        _text("origin_country", 120),
        _text("origin_postal_code", 32),
        _text("origin", 512),
        sa.Column("origin_latitude", sa.Float(), nullable=True),
        sa.Column("origin_longitude", sa.Float(), nullable=True),
        _text("receiver_name", 255),
        _text("destination_street_address", 255),
        _text("destination_city", 120),
        _text("destination_state", 120),
        _text("destination_country", 120),
        _text("destination_postal_code", 32),
        _text("destination", 512),
        sa.Column("destination_latitude", sa.Float(), nullable=True),
        sa.Column("destination_longitude", sa.Float(), nullable=True),
        _text("weight", 32),
        _text("length", 32),
        _text("width", 32),
        _text("height", 32),
        _text("package_type", 64),
        _text("contents_description"),
        _text("declared_value", 32),
        _text("shipping_method", 64),
        sa.Column("tracking_progress", sa.String(length=32), nullable=False, server_default="Pickup"),
        _text("shipment_status", 128),
        _text("current_location", 512),
        sa.Column("current_latitude", sa.Float(), nullable=True),
        sa.Column("current_longitude", sa.Float(), nullable=True),
        _text("description"),
        sa.Column("estimated_delivery_date", sa.DateTime(), nullable=True),
        sa.Column("shipment_date", sa.DateTime(), nullable=True),
        _text("insurance_details"),
        _text("special_instructions"),
        _text("return_instructions"),
        _text("customer_notes"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "tracking_events",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("shipment_id", sa.String(length=36), sa.ForeignKey("shipments.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("status", sa.String(length=128), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("location", sa.String(length=512), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False, server_default=sa.func.now(), index=True),
    )

def downgrade() -> None:
    op.drop_table("tracking_events")
    op.drop_table("shipments")
    op.drop_table("users")
