"""Initial schema: profiles, trips and join requests.

Revision ID: 001
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── profiles ──────────────────────────────────────────────────────
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )

    # ── trips ─────────────────────────────────────────────────────────
    op.create_table(
        "trips",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("creator_id", sa.String(64), nullable=False),
        sa.Column("start_location", sa.String(200), nullable=False),
        sa.Column("destination", sa.String(200), nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("speed", sa.Float, nullable=False),
        sa.Column("total_seats", sa.Integer, nullable=False),
        sa.Column("seats_left", sa.Integer, nullable=False),
        sa.Column(
            "status",
            sa.Enum("active", "full", "completed", name="tripstatus"),
            default="active",
            nullable=False,
        ),
        sa.Column("description", sa.Text, nullable=True),
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
        sa.CheckConstraint("total_seats >= 1", name="ck_trips_total_seats"),
        sa.CheckConstraint(
            "seats_left >= 0 AND seats_left <= total_seats",
            name="ck_trips_seats_left",
        ),
        sa.CheckConstraint("speed > 0", name="ck_trips_speed"),
    )
    op.create_index("idx_trips_creator", "trips", ["creator_id"])
    op.create_index("idx_trips_status", "trips", ["status"])
    op.create_index("idx_trips_created", "trips", ["created_at"])

    # ── join_requests ─────────────────────────────────────────────────
    op.create_table(
        "join_requests",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "trip_id", sa.String(36), sa.ForeignKey("trips.id"), nullable=False
        ),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "approved", "rejected", name="requeststatus"),
            default="pending",
            nullable=False,
        ),
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
        sa.UniqueConstraint(
            "trip_id", "user_id", name="uq_join_requests_trip_user"
        ),
    )
    op.create_index("idx_join_requests_trip", "join_requests", ["trip_id"])
    op.create_index("idx_join_requests_user", "join_requests", ["user_id"])
    op.create_index("idx_join_requests_status", "join_requests", ["status"])


def downgrade() -> None:
    op.drop_table("join_requests")
    op.drop_table("trips")
    op.drop_table("profiles")
    op.execute("DROP TYPE IF EXISTS requeststatus")
    op.execute("DROP TYPE IF EXISTS tripstatus")
