"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    op.create_table(
        "chat_rooms",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("room_code", sa.String(12), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("is_password_protected", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("max_participants", sa.Integer(), nullable=False),
        sa.Column("created_by", sa.String(36), nullable=False),
        _created_at(),
        _created_at("updated_at"),
        sa.CheckConstraint("max_participants >= 2", name="ck_chat_rooms_capacity"),
    )
    op.create_table(
        "room_participants",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("room_id", sa.String(36), sa.ForeignKey("chat_rooms.id"), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        _created_at("joined_at"),
        sa.UniqueConstraint("room_id", "user_id", name="uq_room_participants_room_user"),
    )
    op.create_index("ix_room_participants_room_id", "room_participants", ["room_id"])
    op.create_table(
        "messages",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("room_id", sa.String(36), sa.ForeignKey("chat_rooms.id"), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("message_type", sa.String(16), nullable=False),
        sa.Column("file_url", sa.String(512), nullable=True),
        _created_at(),
    )
    op.create_index("ix_messages_room_created", "messages", ["room_id", "created_at"])
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), nullable=False, unique=True),
        sa.Column("display_name", sa.String(100), nullable=True),
        sa.Column("avatar_url", sa.String(512), nullable=True),
        sa.Column("google_id", sa.String(64), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.Column("permissions_granted", sa.JSON(), nullable=True),
        _created_at(),
        _created_at("updated_at"),
    )
    op.create_table(
        "user_roles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), nullable=False, unique=True),
        sa.Column("role", sa.String(16), nullable=False),
        _created_at(),
    )
    op.create_table(
        "admin_allowlist",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("phone_number", sa.String(20), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        _created_at(),
    )
    op.create_table(
        "auth_users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("provider", sa.String(16), nullable=False),
        _created_at(),
    )
    op.create_table(
        "verification_images",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), nullable=False, index=True),
        sa.Column("image_url", sa.String(512), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=True),
        _created_at("captured_at"),
    )
    op.create_table(
        "verification_audio",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), nullable=False, index=True),
        sa.Column("audio_url", sa.String(512), nullable=False),
        sa.Column("duration_seconds", sa.Float(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        _created_at("recorded_at"),
    )
    op.create_table(
        "location_tracking",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), nullable=False, index=True),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("accuracy", sa.Float(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        _created_at("recorded_at"),
    )


def downgrade() -> None:
    for table in (
        "location_tracking",
        "verification_audio",
        "verification_images",
        "auth_users",
        "admin_allowlist",
        "user_roles",
        "profiles",
        "messages",
        "room_participants",
        "chat_rooms",
    ):
        op.drop_table(table)
