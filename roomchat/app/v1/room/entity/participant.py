from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roomchat.app.common.utils.codes import generate_uuid
from roomchat.config.database import Base


class RoomParticipant(Base):
    __tablename__ = "room_participants"
    # (room, user) 당 멤버십은 하나
    __table_args__ = (UniqueConstraint("room_id", "user_id", name="uq_room_participants_room_user"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    room_id: Mapped[str] = mapped_column(String(36), ForeignKey("chat_rooms.id"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    room = relationship("Room", back_populates="participants")
