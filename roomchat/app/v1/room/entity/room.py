from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roomchat.app.common.utils.codes import generate_room_code, generate_uuid
from roomchat.app.common.utils.consts import DEFAULT_MAX_PARTICIPANTS, MIN_PARTICIPANTS
from roomchat.config.database import Base


class Room(Base):
    __tablename__ = "chat_rooms"
    __table_args__ = (CheckConstraint(f"max_participants >= {MIN_PARTICIPANTS}", name="ck_chat_rooms_capacity"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 참여 코드는 서버에서 발급
    room_code: Mapped[str] = mapped_column(String(12), unique=True, nullable=False, default=generate_room_code)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_password_protected: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    max_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_MAX_PARTICIPANTS)
    created_by: Mapped[str] = mapped_column(String(36), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    participants = relationship("RoomParticipant", back_populates="room")
    messages = relationship("Message", back_populates="room")
