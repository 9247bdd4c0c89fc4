from datetime import datetime

from sqlalchemy import JSON, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from roomchat.app.common.utils.codes import generate_uuid
from roomchat.config.database import Base


class VerificationImage(Base):
    __tablename__ = "verification_images"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    image_url: Mapped[str] = mapped_column(String(512), nullable=False)
    # "metadata"는 Declarative 예약어라 속성명을 분리
    meta: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)
    captured_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
