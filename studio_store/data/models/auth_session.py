from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String

from studio_store.data.database import Base


class AuthSessionModel(Base):
    __tablename__ = "auth_sessions"

    token = Column(String(128), primary_key=True)
    user_id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
