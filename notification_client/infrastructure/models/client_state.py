"""SQLAlchemy model for durable client-side key/value state."""

from sqlalchemy import Column, DateTime, String, Text

from notification_client.infrastructure.database import Base
from notification_client.utils import now_utc


class ClientStateModel(Base):
    """Single persisted value, such as the last successful poll time."""

    __tablename__ = "client_state"

    key = Column(String(200), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
