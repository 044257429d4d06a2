"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Column, DateTime, Index, JSON, String, Text

from markethub.infrastructure.database import Base


class NotificationModel(Base):
    """Database representation of the ``notifications`` collection."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_recipient_created", "recipient_id", "created_at"),
        Index("ix_notifications_recipient_status", "recipient_id", "status"),
    )

    id = Column(String(64), primary_key=True)
    recipient_id = Column(String(64), nullable=False, index=True)
    recipient_role = Column(String(32), nullable=True)
    type = Column(String(50), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(String(16), nullable=False)
    status = Column(String(16), nullable=False, default="unread")
    # ``metadata`` is reserved on declarative classes.
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(DateTime(), nullable=False)
    read_at = Column(DateTime(), nullable=True)
    expires_at = Column(DateTime(), nullable=True)


__all__ = ["NotificationModel"]
