"""SQLAlchemy model for the read-only user directory."""

from sqlalchemy import Column, DateTime, String

from markethub.infrastructure.database import Base


class UserModel(Base):
    """Database representation of the ``users`` collection."""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    name = Column(String(120), nullable=True)
    email = Column(String(255), nullable=True)
    role = Column(String(32), nullable=False, index=True)
    created_at = Column(DateTime(), nullable=True)


__all__ = ["UserModel"]
