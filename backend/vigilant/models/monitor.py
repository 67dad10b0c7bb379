"""Monitor model - endpoints being tracked."""
from datetime import datetime
from sqlalchemy import BigInteger, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from ..database import Base


class Monitor(Base):
    """A tracked HTTP endpoint with its current status."""

    __tablename__ = "monitors"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    url = Column(String, nullable=False)  # Always carries an http:// or https:// scheme
    interval = Column(Integer, nullable=False, default=5)  # minutes
    status = Column(String, nullable=False, default="PENDING")  # UP, DOWN, PENDING, MAINTENANCE
    last_checked = Column(BigInteger, nullable=True)  # epoch milliseconds
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    history = relationship(
        "MonitorHistory",
        back_populates="monitor",
        cascade="all, delete-orphan",
        order_by="MonitorHistory.position",
        passive_deletes=True,
    )
