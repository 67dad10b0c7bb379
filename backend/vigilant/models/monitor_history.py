"""MonitorHistory model - bounded probe history for monitors."""
from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..database import Base


class MonitorHistory(Base):
    """One recorded probe result, newest entries at the lowest position."""

    __tablename__ = "monitor_history"

    id = Column(String, primary_key=True)
    monitor_id = Column(String, ForeignKey("monitors.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)  # 0 = newest
    timestamp = Column(BigInteger, nullable=False)  # epoch milliseconds
    latency = Column(Integer, nullable=False, default=0)  # ms, 0 when DOWN
    status = Column(String, nullable=False)  # UP, DOWN
    message = Column(String, nullable=True)  # Failure reason
    status_code = Column(Integer, nullable=True)  # Absent on transport failures

    # Relationships
    monitor = relationship("Monitor", back_populates="history")
