# Browser Relay - SQLAlchemy Models

from datetime import datetime
from sqlalchemy import Column, DateTime, Index, Integer, JSON, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ConsoleLog(Base):
    """One captured console event."""
    __tablename__ = "console_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    level = Column(String(20), nullable=False)  # log, info, warn, error
    message = Column(Text, nullable=False)
    url = Column(String(2048), nullable=True)
    timestamp = Column(String(64), nullable=False)  # client supplied, verbatim
    occurred_at = Column(DateTime, nullable=True)  # timestamp as naive UTC, null if unparseable
    session_id = Column(String(255), nullable=True)
    stack_trace = Column(Text, nullable=True)
    user_agent = Column(Text, nullable=True)
    log_metadata = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_console_logs_level", "level"),
        Index("idx_console_logs_url", "url"),
        Index("idx_console_logs_timestamp", "timestamp"),
        Index("idx_console_logs_occurred_at", "occurred_at"),
        Index("idx_console_logs_session_id", "session_id"),
        {"sqlite_autoincrement": True},
    )

    def to_dict(self) -> dict:
        """Convert to the wire representation."""
        return {
            "id": self.id,
            "level": self.level,
            "message": self.message,
            "url": self.url,
            "timestamp": self.timestamp,
            "sessionId": self.session_id,
            "stackTrace": self.stack_trace,
            "userAgent": self.user_agent,
            "metadata": self.log_metadata,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
