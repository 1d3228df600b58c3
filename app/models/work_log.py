# app/models/work_log.py
from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    Date,
    DateTime,
    Text,
    ForeignKey,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.core.database import Base


class WorkLog(Base):
    __tablename__ = "work_logs"

    # Primary key
    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    date = Column(Date, nullable=False, index=True, comment="Day the shift was worked")
    hours_worked = Column(Float, nullable=False)
    employer = Column(String(200), nullable=False)
    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="work_logs")

    def __repr__(self):
        return f"<WorkLog(id={self.id}, date={self.date}, hours={self.hours_worked}, employer='{self.employer}')>"
