# job.py
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from jobboard.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), index=True, nullable=False)
    description = Column(Text, nullable=False)
    skills = Column(JSON, nullable=False, default=list)
    budget = Column(Float, nullable=False)
    salary = Column(Float, nullable=True)
    location = Column(String(255), nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    # One on-chain payment gates exactly one posting.
    payment_tx_hash = Column(String(66), unique=True, nullable=False)
    # Set client-side so sub-second ordering survives on sqlite.
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True, nullable=False)

    creator = relationship("User", backref="jobs")
