"""
Record Store Models
===================
SQLAlchemy mapping of the verification record table.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class OTPRequest(Base):
    """One outstanding code per phone number."""

    __tablename__ = "otp_requests"

    phone_number: Mapped[str] = mapped_column(String(16), primary_key=True)
    hashed_code: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    attempt_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    last_issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
