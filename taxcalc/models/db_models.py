"""SQLAlchemy ORM models for the optional calculation audit trail."""

from __future__ import annotations
from datetime import datetime
from sqlalchemy import DateTime, Float, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class CalculationAudit(Base):
    """One row per full tax calculation served."""

    __tablename__ = "calculation_audits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    endpoint: Mapped[str] = mapped_column(String(256), nullable=False)
    bracket_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    gross: Mapped[float] = mapped_column(Float, nullable=False)
    taxable_income: Mapped[float] = mapped_column(Float, nullable=False)
    total_tax: Mapped[float] = mapped_column(Float, nullable=False)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
