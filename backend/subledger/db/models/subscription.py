"""Subscription database model."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import BigInteger, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from subledger.db.base import Base


class SubscriptionRow(Base):
    """One stored subscription record, keyed by its opaque id."""

    __tablename__ = "subscriptions"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    subscriber: Mapped[str] = mapped_column(Text, nullable=False, index=True)

    price: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    days: Mapped[int] = mapped_column(Integer, nullable=False)

    # Unix seconds
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    expiry_date: Mapped[int] = mapped_column(BigInteger, nullable=False)
    updated_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
