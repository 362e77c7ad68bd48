"""Pydantic schemas for subscription records and requests."""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Subscription(BaseModel):
    """A stored subscription record."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    subscriber: str
    price: Decimal = Field(ge=0)
    days: int = Field(ge=1, le=65535)
    created_at: int = Field(description="Creation time, unix seconds")
    expiry_date: int = Field(description="created_at + days * 2592000")
    updated_at: Optional[int] = Field(default=None, description="Last renew/withdraw time")


# Request bodies. Range checks happen in the store so that every caller gets
# the same InvalidPayload / InvalidInput errors.


class SubscriptionCreate(BaseModel):
    """Schema for creating a subscription."""

    price: Decimal = Field(description="Amount paid for the subscription")
    days: int = Field(description="Subscribed duration, 1..65535")


class SubscriptionRenew(BaseModel):
    """Schema for renewing a subscription."""

    price: Decimal = Field(description="Amount added to the subscription price")


class InitOut(BaseModel):
    status: str
    owner: Optional[str] = None
