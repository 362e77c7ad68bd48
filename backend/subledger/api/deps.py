"""
API dependencies (auth, shared DI).

Caller identity:
- Reads X-Caller-Id header; it is the principal every store call runs as
- Validates the bearer token when API_TOKEN is configured
"""

from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from subledger.core.config import settings
from subledger.db.session import get_db
from subledger.services.backends import SqlSubscriptionBackend
from subledger.services.store import OwnerSlot, SubscriptionStore, now_seconds


def get_caller(
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
    x_caller_id: Optional[str] = Header(default=None, alias="X-Caller-Id"),
) -> str:
    """
    Resolve the calling identity.

    - Validates the API token from the Authorization header, if one is configured
    - Requires a non-blank X-Caller-Id header
    """
    api_token = settings.API_TOKEN

    if api_token and (not authorization or authorization.strip() != f"Bearer {api_token}"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization token",
        )

    if not x_caller_id or not x_caller_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Caller-Id header required",
        )
    return x_caller_id.strip()


def get_owner_slot(request: Request) -> OwnerSlot:
    return request.app.state.owner


def get_clock() -> Callable[[], int]:
    return now_seconds


def get_store(
    db: Session = Depends(get_db),
    owner: OwnerSlot = Depends(get_owner_slot),
    clock: Callable[[], int] = Depends(get_clock),
) -> SubscriptionStore:
    """Store bound to this request's session."""
    backend = SqlSubscriptionBackend(db, capacity=settings.SUBSCRIPTION_CAPACITY)
    return SubscriptionStore(backend, owner=owner, clock=clock)
