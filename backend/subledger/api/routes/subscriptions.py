"""Subscription endpoints."""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from subledger.api.deps import get_caller, get_store
from subledger.db.session import get_db
from subledger.schemas.subscriptions import (
    InitOut,
    Subscription,
    SubscriptionCreate,
    SubscriptionRenew,
)
from subledger.services.store import SubscriptionStore

router = APIRouter(tags=["subscriptions"])


# Mutating calls commit their session; read-only calls never do.


@router.post("/init", response_model=InitOut)
def init(
    caller: str = Depends(get_caller),
    store: SubscriptionStore = Depends(get_store),
) -> InitOut:
    """Claim the owner identity if nobody holds it yet."""
    result = store.init(caller)
    return InitOut(status=result, owner=store.owner.owner)


@router.post("/subscriptions", response_model=Subscription, status_code=status.HTTP_201_CREATED)
def create_subscription(
    payload: SubscriptionCreate,
    caller: str = Depends(get_caller),
    store: SubscriptionStore = Depends(get_store),
    db: Session = Depends(get_db),
) -> Subscription:
    """Create a subscription owned by the caller."""
    subscription = store.create_subscription(caller, payload.price, payload.days)
    db.commit()
    return subscription


@router.get("/subscriptions", response_model=List[Subscription])
def get_all_subscriptions(
    caller: str = Depends(get_caller),
    store: SubscriptionStore = Depends(get_store),
) -> List[Subscription]:
    """List every subscription in the store."""
    return store.get_all_subscriptions()


@router.get("/subscriptions/by-subscriber/{subscriber}", response_model=List[Subscription])
def get_subscriptions_by_subscriber(
    subscriber: str,
    caller: str = Depends(get_caller),
    store: SubscriptionStore = Depends(get_store),
) -> List[Subscription]:
    return store.get_subscriptions_by_subscriber(subscriber)


@router.get("/subscriptions/{subscription_id}", response_model=Subscription)
def get_subscription(
    subscription_id: str,
    caller: str = Depends(get_caller),
    store: SubscriptionStore = Depends(get_store),
) -> Subscription:
    """Get a subscription by ID (must belong to the caller)."""
    return store.get_subscription(caller, subscription_id)


@router.delete("/subscriptions/{subscription_id}", response_model=Subscription)
def cancel_subscription(
    subscription_id: str,
    caller: str = Depends(get_caller),
    store: SubscriptionStore = Depends(get_store),
    db: Session = Depends(get_db),
) -> Subscription:
    """Cancel a subscription, returning the removed record."""
    subscription = store.cancel_subscription(caller, subscription_id)
    db.commit()
    return subscription


@router.post("/subscriptions/{subscription_id}/renew", response_model=Subscription)
def renew_subscription(
    subscription_id: str,
    payload: SubscriptionRenew,
    caller: str = Depends(get_caller),
    store: SubscriptionStore = Depends(get_store),
    db: Session = Depends(get_db),
) -> Subscription:
    subscription = store.renew_subscription(caller, subscription_id, payload.price)
    db.commit()
    return subscription


@router.post("/subscriptions/{subscription_id}/withdraw", response_model=Subscription)
def withdraw_funds(
    subscription_id: str,
    caller: str = Depends(get_caller),
    store: SubscriptionStore = Depends(get_store),
    db: Session = Depends(get_db),
) -> Subscription:
    """Zero the subscription's recorded price (owner only)."""
    subscription = store.withdraw_funds(caller, subscription_id)
    db.commit()
    return subscription
