"""
Key-value substrates for the subscription store.

Both backends expose the same small surface: get, insert-or-replace, remove,
values and by_subscriber (both ordered by id) and count. They enforce a
record-count capacity and a maximum key length, and report every substrate
failure as StorageFailure.
"""
from __future__ import annotations

from typing import Optional, Protocol

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from subledger.core.errors import StorageFailure
from subledger.core.logging import get_logger
from subledger.db.models.subscription import SubscriptionRow
from subledger.schemas.subscriptions import Subscription

logger = get_logger(__name__)

DEFAULT_CAPACITY = 100_000
MAX_KEY_LENGTH = 64


class SubscriptionBackend(Protocol):
    def get(self, subscription_id: str) -> Optional[Subscription]: ...

    def insert(self, subscription: Subscription) -> None: ...

    def remove(self, subscription_id: str) -> Optional[Subscription]: ...

    def values(self) -> list[Subscription]: ...

    def by_subscriber(self, subscriber: str) -> list[Subscription]: ...

    def count(self) -> int: ...


def _check_key(subscription_id: str) -> None:
    if len(subscription_id) > MAX_KEY_LENGTH:
        raise StorageFailure(
            f"Subscription id exceeds {MAX_KEY_LENGTH} characters: {subscription_id!r}"
        )


class InMemorySubscriptionBackend:
    """Dict-backed substrate, for tests and single-process use."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        self.capacity = capacity
        self._records: dict[str, Subscription] = {}

    def get(self, subscription_id: str) -> Optional[Subscription]:
        return self._records.get(subscription_id)

    def insert(self, subscription: Subscription) -> None:
        _check_key(subscription.id)
        if subscription.id not in self._records and len(self._records) >= self.capacity:
            raise StorageFailure(f"Subscription store is full ({self.capacity} records)")
        self._records[subscription.id] = subscription

    def remove(self, subscription_id: str) -> Optional[Subscription]:
        return self._records.pop(subscription_id, None)

    def values(self) -> list[Subscription]:
        return [self._records[key] for key in sorted(self._records)]

    def by_subscriber(self, subscriber: str) -> list[Subscription]:
        return [s for s in self.values() if s.subscriber == subscriber]

    def count(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return len(self._records)


class SqlSubscriptionBackend:
    """
    Substrate over the ``subscriptions`` table.

    Writes are flushed immediately so later reads in the same call see them.
    Commit and rollback belong to whoever owns the session: one API request
    is one transaction.
    """

    def __init__(self, db: Session, capacity: int = DEFAULT_CAPACITY):
        self.db = db
        self.capacity = capacity

    def get(self, subscription_id: str) -> Optional[Subscription]:
        try:
            row = self.db.get(SubscriptionRow, subscription_id)
        except SQLAlchemyError as e:
            raise StorageFailure(f"Failed to read subscription id={subscription_id}") from e
        return Subscription.model_validate(row) if row else None

    def insert(self, subscription: Subscription) -> None:
        _check_key(subscription.id)
        try:
            row = self.db.get(SubscriptionRow, subscription.id)
            if row is None:
                if self.count() >= self.capacity:
                    raise StorageFailure(f"Subscription store is full ({self.capacity} records)")
                row = SubscriptionRow(id=subscription.id)
                self.db.add(row)
            row.subscriber = subscription.subscriber
            row.price = subscription.price
            row.days = subscription.days
            row.created_at = subscription.created_at
            row.expiry_date = subscription.expiry_date
            row.updated_at = subscription.updated_at
            self.db.flush()
        except SQLAlchemyError as e:
            logger.error("Insert failed for subscription id=%s: %s", subscription.id, e)
            raise StorageFailure(f"Failed to store subscription id={subscription.id}") from e

    def remove(self, subscription_id: str) -> Optional[Subscription]:
        try:
            row = self.db.get(SubscriptionRow, subscription_id)
            if row is None:
                return None
            snapshot = Subscription.model_validate(row)
            self.db.delete(row)
            self.db.flush()
        except SQLAlchemyError as e:
            logger.error("Remove failed for subscription id=%s: %s", subscription_id, e)
            raise StorageFailure(f"Failed to remove subscription id={subscription_id}") from e
        return snapshot

    def values(self) -> list[Subscription]:
        try:
            rows = self.db.execute(
                select(SubscriptionRow).order_by(SubscriptionRow.id.asc())
            ).scalars().all()
        except SQLAlchemyError as e:
            raise StorageFailure("Failed to list subscriptions") from e
        return [Subscription.model_validate(row) for row in rows]

    def by_subscriber(self, subscriber: str) -> list[Subscription]:
        try:
            rows = self.db.execute(
                select(SubscriptionRow)
                .where(SubscriptionRow.subscriber == subscriber)
                .order_by(SubscriptionRow.id.asc())
            ).scalars().all()
        except SQLAlchemyError as e:
            raise StorageFailure(f"Failed to list subscriptions for subscriber={subscriber}") from e
        return [Subscription.model_validate(row) for row in rows]

    def count(self) -> int:
        try:
            return self.db.execute(
                select(func.count()).select_from(SubscriptionRow)
            ).scalar_one()
        except SQLAlchemyError as e:
            raise StorageFailure("Failed to count subscriptions") from e
