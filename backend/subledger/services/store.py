"""
Subscription store: lifecycle and authorization rules over a key-value backend.

Every operation is one synchronous call. The caller identity is passed to each
operation; the clock and id source are injected at construction so tests can
use synthetic values.
"""
from __future__ import annotations

import time
import uuid
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from subledger.core.errors import InvalidInput, InvalidPayload, NotFound, Unauthorized
from subledger.core.logging import get_logger
from subledger.schemas.subscriptions import Subscription
from subledger.services.backends import SubscriptionBackend

logger = get_logger(__name__)

# One subscription "day" unit is thirty days, in seconds
EXPIRY_UNIT_SECONDS = 2_592_000
MAX_DAYS = 65535

# Matches the price column: 20 digits, 8 of them after the point
PRICE_QUANTUM = Decimal("1e-8")
MAX_PRICE = Decimal(10) ** 12


def now_seconds() -> int:
    return int(time.time())


def _uuid4_str() -> str:
    return str(uuid.uuid4())


class OwnerSlot:
    """Holds the owner identity. The first claim wins; later claims are ignored."""

    def __init__(self, owner: Optional[str] = None):
        self._owner = owner

    @property
    def owner(self) -> Optional[str]:
        return self._owner

    def claim(self, identity: str) -> str:
        if self._owner is None:
            self._owner = identity
            logger.info("Owner set to %s", identity)
        return self._owner

    def is_owner(self, identity: str) -> bool:
        return self._owner is not None and self._owner == identity


def _to_decimal(value) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    return amount if amount.is_finite() else None


def _fits_price_column(amount: Decimal) -> bool:
    """True when ``amount`` is stored exactly by the Numeric(20, 8) price column."""
    if abs(amount) >= MAX_PRICE:
        return False
    return amount == amount.quantize(PRICE_QUANTUM)


class SubscriptionStore:
    """Owns subscription records and enforces who may do what to them."""

    def __init__(
        self,
        backend: SubscriptionBackend,
        owner: Optional[OwnerSlot] = None,
        clock: Callable[[], int] = now_seconds,
        id_factory: Callable[[], str] = _uuid4_str,
    ):
        self.backend = backend
        self.owner = owner or OwnerSlot()
        self.clock = clock
        self.id_factory = id_factory

    def init(self, caller: str) -> str:
        self.owner.claim(caller)
        return "initialized"

    # --- Mutating operations ---

    def create_subscription(self, caller: str, price, days) -> Subscription:
        """
        Create a subscription for ``caller``.

        ``price`` must be positive and ``days`` an integer in 1..65535. The
        expiry is fixed here as ``created_at + days * 2592000``.
        """
        amount = _to_decimal(price)
        if amount is None or amount <= 0:
            raise InvalidPayload(f"price must be a positive number, got {price!r}")
        if not _fits_price_column(amount):
            raise InvalidPayload(
                f"price must be below {MAX_PRICE} with at most 8 decimal places, got {price!r}"
            )
        if isinstance(days, bool) or not isinstance(days, int) or not 0 < days <= MAX_DAYS:
            raise InvalidPayload(f"days must be an integer between 1 and {MAX_DAYS}, got {days!r}")

        created_at = self.clock()
        subscription = Subscription(
            id=self.id_factory(),
            subscriber=caller,
            price=amount,
            days=days,
            created_at=created_at,
            expiry_date=created_at + days * EXPIRY_UNIT_SECONDS,
            updated_at=None,
        )
        self.backend.insert(subscription)
        logger.info(
            "Subscription created id=%s subscriber=%s days=%s expiry=%s",
            subscription.id,
            caller,
            days,
            subscription.expiry_date,
        )
        return subscription

    def cancel_subscription(self, caller: str, subscription_id: str) -> Subscription:
        """Remove the caller's subscription and return it as it was."""
        subscription = self._get_owned(caller, subscription_id)
        self.backend.remove(subscription_id)
        logger.info("Subscription cancelled id=%s subscriber=%s", subscription_id, caller)
        return subscription

    def renew_subscription(self, caller: str, subscription_id: str, additional_price) -> Subscription:
        """
        Add ``additional_price`` to the caller's subscription.

        The record is removed and reinserted under the same id. All checks run
        before the removal, so a rejected renewal leaves the record untouched.
        Duration and expiry do not change.
        """
        amount = _to_decimal(additional_price)
        if amount is None or amount <= 0:
            raise InvalidInput(f"renewal price must be a positive number, got {additional_price!r}")
        if not _fits_price_column(amount):
            raise InvalidInput(
                f"renewal price must be below {MAX_PRICE} with at most 8 decimal places, "
                f"got {additional_price!r}"
            )

        current = self._get_owned(caller, subscription_id)
        total = current.price + amount
        if not _fits_price_column(total):
            raise InvalidInput(f"renewed price {total} would exceed {MAX_PRICE}")
        renewed = current.model_copy(update={"price": total, "updated_at": self.clock()})
        self.backend.remove(subscription_id)
        self.backend.insert(renewed)
        logger.info(
            "Subscription renewed id=%s added=%s price=%s", subscription_id, amount, renewed.price
        )
        return renewed

    def withdraw_funds(self, caller: str, subscription_id: str) -> Subscription:
        """Zero the recorded price. Only the owner may withdraw; no funds move."""
        current = self._get_existing(subscription_id)
        if not self.owner.is_owner(caller):
            logger.warning("Withdrawal refused id=%s caller=%s", subscription_id, caller)
            raise Unauthorized("Not owner")

        settled = current.model_copy(update={"price": Decimal(0), "updated_at": self.clock()})
        self.backend.insert(settled)
        logger.info("Funds withdrawn id=%s amount=%s", subscription_id, current.price)
        return settled

    # --- Read-only operations ---

    def get_subscription(self, caller: str, subscription_id: str) -> Subscription:
        return self._get_owned(caller, subscription_id)

    def get_subscriptions_by_subscriber(self, subscriber: str) -> list[Subscription]:
        subscriptions = self.backend.by_subscriber(subscriber)
        if not subscriptions:
            raise NotFound(f"No subscriptions found for subscriber={subscriber}")
        return subscriptions

    def get_all_subscriptions(self) -> list[Subscription]:
        return self.backend.values()

    # --- Helpers ---

    def _get_existing(self, subscription_id: str) -> Subscription:
        subscription = self.backend.get(subscription_id)
        if subscription is None:
            logger.warning("Subscription id=%s not found", subscription_id)
            raise NotFound(f"Subscription id={subscription_id} not found")
        return subscription

    def _get_owned(self, caller: str, subscription_id: str) -> Subscription:
        subscription = self._get_existing(subscription_id)
        if subscription.subscriber != caller:
            logger.warning(
                "Subscription id=%s refused for caller=%s", subscription_id, caller
            )
            raise Unauthorized("Not authorised subscriber")
        return subscription
