# paid period state machine: expiry, remaining days, expiry reminders

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Iterable, Optional

from coachbot.db.models import UserRecord, UserStatus

EXPIRY_NOTIFICATION_DAYS = (7, 3, 1)

_DAY_SECONDS = 24 * 60 * 60


def remaining_days(u: UserRecord, now: datetime) -> int:
    if u.status != UserStatus.PAID or u.expire_at is None:
        return 0
    left = (u.expire_at - now).total_seconds() / _DAY_SECONDS
    return max(0, math.ceil(left))


def resolve_expiry(u: UserRecord, now: datetime) -> bool:
    """
    Move a paid record whose term has passed to expired.

    Returns True only on the call that made the transition; the caller
    persists the store and sends the revocation notice. Setting
    expiry_notified here keeps a reminder from firing after revocation.
    """
    if u.status == UserStatus.PAID and u.expire_at is not None and now > u.expire_at:
        u.status = UserStatus.EXPIRED
        u.expiry_notified = True
        u.last_updated = now
        return True
    return False


def is_entitled(u: UserRecord, now: datetime) -> bool:
    resolve_expiry(u, now)
    return u.status == UserStatus.PAID


def due_for_notification(
    u: UserRecord,
    now: datetime,
    thresholds: Iterable[int] = EXPIRY_NOTIFICATION_DAYS,
) -> Optional[int]:
    """Return the threshold (days left) a reminder should go out for, or None."""
    if u.status != UserStatus.PAID or u.expire_at is None or now > u.expire_at:
        return None
    days = remaining_days(u, now)
    if days not in set(thresholds):
        return None
    if not u.expiry_notified:
        return days
    # already reminded in this period: only a lower threshold fires again
    if u.notified_threshold is not None and days < u.notified_threshold:
        return days
    return None


def mark_notified(u: UserRecord, days: int, now: datetime) -> None:
    u.expiry_notified = True
    u.notified_threshold = days
    u.last_updated = now


def should_reset_notification(
    u: UserRecord,
    now: datetime,
    thresholds: Iterable[int] = EXPIRY_NOTIFICATION_DAYS,
) -> bool:
    # a term extended to just above the top threshold keeps the flag set
    return u.expiry_notified and remaining_days(u, now) > max(thresholds)


def reset_notification(u: UserRecord) -> None:
    u.expiry_notified = False
    u.notified_threshold = None


def grant(u: UserRecord, days: int, quota: Optional[int], now: datetime) -> UserRecord:
    u.status = UserStatus.PAID
    u.expire_at = now + timedelta(days=days)
    reset_notification(u)
    if quota is not None:
        u.quota = quota
    u.last_updated = now
    return u
