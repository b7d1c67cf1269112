# quota / admission logic

from datetime import datetime
from enum import Enum

from coachbot.db.models import UserRecord, UserStatus
from coachbot.services.subscription import resolve_expiry


class Admission(str, Enum):
    ALLOWED = "allowed"
    EXPIRED = "expired"            # revoked by this very check
    INACTIVE = "inactive"
    QUOTA_EXHAUSTED = "quota_exhausted"


def has_quota(u: UserRecord) -> bool:
    return u.quota is None or u.quota > 0

def consume(u: UserRecord) -> None:
    if u.quota is not None:
        u.quota -= 1

def admit(u: UserRecord, now: datetime) -> Admission:
    """Entitlement first, then quota; one unit is consumed only when allowed."""
    if resolve_expiry(u, now):
        return Admission.EXPIRED
    if u.status != UserStatus.PAID:
        return Admission.INACTIVE
    if not has_quota(u):
        return Admission.QUOTA_EXHAUSTED
    consume(u)
    return Admission.ALLOWED
