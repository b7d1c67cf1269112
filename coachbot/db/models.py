# subscriber records as stored in users.json

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from coachbot.utils.time import from_epoch_ms


class UserStatus(str, Enum):
    UNSET = "unset"
    PAID = "paid"
    EXPIRED = "expired"


def _dt_out(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _dt_in(value: Any) -> Optional[datetime]:
    # the WhatsApp version stored Date.now() milliseconds
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return from_epoch_ms(value)
    dt = datetime.fromisoformat(str(value))
    if dt.tzinfo is None:
        # offset-less timestamps are taken as UTC
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _int_or_none(value: Any) -> Optional[int]:
    if value is None:
        return None
    return int(value)


@dataclass
class UserRecord:
    identity: str
    status: UserStatus = UserStatus.UNSET

    # expire_at only means something while status == paid
    expire_at: Optional[datetime] = None

    # quota: messages left, None = unlimited
    quota: Optional[int] = None
    usage_count: int = 0

    expiry_notified: bool = False
    notified_threshold: Optional[int] = None

    registered_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    last_used: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "identity": self.identity,
            "status": self.status.value,
            "expireAt": _dt_out(self.expire_at),
            "quota": self.quota,
            "usageCount": self.usage_count,
            "expiryNotified": self.expiry_notified,
            "notifiedThreshold": self.notified_threshold,
            "registeredAt": _dt_out(self.registered_at),
            "lastUpdated": _dt_out(self.last_updated),
            "lastUsed": _dt_out(self.last_used),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserRecord":
        identity = data.get("identity") or data.get("number")
        if not identity:
            raise ValueError("user record without identity")
        return cls(
            identity=str(identity),
            status=UserStatus(data.get("status") or UserStatus.UNSET.value),
            expire_at=_dt_in(data.get("expireAt")),
            quota=_int_or_none(data.get("quota")),
            usage_count=int(data.get("usageCount") or 0),
            expiry_notified=bool(data.get("expiryNotified", False)),
            notified_threshold=_int_or_none(data.get("notifiedThreshold")),
            registered_at=_dt_in(data.get("registeredAt")),
            last_updated=_dt_in(data.get("lastUpdated")),
            last_used=_dt_in(data.get("lastUsed")),
        )
