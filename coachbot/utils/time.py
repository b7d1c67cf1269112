from datetime import datetime, timezone
from zoneinfo import ZoneInfo

def now_tz(tz_name: str = "UTC") -> datetime:
    return datetime.now(tz=ZoneInfo(tz_name))

def from_epoch_ms(value: int | float) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
