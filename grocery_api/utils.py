import uuid
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as naive UTC, truncated to milliseconds."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def as_naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def new_sync_id() -> str:
    return str(uuid.uuid4())
