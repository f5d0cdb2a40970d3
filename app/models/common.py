from datetime import datetime, timezone
from typing import Annotated

from pydantic import BeforeValidator


def _strip_text(value):
    if isinstance(value, str):
        return value.strip()
    return value


TrimmedStr = Annotated[str, BeforeValidator(_strip_text)]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Normalize a timestamp to UTC; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
