from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def epoch_millis() -> int:
    return int(utcnow().timestamp() * 1000)
