# utils/time.py
from datetime import datetime


def receipt_time(now: datetime | None = None) -> str:
    """Local wall-clock time a response was received, e.g. ``14:03:27``."""
    now = now or datetime.now()
    return now.strftime("%H:%M:%S")
