from datetime import datetime, timezone


def utcnow() -> datetime:
    # Columns hold naive UTC timestamps
    return datetime.now(timezone.utc).replace(tzinfo=None)
