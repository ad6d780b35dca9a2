from datetime import datetime, timezone

def utcnow() -> datetime:
    # Stored in naive "timestamp without time zone" columns, always UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)
