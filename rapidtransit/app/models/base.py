"""
Shared column helpers for models.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware current time, used for Python-side column defaults."""
    return datetime.now(timezone.utc)


def enum_values(enum_cls) -> list:
    """Persist enum values (not member names) so stored rows match the wire format."""
    return [member.value for member in enum_cls]
