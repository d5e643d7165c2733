"""
Tag domain object for harborrp.

Tags are read once from the registry and never mutated. Each repository's
tag set is processed on its own and dropped after its deletion batch.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict

from ..exit_codes import TimestampParseError

SECONDS_PER_DAY = 86400.0

# RFC 3339 with optional fractional seconds; Harbor may send nanoseconds.
_RFC3339 = re.compile(
    r'^(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$'
)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into an aware datetime.

    Fractional seconds beyond microsecond precision are truncated.

    Raises:
        TimestampParseError: If the value is not a valid RFC 3339 timestamp
    """
    if not isinstance(value, str):
        raise TimestampParseError(f"Invalid timestamp: {value!r}", value=repr(value))

    match = _RFC3339.match(value.strip())
    if not match:
        raise TimestampParseError(f"Invalid RFC 3339 timestamp: {value!r}", value=value)

    date_part, time_part, fraction, offset = match.groups()
    fraction = (fraction or '')[:7]
    if offset in ('Z', 'z'):
        offset = '+00:00'

    try:
        return datetime.fromisoformat(f"{date_part}T{time_part}{fraction}{offset}")
    except ValueError as e:
        raise TimestampParseError(f"Invalid RFC 3339 timestamp: {value!r} ({e})", value=value) from e


def days_between(earlier: datetime, later: datetime) -> float:
    """Fractional days from ``earlier`` to ``later`` (negative if reversed)."""
    return (later - earlier).total_seconds() / SECONDS_PER_DAY


@dataclass(frozen=True)
class TagCandidate:
    """
    A tag of a repository.

    Attributes:
        name: Tag name (e.g., "v1.2.0", "latest")
        created_at: Creation time as an aware datetime
        created: Raw creation string as returned by the registry
    """

    name: str
    created_at: datetime
    created: str = ""

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'TagCandidate':
        """
        Create from a Harbor tag list entry.

        Raises:
            TimestampParseError: If ``created`` is malformed
        """
        created = data.get('created', '')
        return cls(
            name=data.get('name', ''),
            created_at=parse_timestamp(created),
            created=created,
        )

    def age_days(self, now: datetime) -> float:
        """Fractional days since the tag was created."""
        return days_between(self.created_at, now)

    def __str__(self) -> str:
        return self.name
