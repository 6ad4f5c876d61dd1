# (c) Copyright Datacraft, 2026
"""Timezone helpers.

All timestamps are stored as naive UTC so PostgreSQL and SQLite compare them
the same way.
"""
from datetime import datetime, timezone


def utc_now() -> datetime:
	return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
	"""Normalise an aware datetime to naive UTC; naive values pass through."""
	if value.tzinfo is None:
		return value
	return value.astimezone(timezone.utc).replace(tzinfo=None)
