# (c) Copyright Datacraft, 2026
"""Inspection deadlines: priority levels and marking overdue work as expired."""
import logging
from datetime import datetime, timedelta
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from drivewatch.core.config import get_settings
from drivewatch.core.exceptions import PersistenceFailure
from drivewatch.core.utils.tz import utc_now
from .db.orm import Inspection
from .models import InspectionStatus, PriorityLevel

logger = logging.getLogger(__name__)

# Work that is still expected to be done
OPEN_STATUSES = (
	InspectionStatus.DRAFT,
	InspectionStatus.PENDING,
	InspectionStatus.ACTIVE,
)


def priority_level(inspection: Inspection, now: datetime | None = None) -> PriorityLevel:
	if inspection.is_expired:
		return PriorityLevel.EXPIRED
	if inspection.expiry_date is None:
		return PriorityLevel.NO_URGENCY

	remaining = inspection.expiry_date - (now or utc_now())
	if remaining < timedelta(0):
		return PriorityLevel.EXPIRED
	days = remaining.days
	if days <= 1:
		return PriorityLevel.CRITICAL
	if days <= 3:
		return PriorityLevel.HIGH
	if days <= 7:
		return PriorityLevel.MEDIUM
	return PriorityLevel.LOW


def expiry_penalty(expiry_date: datetime, now: datetime) -> int:
	"""Penalty points per full day overdue, capped."""
	settings = get_settings()
	overdue_days = (now - expiry_date).days
	if overdue_days <= 0:
		return 0
	return min(overdue_days * settings.expiry_penalty_per_day, settings.expiry_penalty_cap)


async def mark_expired_inspections(session: AsyncSession, now: datetime | None = None) -> int:
	"""Flag open inspections past their expiry date. Returns how many were flagged."""
	now = now or utc_now()
	stmt = select(Inspection).where(
		Inspection.status.in_([s.value for s in OPEN_STATUSES]),
		Inspection.is_expired.is_(False),
		Inspection.expiry_date.is_not(None),
		Inspection.expiry_date < now,
		Inspection.deleted_at.is_(None),
	)
	inspections = (await session.execute(stmt)).scalars().all()

	for inspection in inspections:
		inspection.is_expired = True
		inspection.expired_at = now
		inspection.performance_penalty = expiry_penalty(inspection.expiry_date, now)
		logger.info(
			f"Inspection {inspection.id} '{inspection.name}' marked as expired "
			f"(operator: {inspection.assigned_to}, penalty: {inspection.performance_penalty})"
		)

	try:
		await session.commit()
	except SQLAlchemyError as e:
		await session.rollback()
		logger.exception(f"Failed to mark expired inspections: {e}")
		raise PersistenceFailure("Could not mark expired inspections, please retry") from e

	return len(inspections)


async def get_expiring_soon(
	session: AsyncSession,
	now: datetime | None = None,
	within: timedelta = timedelta(days=1),
) -> Sequence[Inspection]:
	"""Open inspections whose deadline falls inside the next `within`."""
	now = now or utc_now()
	stmt = select(Inspection).where(
		Inspection.status.in_([s.value for s in OPEN_STATUSES]),
		Inspection.is_expired.is_(False),
		Inspection.expiry_date > now,
		Inspection.expiry_date <= now + within,
		Inspection.deleted_at.is_(None),
	).order_by(Inspection.expiry_date)
	return (await session.execute(stmt)).scalars().all()
