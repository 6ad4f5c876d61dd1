# (c) Copyright Datacraft, 2026
"""
Periodic tasks.

Each task opens its own session and calls the service layer; the celery
worker is synchronous, so the async services run under `asyncio.run`.
"""
import logging
import asyncio

from celery import shared_task

from drivewatch.core.db.engine import get_session_factory
from drivewatch.core.features.inspections.expiry import get_expiring_soon
from drivewatch.core.features.inspections.service import InspectionService
from drivewatch.core.features.maintenance.service import MaintenanceService
from drivewatch.core.features.operator_performance.service import OperatorPerformanceService
from drivewatch.core.utils.tz import utc_now

logger = logging.getLogger(__name__)


def _log_task(name: str) -> str:
	return f"Running task: {name}"


@shared_task(name="inspections.create_scheduled")
def create_scheduled_inspections() -> int:
	"""Instantiate today's inspections from active templates."""
	logger.info(_log_task("inspections.create_scheduled"))

	async def _run() -> int:
		async with get_session_factory()() as session:
			return await InspectionService(session).generate_scheduled_inspections(
				utc_now().date()
			)

	created = asyncio.run(_run())
	logger.info(f"Created {created} scheduled inspections")
	return created


@shared_task(name="inspections.check_expired")
def check_expired_inspections() -> dict:
	"""Flag overdue inspections and warn about the ones expiring soon."""
	logger.info(_log_task("inspections.check_expired"))

	async def _run() -> dict:
		now = utc_now()
		async with get_session_factory()() as session:
			expired = await InspectionService(session).mark_expired(now)
			expiring = await get_expiring_soon(session, now)
			for inspection in expiring:
				logger.warning(
					f"Inspection {inspection.id} '{inspection.name}' expires at "
					f"{inspection.expiry_date.isoformat()} (assigned to {inspection.assigned_to})"
				)
			return {"expired": expired, "expiring_soon": len(expiring)}

	stats = asyncio.run(_run())
	logger.info(f"Expiry check complete: {stats}")
	return stats


@shared_task(name="inspections.maintenance_for_failed")
def create_maintenance_for_failed_inspections() -> int:
	logger.info(_log_task("inspections.maintenance_for_failed"))

	async def _run() -> int:
		async with get_session_factory()() as session:
			return await MaintenanceService(session).create_for_failed_inspections()

	return asyncio.run(_run())


@shared_task(name="operators.check_performance")
def check_operator_performance(window_days: int | None = None) -> dict:
	"""Score all operators and alert admins about the ones needing attention."""
	logger.info(_log_task("operators.check_performance"))

	async def _run() -> dict:
		async with get_session_factory()() as session:
			return await OperatorPerformanceService(session).run_performance_check(
				window_days=window_days
			)

	return asyncio.run(_run())
