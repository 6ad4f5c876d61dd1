# (c) Copyright Datacraft, 2026
"""Operator performance: gather facts, score, persist, report."""
import logging
from datetime import datetime, timedelta
from typing import Sequence

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_extensions import uuid7str

from drivewatch.core.config import get_settings
from drivewatch.core.db.unit_of_work import UnitOfWork
from drivewatch.core.exceptions import NotFound, ValidationError
from drivewatch.core.features.inspections.db.orm import Inspection, InspectionResult
from drivewatch.core.features.inspections.models import InspectionStatus
from drivewatch.core.features.users.db.api import get_user, get_users_by_role
from drivewatch.core.features.users.db.orm import UserRole
from drivewatch.core.utils.tz import utc_now
from .aggregator import (
	ATTENTION_STATUSES,
	ActivityFacts,
	PerformanceSnapshot,
	PerformanceStatus,
	compute_snapshot,
)
from .db.orm import OperatorPerformance

logger = logging.getLogger(__name__)

OPEN_WORK_STATUSES = (InspectionStatus.ACTIVE.value, InspectionStatus.PENDING.value)


class OperatorPerformanceService:

	def __init__(self, session: AsyncSession):
		self.session = session
		self.settings = get_settings()

	async def collect_facts(
		self,
		user_id: str,
		period_start: datetime,
		period_end: datetime,
	) -> ActivityFacts:
		"""Plain reads, no locks. Only data at or before `period_end` counts."""
		counts_stmt = select(
			func.count(Inspection.id),
			func.sum(case((Inspection.status == InspectionStatus.COMPLETED.value, 1), else_=0)),
			func.sum(case((Inspection.status == InspectionStatus.FAILED.value, 1), else_=0)),
			func.sum(case((Inspection.status.in_(OPEN_WORK_STATUSES), 1), else_=0)),
		).where(
			Inspection.assigned_to == user_id,
			Inspection.deleted_at.is_(None),
			Inspection.created_at >= period_start,
			Inspection.created_at <= period_end,
		)
		total, completed, failed, pending = (await self.session.execute(counts_stmt)).one()

		operator_results = (
			select(InspectionResult)
			.join(Inspection, InspectionResult.inspection_id == Inspection.id)
			.where(
				Inspection.assigned_to == user_id,
				InspectionResult.recorded_at <= period_end,
			)
			.subquery()
		)

		last_stmt = select(func.max(operator_results.c.recorded_at))
		last_activity_at = (await self.session.execute(last_stmt)).scalar_one_or_none()

		results_stmt = select(
			func.count(operator_results.c.id),
			func.sum(case((operator_results.c.is_passing.is_(True), 1), else_=0)),
		).where(operator_results.c.recorded_at >= period_start)
		results_total, results_passing = (await self.session.execute(results_stmt)).one()

		return ActivityFacts(
			total_assigned=total or 0,
			completed=completed or 0,
			failed=failed or 0,
			pending=pending or 0,
			results_total=results_total or 0,
			results_passing=results_passing or 0,
			last_activity_at=last_activity_at,
		)

	async def compute_operator_performance(
		self,
		user_id: str,
		window_days: int | None = None,
		now: datetime | None = None,
	) -> PerformanceSnapshot:
		"""
		Score `user_id` over the `window_days` ending at `now` and upsert the
		row for that window. Running twice with the same `now` rewrites the
		same row with the same values.
		"""
		user = await get_user(self.session, user_id)
		if user is None:
			raise NotFound("User", user_id)

		if window_days is None:
			window_days = self.settings.performance_window_days
		if window_days <= 0:
			raise ValidationError(f"window_days must be positive, got {window_days}")
		now = now or utc_now()
		period_start = now - timedelta(days=window_days)

		facts = await self.collect_facts(user_id, period_start, now)
		snapshot = compute_snapshot(
			user_id,
			facts,
			period_start=period_start,
			period_end=now,
			window_days=window_days,
			inactivity_threshold_days=self.settings.inactivity_threshold_days,
		)

		async with UnitOfWork(self.session) as uow:
			stmt = select(OperatorPerformance).where(
				OperatorPerformance.user_id == user_id,
				OperatorPerformance.period_start == period_start,
				OperatorPerformance.period_end == now,
			)
			row = (await self.session.execute(stmt)).scalar_one_or_none()
			if row is None:
				row = OperatorPerformance(
					id=uuid7str(),
					user_id=user_id,
					period_start=period_start,
					period_end=now,
				)
				self.session.add(row)
			row.apply(snapshot)
			await uow.commit()

		logger.info(
			f"Operator {user_id}: score {snapshot.performance_score} "
			f"({snapshot.status.value}) over {window_days} days"
		)
		return snapshot

	async def get_users_needing_attention(
		self,
		now: datetime | None = None,
	) -> list[PerformanceSnapshot]:
		"""
		Latest recent snapshot per operator whose status is warning, critical
		or inactive; worst score first.
		"""
		now = now or utc_now()
		since = now - timedelta(days=self.settings.attention_lookback_days)

		stmt = (
			select(OperatorPerformance)
			.where(OperatorPerformance.period_end >= since)
			.order_by(OperatorPerformance.user_id, OperatorPerformance.period_end.desc())
		)
		rows = (await self.session.execute(stmt)).scalars().all()

		latest: dict[str, OperatorPerformance] = {}
		for row in rows:
			latest.setdefault(row.user_id, row)

		flagged = [
			row.to_snapshot() for row in latest.values()
			if PerformanceStatus(row.status) in ATTENTION_STATUSES
		]
		flagged.sort(key=lambda s: (s.performance_score, s.user_id))
		return flagged

	async def list_user_history(self, user_id: str, limit: int = 30) -> Sequence[OperatorPerformance]:
		stmt = (
			select(OperatorPerformance)
			.where(OperatorPerformance.user_id == user_id)
			.order_by(OperatorPerformance.period_end.desc())
			.limit(limit)
		)
		return (await self.session.execute(stmt)).scalars().all()

	async def run_performance_check(
		self,
		window_days: int | None = None,
		now: datetime | None = None,
	) -> dict:
		"""Score every active operator and log an alert summary for admins."""
		now = now or utc_now()
		operators = await get_users_by_role(self.session, UserRole.OPERATOR)
		operator_ids = [op.id for op in operators]
		logger.info(f"Checking performance of {len(operator_ids)} operators")

		counts = {status.value: 0 for status in PerformanceStatus}
		for operator_id in operator_ids:
			snapshot = await self.compute_operator_performance(
				operator_id, window_days=window_days, now=now
			)
			counts[snapshot.status.value] += 1

		flagged = await self.get_users_needing_attention(now=now)
		if flagged:
			admins = await get_users_by_role(self.session, UserRole.ADMIN)
			if not admins:
				logger.warning("No admin users found to notify about operator performance issues")
			for admin in admins:
				logger.warning(
					f"Performance alert for {admin.username}: "
					f"{counts[PerformanceStatus.CRITICAL.value]} critical, "
					f"{counts[PerformanceStatus.WARNING.value]} warning, "
					f"{counts[PerformanceStatus.INACTIVE.value]} inactive operators"
				)

		summary = {
			"checked": len(operator_ids),
			"needing_attention": len(flagged),
			**counts,
		}
		logger.info(f"Operator performance check finished: {summary}")
		return summary
