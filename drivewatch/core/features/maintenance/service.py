# (c) Copyright Datacraft, 2026
"""Maintenance records, their checklists, and follow-up work for failed inspections."""
import logging
from datetime import datetime
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_extensions import uuid7str

from drivewatch.core.db.unit_of_work import UnitOfWork
from drivewatch.core.exceptions import ChecklistDrivenStatus, NotFound
from drivewatch.core.features.assets.db.orm import Drive
from drivewatch.core.features.assets.lookup import AssetLookup, TargetType
from drivewatch.core.features.inspections.db.api import InspectionDB
from drivewatch.core.features.inspections.db.orm import Inspection
from drivewatch.core.features.inspections.models import InspectionStatus
from drivewatch.core.features.inspections.rollup import compute_rollup
from drivewatch.core.utils.tz import utc_now
from .checklist import (
	Checklist,
	ChecklistItem,
	ChecklistStats,
	MaintenanceStatus,
	checklist_stats,
)
from .db.orm import Maintenance
from .views import MaintenanceCreate

logger = logging.getLogger(__name__)

FOLLOW_UP_CHECKLIST = (
	"Review and fix issues identified in inspection: {name}",
	"Verify all inspection criteria are met",
	"Schedule follow-up inspection if required",
)


class MaintenanceService:

	def __init__(self, session: AsyncSession):
		self.session = session

	async def _lock(self, maintenance_id: str) -> Maintenance:
		stmt = (
			select(Maintenance)
			.where(Maintenance.id == maintenance_id)
			.with_for_update()
			.execution_options(populate_existing=True)
		)
		maintenance = (await self.session.execute(stmt)).scalar_one_or_none()
		if maintenance is None:
			raise NotFound("Maintenance", maintenance_id)
		return maintenance

	async def get_maintenance(self, maintenance_id: str) -> Maintenance:
		maintenance = await self.session.get(Maintenance, maintenance_id)
		if maintenance is None:
			raise NotFound("Maintenance", maintenance_id)
		return maintenance

	async def list_maintenance(
		self,
		drive_id: str | None = None,
		status: MaintenanceStatus | None = None,
	) -> Sequence[Maintenance]:
		stmt = select(Maintenance)
		if drive_id is not None:
			stmt = stmt.where(Maintenance.drive_id == drive_id)
		if status is not None:
			stmt = stmt.where(Maintenance.status == status.value)
		stmt = stmt.order_by(Maintenance.maintenance_date.desc())
		return (await self.session.execute(stmt)).scalars().all()

	async def create_maintenance(
		self,
		data: MaintenanceCreate,
		user_id: str | None = None,
	) -> Maintenance:
		checklist = Checklist()
		for text in data.checklist:
			checklist.add_item(text)

		maintenance = Maintenance(
			id=uuid7str(),
			drive_id=data.drive_id,
			title=data.title,
			description=data.description,
			maintenance_date=data.maintenance_date or utc_now(),
			technician=data.technician,
			status=checklist.derive_status(data.status.value).value,
			cost=data.cost,
			user_id=user_id,
			checklist_json=checklist.to_json() if checklist.items else None,
			created_from_inspection=False,
		)
		async with UnitOfWork(self.session) as uow:
			self.session.add(maintenance)
			await uow.commit()
		logger.info(f"Created maintenance {maintenance.id} '{maintenance.title}'")
		return maintenance

	def _store(self, maintenance: Maintenance, checklist: Checklist) -> None:
		# Assign a new list so the JSON column is flagged as changed
		maintenance.checklist_json = checklist.to_json()
		new_status = checklist.derive_status(maintenance.status)
		if new_status.value != maintenance.status:
			logger.info(
				f"Maintenance {maintenance.id} status follows checklist: "
				f"{maintenance.status} -> {new_status.value}"
			)
			maintenance.status = new_status.value

	async def add_checklist_item(
		self,
		maintenance_id: str,
		text: str,
		status: str = "pending",
		notes: str | None = None,
	) -> tuple[Maintenance, ChecklistItem]:
		async with UnitOfWork(self.session) as uow:
			maintenance = await self._lock(maintenance_id)
			checklist = Checklist.load(maintenance.checklist_json)
			item = checklist.add_item(text, status=status, notes=notes)
			self._store(maintenance, checklist)
			await uow.commit()
		return maintenance, item

	async def update_checklist_item(
		self,
		maintenance_id: str,
		item_id: str,
		status: str | None = None,
		notes: str | None = None,
	) -> tuple[Maintenance, ChecklistItem]:
		async with UnitOfWork(self.session) as uow:
			maintenance = await self._lock(maintenance_id)
			checklist = Checklist.load(maintenance.checklist_json)
			item = checklist.update_item(item_id, status=status, notes=notes)
			self._store(maintenance, checklist)
			await uow.commit()
		return maintenance, item

	async def remove_checklist_item(self, maintenance_id: str, item_id: str) -> Maintenance:
		async with UnitOfWork(self.session) as uow:
			maintenance = await self._lock(maintenance_id)
			checklist = Checklist.load(maintenance.checklist_json)
			checklist.remove_item(item_id)
			self._store(maintenance, checklist)
			await uow.commit()
		return maintenance

	async def set_status(self, maintenance_id: str, status: MaintenanceStatus) -> Maintenance:
		"""Manual status change, only allowed while there is no checklist."""
		async with UnitOfWork(self.session) as uow:
			maintenance = await self._lock(maintenance_id)
			checklist = Checklist.load(maintenance.checklist_json)
			if checklist.items:
				raise ChecklistDrivenStatus(
					f"Maintenance {maintenance_id} has {len(checklist.items)} checklist items; "
					f"its status follows the checklist"
				)
			maintenance.status = MaintenanceStatus(status).value
			await uow.commit()
		return maintenance

	async def get_checklist_stats(self, maintenance_id: str) -> ChecklistStats:
		maintenance = await self.get_maintenance(maintenance_id)
		return checklist_stats(maintenance.checklist_json)

	async def create_for_failed_inspections(self, now: datetime | None = None) -> int:
		"""
		Raise a maintenance record for every failed inspection that has none.

		The record targets the drive of the first failing drive task. Failed
		inspections without such a task, or whose drive no longer exists, are
		skipped. Returns the number of records created.
		"""
		now = now or utc_now()
		inspection_db = InspectionDB(self.session)
		lookup = AssetLookup(self.session)

		covered = select(Maintenance.inspection_id).where(Maintenance.inspection_id.is_not(None))
		stmt = select(Inspection).where(
			Inspection.status == InspectionStatus.FAILED.value,
			Inspection.deleted_at.is_(None),
			Inspection.id.not_in(covered),
		).order_by(Inspection.completed_date)
		inspections = (await self.session.execute(stmt)).scalars().all()

		created = 0
		async with UnitOfWork(self.session) as uow:
			for inspection in inspections:
				latest = await inspection_db.latest_results(inspection.id)
				rollup = compute_rollup(inspection, latest)
				failing = {t.task_id for t in rollup.tasks if t.is_failing}

				drive, task = None, None
				for candidate in inspection.tasks:
					if candidate.id not in failing or candidate.target_type != TargetType.DRIVE.value:
						continue
					target = await lookup.resolve(candidate.target_type, candidate.target_id)
					if isinstance(target, Drive):
						drive, task = target, candidate
						break

				if drive is None:
					logger.warning(
						f"Failed inspection {inspection.id} has no failing task on an existing drive; "
						f"no maintenance created"
					)
					continue

				checklist = Checklist()
				for text in FOLLOW_UP_CHECKLIST:
					checklist.add_item(text.format(name=inspection.name))
				result = latest.get(task.id)

				self.session.add(Maintenance(
					id=uuid7str(),
					drive_id=drive.id,
					title=f"Maintenance Required - {inspection.name}",
					description=(
						f"Automatic maintenance created due to failed inspection: "
						f"{inspection.name}. Drive: {drive.name}"
					),
					maintenance_date=now,
					status=MaintenanceStatus.PENDING.value,
					user_id=inspection.completed_by or inspection.assigned_to,
					checklist_json=checklist.to_json(),
					created_from_inspection=True,
					inspection_id=inspection.id,
					inspection_task_id=task.id,
					inspection_result_id=result.id if result is not None else None,
				))
				created += 1
				logger.info(
					f"Created maintenance for failed inspection {inspection.id} on drive {drive.id}"
				)
			await uow.commit()

		logger.info(f"Maintenance for failed inspections: {created} records created")
		return created
