# (c) Copyright Datacraft, 2026
"""Database operations for inspections, their task trees and result log."""
from datetime import date
from typing import Sequence

from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from uuid_extensions import uuid7str

from .orm import (
	Inspection, InspectionTemplate, InspectionTask, InspectionSubTask,
	InspectionResult, TemplateTask,
)
from ..models import InspectionStatus


class InspectionDB:
	"""Database operations for inspections."""

	def __init__(self, session: AsyncSession):
		self.session = session

	# --- Inspections ---

	async def get_inspection(self, inspection_id: str) -> Inspection | None:
		stmt = select(Inspection).where(
			Inspection.id == inspection_id,
			Inspection.deleted_at.is_(None),
		)
		result = await self.session.execute(stmt)
		return result.scalar_one_or_none()

	async def lock_inspection(self, inspection_id: str) -> Inspection | None:
		"""
		Load the inspection with its whole task tree and take a row lock.

		All recordings within one inspection go through this lock, so sibling
		sub-task writes and the rollup that follows them serialize.
		"""
		stmt = (
			select(Inspection)
			.where(Inspection.id == inspection_id, Inspection.deleted_at.is_(None))
			.options(
				selectinload(Inspection.tasks).selectinload(InspectionTask.sub_tasks)
			)
			.with_for_update()
			.execution_options(populate_existing=True)
		)
		result = await self.session.execute(stmt)
		return result.scalar_one_or_none()

	async def get_inspections(
		self,
		assigned_to: str | None = None,
		status: InspectionStatus | None = None,
		include_deleted: bool = False,
		limit: int = 100,
		offset: int = 0,
	) -> Sequence[Inspection]:
		query = select(Inspection)
		conditions = []

		if assigned_to is not None:
			conditions.append(Inspection.assigned_to == assigned_to)
		if status is not None:
			conditions.append(Inspection.status == status.value)
		if not include_deleted:
			conditions.append(Inspection.deleted_at.is_(None))

		if conditions:
			query = query.where(and_(*conditions))

		query = query.order_by(Inspection.created_at.desc()).limit(limit).offset(offset)
		result = await self.session.execute(query)
		return result.scalars().all()

	async def get_inspections_by_status(
		self,
		statuses: Sequence[InspectionStatus],
	) -> Sequence[Inspection]:
		stmt = select(Inspection).where(
			Inspection.status.in_([s.value for s in statuses]),
			Inspection.deleted_at.is_(None),
		).order_by(Inspection.created_at)
		result = await self.session.execute(stmt)
		return result.scalars().all()

	# --- Tree lookups ---

	async def get_task(self, task_id: str) -> InspectionTask | None:
		return await self.session.get(InspectionTask, task_id)

	async def get_inspection_id_for_task(self, task_id: str) -> str | None:
		stmt = select(InspectionTask.inspection_id).where(InspectionTask.id == task_id)
		return await self.session.scalar(stmt)

	async def get_inspection_id_for_sub_task(self, sub_task_id: str) -> str | None:
		stmt = (
			select(InspectionTask.inspection_id)
			.join(InspectionSubTask, InspectionSubTask.task_id == InspectionTask.id)
			.where(InspectionSubTask.id == sub_task_id)
		)
		return await self.session.scalar(stmt)

	# --- Result log ---

	async def latest_result(self, task_id: str) -> InspectionResult | None:
		"""The current answer for a task: highest sequence wins."""
		stmt = (
			select(InspectionResult)
			.where(InspectionResult.task_id == task_id)
			.order_by(InspectionResult.sequence.desc())
			.limit(1)
		)
		result = await self.session.execute(stmt)
		return result.scalar_one_or_none()

	async def latest_results(self, inspection_id: str) -> dict[str, InspectionResult]:
		"""Current answer per task for a whole inspection."""
		latest = (
			select(
				InspectionResult.task_id,
				func.max(InspectionResult.sequence).label("max_sequence"),
			)
			.where(InspectionResult.inspection_id == inspection_id)
			.group_by(InspectionResult.task_id)
			.subquery()
		)
		stmt = select(InspectionResult).join(
			latest,
			and_(
				InspectionResult.task_id == latest.c.task_id,
				InspectionResult.sequence == latest.c.max_sequence,
			),
		)
		result = await self.session.execute(stmt)
		return {r.task_id: r for r in result.scalars().all()}

	async def result_history(self, task_id: str) -> Sequence[InspectionResult]:
		"""Full audit trail for a task, oldest first."""
		stmt = (
			select(InspectionResult)
			.where(InspectionResult.task_id == task_id)
			.order_by(InspectionResult.sequence)
		)
		result = await self.session.execute(stmt)
		return result.scalars().all()

	async def append_result(
		self,
		task: InspectionTask,
		performed_by: str | None,
		value_boolean: bool | None,
		value_numeric: float | None,
		is_passing: bool,
		notes: str | None = None,
	) -> InspectionResult:
		current = await self.session.scalar(
			select(func.max(InspectionResult.sequence)).where(
				InspectionResult.task_id == task.id
			)
		)
		entry = InspectionResult(
			id=uuid7str(),
			inspection_id=task.inspection_id,
			task_id=task.id,
			performed_by=performed_by,
			value_boolean=value_boolean,
			value_numeric=value_numeric,
			is_passing=is_passing,
			notes=notes,
			sequence=(current or 0) + 1,
		)
		self.session.add(entry)
		await self.session.flush()
		return entry

	# --- Templates ---

	async def get_template(self, template_id: str) -> InspectionTemplate | None:
		stmt = (
			select(InspectionTemplate)
			.where(InspectionTemplate.id == template_id)
			.options(
				selectinload(InspectionTemplate.tasks).selectinload(TemplateTask.sub_tasks)
			)
			.execution_options(populate_existing=True)
		)
		result = await self.session.execute(stmt)
		return result.scalar_one_or_none()

	async def get_active_templates(self) -> Sequence[InspectionTemplate]:
		stmt = (
			select(InspectionTemplate)
			.where(InspectionTemplate.is_active.is_(True))
			.options(
				selectinload(InspectionTemplate.tasks).selectinload(TemplateTask.sub_tasks)
			)
			.order_by(InspectionTemplate.created_at)
		)
		result = await self.session.execute(stmt)
		return result.scalars().all()

	async def instance_exists(self, template_id: str, on_date: date | None = None) -> bool:
		"""Whether the template already spawned an instance (on a given date)."""
		stmt = select(func.count(Inspection.id)).where(Inspection.template_id == template_id)
		if on_date is not None:
			stmt = stmt.where(Inspection.scheduled_date == on_date)
		count = await self.session.scalar(stmt)
		return bool(count)
