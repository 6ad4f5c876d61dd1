# (c) Copyright Datacraft, 2026
"""
Inspection service.

Entry points used by the router and by the scheduler tasks. Every mutation
runs in one unit of work: the owning inspection row is locked, the engine
applies the change, and the rollup runs right before COMMIT.
"""
import logging
from datetime import date, datetime
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from uuid_extensions import uuid7str

from drivewatch.core.db.unit_of_work import UnitOfWork
from drivewatch.core.exceptions import (
	NotFound,
	ValidationError,
)
from drivewatch.core.features.assets.lookup import TargetType
from drivewatch.core.utils.tz import as_naive_utc, utc_now
from .db.api import InspectionDB
from .db.orm import (
	Inspection,
	InspectionResult,
	InspectionSubTask,
	InspectionTask,
	InspectionTemplate,
	TemplateSubTask,
	TemplateTask,
)
from .engine import InspectionEngine
from .expiry import mark_expired_inspections
from .models import (
	InspectionStatus,
	PRE_ACTIVE_STATUSES,
	SubTaskStatus,
)
from .rollup import apply_rollup, compute_rollup, refresh_rollup, schedule_rollup
from .scheduling import generate_scheduled_inspections
from .subtasks import SubTaskEngine
from .task_engine import TaskEngine
from .validation import Expectation
from .views import (
	InspectionCreate,
	ScheduleUpdate,
	SubTaskCreate,
	TaskCreate,
	TemplateCreate,
)

logger = logging.getLogger(__name__)


def _check_target(target_type: str | None, target_id: str | None) -> tuple[str | None, str | None]:
	if target_type is None:
		return None, None
	try:
		target_type = TargetType(target_type)
	except ValueError:
		raise ValidationError(f"Unknown target type '{target_type}'")
	if target_type == TargetType.NONE:
		return TargetType.NONE.value, None
	if not target_id:
		raise ValidationError(f"A {target_type.value} target needs a target_id")
	return target_type.value, target_id


def _new_sub_task(data: SubTaskCreate, position: int) -> InspectionSubTask:
	sub_task = InspectionSubTask(
		id=uuid7str(),
		name=data.name,
		description=data.description,
		status=SubTaskStatus.PENDING.value,
		sort_order=data.sort_order if data.sort_order is not None else position,
	)
	sub_task.expectation = data.to_expectation()
	return sub_task


def _new_task(data: TaskCreate, position: int) -> InspectionTask:
	target_type, target_id = _check_target(data.target_type, data.target_id)
	task = InspectionTask(
		id=uuid7str(),
		name=data.name,
		description=data.description,
		target_type=target_type,
		target_id=target_id,
		required=data.required,
		sort_order=data.sort_order if data.sort_order is not None else position,
		sub_tasks=[],
	)
	task.expectation = data.to_expectation()
	for index, sub_data in enumerate(data.sub_tasks):
		task.sub_tasks.append(_new_sub_task(sub_data, index))
	return task


def _new_template_task(data: TaskCreate, position: int) -> TemplateTask:
	target_type, target_id = _check_target(data.target_type, data.target_id)
	task = TemplateTask(
		id=uuid7str(),
		name=data.name,
		description=data.description,
		target_type=target_type,
		target_id=target_id,
		required=data.required,
		sort_order=data.sort_order if data.sort_order is not None else position,
		sub_tasks=[],
	)
	task.expectation = data.to_expectation()
	for index, sub_data in enumerate(data.sub_tasks):
		sub_task = TemplateSubTask(
			id=uuid7str(),
			name=sub_data.name,
			description=sub_data.description,
			sort_order=sub_data.sort_order if sub_data.sort_order is not None else index,
		)
		sub_task.expectation = sub_data.to_expectation()
		task.sub_tasks.append(sub_task)
	return task


class InspectionService:
	"""Operations on inspections, templates, tasks and sub-tasks."""

	def __init__(self, session: AsyncSession):
		self.session = session
		self.db = InspectionDB(session)

	# --- Loading helpers ---

	async def _lock(self, inspection_id: str) -> Inspection:
		inspection = await self.db.lock_inspection(inspection_id)
		if inspection is None:
			raise NotFound("Inspection", inspection_id)
		return inspection

	async def _lock_task(self, task_id: str) -> tuple[Inspection, InspectionTask]:
		inspection_id = await self.db.get_inspection_id_for_task(task_id)
		if inspection_id is None:
			raise NotFound("Task", task_id)
		inspection = await self._lock(inspection_id)
		for task in inspection.tasks:
			if task.id == task_id:
				return inspection, task
		raise NotFound("Task", task_id)

	async def _lock_sub_task(self, sub_task_id: str) -> tuple[Inspection, InspectionSubTask]:
		inspection_id = await self.db.get_inspection_id_for_sub_task(sub_task_id)
		if inspection_id is None:
			raise NotFound("SubTask", sub_task_id)
		inspection = await self._lock(inspection_id)
		for task in inspection.tasks:
			for sub_task in task.sub_tasks:
				if sub_task.id == sub_task_id:
					return inspection, sub_task
		raise NotFound("SubTask", sub_task_id)

	# --- Reads ---

	async def get_inspection(self, inspection_id: str) -> Inspection:
		inspection = await self.db.get_inspection(inspection_id)
		if inspection is None:
			raise NotFound("Inspection", inspection_id)
		return inspection

	async def list_inspections(
		self,
		assigned_to: str | None = None,
		status: InspectionStatus | None = None,
		limit: int = 100,
		offset: int = 0,
	) -> Sequence[Inspection]:
		return await self.db.get_inspections(
			assigned_to=assigned_to, status=status, limit=limit, offset=offset
		)

	async def task_result_history(self, task_id: str) -> Sequence[InspectionResult]:
		if await self.db.get_task(task_id) is None:
			raise NotFound("Task", task_id)
		return await self.db.result_history(task_id)

	async def latest_task_result(self, task_id: str) -> InspectionResult | None:
		if await self.db.get_task(task_id) is None:
			raise NotFound("Task", task_id)
		return await self.db.latest_result(task_id)

	# --- Creation ---

	async def create_template(
		self,
		data: TemplateCreate,
		created_by: str | None = None,
	) -> InspectionTemplate:
		if data.end_date is not None and data.end_date < data.start_date:
			raise ValidationError(
				f"end_date {data.end_date.isoformat()} is before "
				f"start_date {data.start_date.isoformat()}"
			)

		template = InspectionTemplate(
			id=uuid7str(),
			name=data.name,
			description=data.description,
			frequency=data.frequency.value,
			start_date=data.start_date,
			end_date=data.end_date,
			assigned_to=data.assigned_to,
			created_by=created_by,
			is_active=True,
			tasks=[_new_template_task(t, i) for i, t in enumerate(data.tasks)],
		)
		async with UnitOfWork(self.session) as uow:
			self.session.add(template)
			await uow.commit()

		logger.info(
			f"Created {template.frequency} template {template.id} '{template.name}' "
			f"with {len(template.tasks)} tasks"
		)
		return template

	async def create_inspection(
		self,
		data: InspectionCreate,
		created_by: str | None = None,
	) -> Inspection:
		"""Create an ad hoc inspection. It starts as draft or pending."""
		status = InspectionStatus(data.status)
		if status not in PRE_ACTIVE_STATUSES:
			raise ValidationError(
				f"New inspections start as draft or pending, not '{status.value}'"
			)

		inspection = Inspection(
			id=uuid7str(),
			name=data.name,
			description=data.description,
			status=status.value,
			created_by=created_by,
			assigned_to=data.assigned_to,
			scheduled_date=data.scheduled_date,
			expiry_date=as_naive_utc(data.expiry_date) if data.expiry_date else None,
			notes=data.notes,
			is_expired=False,
			performance_penalty=0,
			tasks=[_new_task(t, i) for i, t in enumerate(data.tasks)],
		)
		apply_rollup(inspection, compute_rollup(inspection, {}))

		async with UnitOfWork(self.session) as uow:
			self.session.add(inspection)
			await uow.commit()

		logger.info(f"Created inspection {inspection.id} '{inspection.name}' ({status.value})")
		return inspection

	async def add_task(self, inspection_id: str, data: TaskCreate) -> InspectionTask:
		async with UnitOfWork(self.session) as uow:
			inspection = await self._lock(inspection_id)
			InspectionEngine(inspection).ensure_schedule_editable()

			task = _new_task(data, len(inspection.tasks))
			inspection.tasks.append(task)
			schedule_rollup(uow, inspection.id)
			await uow.commit()
		return task

	async def add_sub_task(self, task_id: str, data: SubTaskCreate) -> InspectionSubTask:
		async with UnitOfWork(self.session) as uow:
			inspection, task = await self._lock_task(task_id)
			InspectionEngine(inspection).ensure_schedule_editable()

			sub_task = _new_sub_task(data, len(task.sub_tasks))
			task.sub_tasks.append(sub_task)
			schedule_rollup(uow, inspection.id)
			await uow.commit()
		return sub_task

	# --- Recording ---

	async def record_sub_task_result(
		self,
		sub_task_id: str,
		kind: str,
		boolean_value: bool | None = None,
		numeric_value: float | None = None,
		notes: str | None = None,
		performed_by: str | None = None,
		as_editor: bool = False,
	) -> InspectionSubTask:
		async with UnitOfWork(self.session) as uow:
			inspection, sub_task = await self._lock_sub_task(sub_task_id)
			InspectionEngine(inspection).ensure_editable(as_editor=as_editor)
			SubTaskEngine(sub_task, inspection, uow).record_result(
				kind,
				performed_by=performed_by,
				boolean_value=boolean_value,
				numeric_value=numeric_value,
				notes=notes,
			)
			await uow.commit()
		return sub_task

	async def toggle_sub_task_status(
		self,
		sub_task_id: str,
		performed_by: str | None = None,
		as_editor: bool = False,
	) -> InspectionSubTask:
		async with UnitOfWork(self.session) as uow:
			inspection, sub_task = await self._lock_sub_task(sub_task_id)
			InspectionEngine(inspection).ensure_editable(as_editor=as_editor)
			SubTaskEngine(sub_task, inspection, uow).toggle(performed_by)
			await uow.commit()
		return sub_task

	async def reset_sub_task(
		self,
		sub_task_id: str,
		as_editor: bool = False,
	) -> InspectionSubTask:
		async with UnitOfWork(self.session) as uow:
			inspection, sub_task = await self._lock_sub_task(sub_task_id)
			InspectionEngine(inspection).ensure_editable(as_editor=as_editor)
			SubTaskEngine(sub_task, inspection, uow).reset_to_pending()
			await uow.commit()
		return sub_task

	async def record_task_result(
		self,
		task_id: str,
		boolean_value: bool | None = None,
		numeric_value: float | None = None,
		notes: str | None = None,
		performed_by: str | None = None,
	) -> InspectionResult:
		async with UnitOfWork(self.session) as uow:
			inspection, task = await self._lock_task(task_id)
			InspectionEngine(inspection).ensure_editable()
			result = await TaskEngine(task, inspection, uow).record_result(
				performed_by=performed_by,
				boolean_value=boolean_value,
				numeric_value=numeric_value,
				notes=notes,
			)
			await uow.commit()
		return result

	async def update_task_expectation(
		self,
		task_id: str,
		expectation: Expectation,
	) -> InspectionTask:
		async with UnitOfWork(self.session) as uow:
			inspection, task = await self._lock_task(task_id)
			InspectionEngine(inspection).ensure_schedule_editable()
			await TaskEngine(task, inspection, uow).update_expectation(expectation)
			await uow.commit()
		return task

	async def reorder_sub_tasks(self, task_id: str, ordered_ids: list[str]) -> InspectionTask:
		async with UnitOfWork(self.session) as uow:
			inspection, task = await self._lock_task(task_id)
			InspectionEngine(inspection).ensure_schedule_editable()

			by_id = {s.id: s for s in task.sub_tasks}
			if len(set(ordered_ids)) != len(ordered_ids) or set(ordered_ids) != set(by_id):
				raise ValidationError(
					f"Sub-task order for task '{task.name}' must list each of its "
					f"{len(by_id)} sub-tasks exactly once"
				)
			for position, sub_task_id in enumerate(ordered_ids):
				by_id[sub_task_id].sort_order = position
			await uow.commit()
		return task

	# --- Lifecycle ---

	async def activate_inspection(self, inspection_id: str) -> Inspection:
		async with UnitOfWork(self.session) as uow:
			inspection = await self._lock(inspection_id)
			InspectionEngine(inspection).activate()
			await uow.commit()
		return inspection

	async def complete_inspection(
		self,
		inspection_id: str,
		completed_by: str | None = None,
	) -> Inspection:
		async with UnitOfWork(self.session) as uow:
			inspection = await self._lock(inspection_id)
			rollup = await refresh_rollup(self.session, inspection.id)
			InspectionEngine(inspection).complete(rollup, completed_by)
			await uow.commit()
		return inspection

	async def archive_inspection(self, inspection_id: str) -> Inspection:
		async with UnitOfWork(self.session) as uow:
			inspection = await self._lock(inspection_id)
			InspectionEngine(inspection).archive()
			await uow.commit()
		return inspection

	async def update_schedule(self, inspection_id: str, data: ScheduleUpdate) -> Inspection:
		async with UnitOfWork(self.session) as uow:
			inspection = await self._lock(inspection_id)
			InspectionEngine(inspection).update_schedule(
				scheduled_date=data.scheduled_date,
				expiry_date=as_naive_utc(data.expiry_date) if data.expiry_date else None,
				assigned_to=data.assigned_to,
			)
			await uow.commit()
		return inspection

	async def delete_inspection(self, inspection_id: str) -> None:
		"""Hide an inspection; its tasks and results stay for history."""
		async with UnitOfWork(self.session) as uow:
			inspection = await self._lock(inspection_id)
			inspection.deleted_at = utc_now()
			await uow.commit()
		logger.info(f"Inspection {inspection_id} soft-deleted")

	# --- Scheduler entry points ---

	async def generate_scheduled_inspections(self, as_of: date) -> int:
		return await generate_scheduled_inspections(self.session, as_of)

	async def mark_expired(self, now: datetime | None = None) -> int:
		return await mark_expired_inspections(self.session, now)
