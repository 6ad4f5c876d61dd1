# (c) Copyright Datacraft, 2026
"""
Inspection rollup.

Every task or sub-task mutation schedules a refresh of the cached counters on
the owning inspection. The refresh runs as a unit-of-work hook, inside the
same transaction and right before COMMIT, so counters never disagree with the
rows they summarize. A rollup never changes the inspection status.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from drivewatch.core.db.unit_of_work import UnitOfWork
from drivewatch.core.exceptions import NotFound
from .db.api import InspectionDB
from .db.orm import Inspection, InspectionResult
from .models import InspectionRollup, TaskRollup
from .validation import NON_COMPLIANT

logger = logging.getLogger(__name__)


def compute_rollup(
	inspection: Inspection,
	latest_results: dict[str, InspectionResult],
) -> InspectionRollup:
	"""Derive task and inspection counters from the loaded tree."""
	tasks = []
	for task in inspection.tasks:
		result = latest_results.get(task.id)
		tasks.append(TaskRollup(
			task_id=task.id,
			name=task.name,
			required=task.required,
			has_result=result is not None,
			result_passing=bool(result is not None and result.is_passing),
			subtasks_total=len(task.sub_tasks),
			subtasks_completed=sum(1 for s in task.sub_tasks if s.is_completed),
			subtasks_failing=sum(
				1 for s in task.sub_tasks if s.compliance in NON_COMPLIANT
			),
		))
	return InspectionRollup(tasks=tasks)


def apply_rollup(inspection: Inspection, rollup: InspectionRollup) -> None:
	inspection.tasks_total = rollup.tasks_total
	inspection.tasks_with_result = rollup.tasks_with_result
	inspection.required_total = rollup.required_total
	inspection.required_passing = rollup.required_passing
	inspection.subtasks_total = rollup.subtasks_total
	inspection.subtasks_completed = rollup.subtasks_completed
	inspection.failing_items = rollup.failing_items


async def refresh_rollup(session: AsyncSession, inspection_id: str) -> InspectionRollup:
	"""Recompute and store the counters of one inspection."""
	db = InspectionDB(session)
	inspection = await db.lock_inspection(inspection_id)
	if inspection is None:
		raise NotFound("Inspection", inspection_id)

	rollup = compute_rollup(inspection, await db.latest_results(inspection_id))
	apply_rollup(inspection, rollup)
	logger.debug(
		f"Rollup for inspection {inspection_id}: "
		f"{rollup.required_passing}/{rollup.required_total} required passing, "
		f"{rollup.subtasks_completed}/{rollup.subtasks_total} sub-tasks completed, "
		f"{rollup.failing_items} failing"
	)
	return rollup


def schedule_rollup(uow: UnitOfWork, inspection_id: str) -> None:
	"""Register the rollup of an inspection to run before the unit of work commits."""

	async def _hook(session: AsyncSession) -> None:
		await refresh_rollup(session, inspection_id)

	uow.before_commit(f"rollup:{inspection_id}", _hook)
