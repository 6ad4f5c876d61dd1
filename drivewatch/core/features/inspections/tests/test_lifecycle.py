# (c) Copyright Datacraft, 2026
"""
Inspection state machine tests: completion, edit guards, archiving.
"""
from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from drivewatch.core.exceptions import (
	IllegalTransition,
	InspectionNotActive,
	MissingRequiredTasks,
	TerminalInspection,
)
from drivewatch.core.features.inspections.models import InspectionStatus
from drivewatch.core.features.inspections.service import InspectionService
from drivewatch.core.features.inspections.validation import Expectation
from drivewatch.core.features.inspections.views import ScheduleUpdate


async def test_complete_requires_active_inspection(
	db_session: AsyncSession,
	make_inspection,
	user,
):
	user_id = user.id
	inspection = await make_inspection(status=InspectionStatus.DRAFT)
	inspection_id = inspection.id

	with pytest.raises(InspectionNotActive):
		await InspectionService(db_session).complete_inspection(inspection_id, completed_by=user_id)


async def test_complete_blocked_by_required_tasks_without_result(
	db_session: AsyncSession,
	make_inspection,
	make_task,
	user,
):
	user_id = user.id
	inspection = await make_inspection()
	await make_task(inspection, name="Check oil level")
	await make_task(inspection, name="Inspect belt", required=False)
	inspection_id = inspection.id

	with pytest.raises(MissingRequiredTasks) as exc_info:
		await InspectionService(db_session).complete_inspection(inspection_id, completed_by=user_id)

	assert exc_info.value.task_names == ["Check oil level"]
	await db_session.refresh(inspection)
	assert inspection.status == InspectionStatus.ACTIVE.value
	assert inspection.completed_by is None


async def test_complete_with_all_required_passing(
	db_session: AsyncSession,
	make_inspection,
	make_task,
	user,
):
	inspection = await make_inspection()
	task = await make_task(inspection, expectation=Expectation.yes_no(True))
	# optional tasks without a result never block completion
	await make_task(inspection, name="Inspect belt", required=False)
	service = InspectionService(db_session)

	await service.record_task_result(task.id, boolean_value=True, performed_by=user.id)
	result = await service.complete_inspection(inspection.id, completed_by=user.id)

	assert result.status == InspectionStatus.COMPLETED.value
	assert result.completed_by == user.id
	assert isinstance(result.completed_date, datetime)


async def test_required_failing_task_fails_inspection(
	db_session: AsyncSession,
	make_inspection,
	make_task,
	user,
):
	inspection = await make_inspection()
	task = await make_task(inspection, expectation=Expectation.numeric(10, 20))
	service = InspectionService(db_session)

	await service.record_task_result(task.id, numeric_value=5, performed_by=user.id)
	result = await service.complete_inspection(inspection.id, completed_by=user.id)

	assert result.status == InspectionStatus.FAILED.value
	assert result.failing_items == 1


async def test_optional_failing_task_does_not_fail_inspection(
	db_session: AsyncSession,
	make_inspection,
	make_task,
	user,
):
	inspection = await make_inspection()
	required = await make_task(inspection, expectation=Expectation.yes_no(True))
	optional = await make_task(inspection, name="Paint condition", expectation=Expectation.yes_no(True), required=False)
	service = InspectionService(db_session)

	await service.record_task_result(required.id, boolean_value=True, performed_by=user.id)
	await service.record_task_result(optional.id, boolean_value=False, performed_by=user.id)
	result = await service.complete_inspection(inspection.id, completed_by=user.id)

	assert result.status == InspectionStatus.COMPLETED.value


async def test_editor_correction_refreshes_counters_not_status(
	db_session: AsyncSession,
	make_inspection,
	make_task,
	make_sub_task,
	user,
):
	inspection = await make_inspection()
	task = await make_task(inspection)
	passing = await make_sub_task(task, name="Seal intact", expectation=Expectation.yes_no(True))
	service = InspectionService(db_session)

	await service.record_sub_task_result(passing.id, "yes_no", boolean_value=True, performed_by=user.id)
	await service.record_task_result(task.id, performed_by=user.id)
	await service.complete_inspection(inspection.id, completed_by=user.id)
	assert inspection.status == InspectionStatus.COMPLETED.value

	# an editor flips the sub-task after completion; the status stays put
	await service.record_sub_task_result(
		passing.id, "yes_no", boolean_value=False, performed_by=user.id, as_editor=True
	)
	assert inspection.status == InspectionStatus.COMPLETED.value
	assert inspection.failing_items == 1


async def test_terminal_inspection_rejects_results(
	db_session: AsyncSession,
	make_inspection,
	make_task,
	make_sub_task,
	user,
):
	user_id = user.id
	inspection = await make_inspection(status=InspectionStatus.COMPLETED)
	task = await make_task(inspection, expectation=Expectation.yes_no(True))
	sub_task = await make_sub_task(task, expectation=Expectation.yes_no(True))
	task_id, sub_task_id = task.id, sub_task.id
	service = InspectionService(db_session)

	with pytest.raises(TerminalInspection):
		await service.record_task_result(task_id, boolean_value=True, performed_by=user_id)
	with pytest.raises(TerminalInspection):
		await service.record_sub_task_result(sub_task_id, "yes_no", boolean_value=True, performed_by=user_id)


async def test_editor_can_correct_sub_task_on_terminal_inspection(
	db_session: AsyncSession,
	make_inspection,
	make_task,
	make_sub_task,
	editor,
):
	inspection = await make_inspection(status=InspectionStatus.FAILED)
	task = await make_task(inspection)
	sub_task = await make_sub_task(task, expectation=Expectation.yes_no(True))

	result = await InspectionService(db_session).record_sub_task_result(
		sub_task.id, "yes_no", boolean_value=True, performed_by=editor.id, as_editor=True
	)

	assert result.recorded_value_boolean is True
	assert inspection.status == InspectionStatus.FAILED.value


async def test_archived_inspection_rejects_editor_corrections(
	db_session: AsyncSession,
	make_inspection,
	make_task,
	make_sub_task,
	editor,
):
	editor_id = editor.id
	inspection = await make_inspection(status=InspectionStatus.ARCHIVED)
	task = await make_task(inspection)
	sub_task = await make_sub_task(task, expectation=Expectation.yes_no(True))
	sub_task_id = sub_task.id

	with pytest.raises(TerminalInspection):
		await InspectionService(db_session).record_sub_task_result(
			sub_task_id, "yes_no", boolean_value=True, performed_by=editor_id, as_editor=True
		)


async def test_archive_only_from_terminal(
	db_session: AsyncSession,
	make_inspection,
):
	active = await make_inspection()
	completed = await make_inspection(name="Done", status=InspectionStatus.COMPLETED)
	active_id = active.id
	service = InspectionService(db_session)

	result = await service.archive_inspection(completed.id)
	assert result.status == InspectionStatus.ARCHIVED.value

	with pytest.raises(IllegalTransition):
		await service.archive_inspection(active_id)


async def test_activate(
	db_session: AsyncSession,
	make_inspection,
):
	pending = await make_inspection(status=InspectionStatus.PENDING)
	failed = await make_inspection(name="Closed", status=InspectionStatus.FAILED)
	failed_id = failed.id
	service = InspectionService(db_session)

	result = await service.activate_inspection(pending.id)
	assert result.status == InspectionStatus.ACTIVE.value

	with pytest.raises(IllegalTransition):
		await service.activate_inspection(failed_id)


async def test_schedule_edit_rejected_on_terminal_inspection(
	db_session: AsyncSession,
	make_inspection,
):
	inspection = await make_inspection(status=InspectionStatus.COMPLETED)
	inspection_id = inspection.id

	with pytest.raises(TerminalInspection):
		await InspectionService(db_session).update_schedule(
			inspection_id, ScheduleUpdate(expiry_date=datetime(2030, 1, 1))
		)


async def test_new_expiry_clears_expired_flag(
	db_session: AsyncSession,
	make_inspection,
):
	inspection = await make_inspection(is_expired=True, expiry_date=datetime(2024, 1, 1))
	inspection.performance_penalty = 30
	await db_session.commit()

	result = await InspectionService(db_session).update_schedule(
		inspection.id, ScheduleUpdate(expiry_date=datetime(2030, 1, 1))
	)

	assert result.is_expired is False
	assert result.performance_penalty == 0
	assert result.expiry_date == datetime(2030, 1, 1)


async def test_soft_deleted_inspection_is_hidden(
	db_session: AsyncSession,
	make_inspection,
):
	inspection = await make_inspection()
	inspection_id = inspection.id
	service = InspectionService(db_session)

	await service.delete_inspection(inspection_id)

	assert list(await service.list_inspections()) == []
	assert inspection.deleted_at is not None
