# (c) Copyright Datacraft, 2026
"""
Maintenance service tests.
"""
from datetime import datetime

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from drivewatch.core.exceptions import ChecklistDrivenStatus, NotFound, ValidationError
from drivewatch.core.features.inspections.models import InspectionStatus
from drivewatch.core.features.maintenance.checklist import MaintenanceStatus
from drivewatch.core.features.maintenance.db.orm import Maintenance
from drivewatch.core.features.maintenance.service import MaintenanceService
from drivewatch.core.features.maintenance.views import MaintenanceCreate


async def test_create_with_checklist(
	db_session: AsyncSession,
	user,
):
	maintenance = await MaintenanceService(db_session).create_maintenance(
		MaintenanceCreate(title="Replace belt", checklist=["Lock out drive", "Swap belt"]),
		user_id=user.id,
	)

	assert maintenance.status == MaintenanceStatus.PENDING.value
	assert [i["text"] for i in maintenance.checklist_json] == ["Lock out drive", "Swap belt"]
	assert all(i["status"] == "pending" for i in maintenance.checklist_json)


async def test_checklist_progress_drives_status(
	db_session: AsyncSession,
	make_maintenance,
):
	maintenance = await make_maintenance()
	service = MaintenanceService(db_session)

	maintenance, first = await service.add_checklist_item(maintenance.id, "Lock out drive")
	maintenance, second = await service.add_checklist_item(maintenance.id, "Swap belt")
	assert maintenance.status == MaintenanceStatus.PENDING.value

	maintenance, _ = await service.update_checklist_item(maintenance.id, first.id, status="completed")
	assert maintenance.status == MaintenanceStatus.IN_PROGRESS.value

	maintenance, _ = await service.update_checklist_item(maintenance.id, second.id, status="completed")
	assert maintenance.status == MaintenanceStatus.COMPLETED.value

	stats = await service.get_checklist_stats(maintenance.id)
	assert (stats.total, stats.completed, stats.completion_percentage) == (2, 2, 100)


async def test_manual_status_rejected_while_checklist_exists(
	db_session: AsyncSession,
	make_maintenance,
):
	maintenance = await make_maintenance(
		checklist_json=[{"id": "1", "text": "Swap belt", "status": "pending"}]
	)
	maintenance_id = maintenance.id

	with pytest.raises(ChecklistDrivenStatus):
		await MaintenanceService(db_session).set_status(maintenance_id, MaintenanceStatus.COMPLETED)


async def test_manual_status_without_checklist(
	db_session: AsyncSession,
	make_maintenance,
):
	maintenance = await make_maintenance()

	result = await MaintenanceService(db_session).set_status(maintenance.id, MaintenanceStatus.IN_PROGRESS)

	assert result.status == MaintenanceStatus.IN_PROGRESS.value


async def test_malformed_checklist_is_rejected_for_edits(
	db_session: AsyncSession,
	make_maintenance,
):
	maintenance = await make_maintenance(checklist_json={"id": 1})
	maintenance_id = maintenance.id
	service = MaintenanceService(db_session)

	stats = await service.get_checklist_stats(maintenance_id)
	assert stats.total == 0

	with pytest.raises(ValidationError):
		await service.add_checklist_item(maintenance_id, "Swap belt")


async def test_update_unknown_item(
	db_session: AsyncSession,
	make_maintenance,
):
	maintenance = await make_maintenance(
		checklist_json=[{"id": "1", "text": "Swap belt", "status": "pending"}]
	)
	maintenance_id = maintenance.id

	with pytest.raises(NotFound):
		await MaintenanceService(db_session).update_checklist_item(maintenance_id, "2", status="completed")


async def test_maintenance_created_for_failed_inspection(
	db_session: AsyncSession,
	make_drive,
	make_failed_inspection,
	user,
):
	drive = await make_drive()
	inspection = await make_failed_inspection(target_id=drive.id)
	assert inspection.status == InspectionStatus.FAILED.value
	now = datetime(2024, 3, 15, 12, 0)
	service = MaintenanceService(db_session)

	assert await service.create_for_failed_inspections(now=now) == 1
	assert await service.create_for_failed_inspections(now=now) == 0

	records = (await db_session.execute(select(Maintenance))).scalars().all()
	assert len(records) == 1
	record = records[0]
	assert record.title == "Maintenance Required - Weekly Drive Check"
	assert record.drive_id == drive.id
	assert record.inspection_id == inspection.id
	assert record.inspection_task_id == inspection.tasks[0].id
	assert record.inspection_result_id is not None
	assert record.created_from_inspection is True
	assert record.user_id == user.id
	assert record.maintenance_date == now
	assert [i["text"] for i in record.checklist_json] == [
		"Review and fix issues identified in inspection: Weekly Drive Check",
		"Verify all inspection criteria are met",
		"Schedule follow-up inspection if required",
	]


async def test_failed_inspection_with_dangling_drive_is_skipped(
	db_session: AsyncSession,
	make_failed_inspection,
):
	await make_failed_inspection(target_id="drive-that-was-deleted")

	assert await MaintenanceService(db_session).create_for_failed_inspections() == 0


async def test_failed_inspection_without_drive_target_is_skipped(
	db_session: AsyncSession,
	make_failed_inspection,
):
	await make_failed_inspection(target_type="none")

	assert await MaintenanceService(db_session).create_for_failed_inspections() == 0
