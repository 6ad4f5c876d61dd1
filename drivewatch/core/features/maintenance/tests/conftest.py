# (c) Copyright Datacraft, 2026
"""
Maintenance feature test fixtures.
"""
import pytest
from uuid_extensions import uuid7str
from sqlalchemy.ext.asyncio import AsyncSession

from drivewatch.core.features.assets.db.orm import Drive
from drivewatch.core.features.inspections.db.orm import Inspection
from drivewatch.core.features.inspections.service import InspectionService
from drivewatch.core.features.inspections.views import InspectionCreate, TaskCreate
from drivewatch.core.features.maintenance.checklist import MaintenanceStatus
from drivewatch.core.features.maintenance.db.orm import Maintenance


@pytest.fixture
async def make_drive(db_session: AsyncSession):
	"""Factory fixture for creating drives."""
	async def _make_drive(name: str = "Conveyor Drive 3", **kwargs) -> Drive:
		drive = Drive(
			id=uuid7str(),
			name=name,
			drive_ref=kwargs.get("drive_ref", f"DRV-{uuid7str()[-6:]}"),
			location=kwargs.get("location", "Hall B"),
		)
		db_session.add(drive)
		await db_session.commit()
		return drive

	return _make_drive


@pytest.fixture
async def make_maintenance(db_session: AsyncSession, user):
	"""Factory fixture for creating maintenance records with a raw checklist payload."""
	async def _make_maintenance(
		title: str = "Replace belt",
		checklist_json=None,
		status: MaintenanceStatus = MaintenanceStatus.PENDING,
		**kwargs,
	) -> Maintenance:
		maintenance = Maintenance(
			id=uuid7str(),
			drive_id=kwargs.get("drive_id"),
			title=title,
			status=status.value,
			user_id=user.id,
			checklist_json=checklist_json,
			created_from_inspection=False,
		)
		db_session.add(maintenance)
		await db_session.commit()
		return maintenance

	return _make_maintenance


@pytest.fixture
async def make_failed_inspection(db_session: AsyncSession, user):
	"""Create an inspection through the service and fail it on its first task."""
	async def _make_failed_inspection(
		target_type: str = "drive",
		target_id: str | None = None,
		name: str = "Weekly Drive Check",
	) -> Inspection:
		service = InspectionService(db_session)
		inspection = await service.create_inspection(
			InspectionCreate(
				name=name,
				assigned_to=user.id,
				tasks=[
					TaskCreate(
						name="Guard fitted",
						kind="yes_no",
						expected_value_boolean=True,
						target_type=target_type,
						target_id=target_id,
					),
				],
			),
			created_by=user.id,
		)
		task = inspection.tasks[0]
		await service.record_task_result(task.id, boolean_value=False, performed_by=user.id)
		return await service.complete_inspection(inspection.id, completed_by=user.id)

	return _make_failed_inspection
