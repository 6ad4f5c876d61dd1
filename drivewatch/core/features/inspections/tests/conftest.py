# (c) Copyright Datacraft, 2026
"""
Inspection feature test fixtures.
"""
from datetime import date, datetime

import pytest
from uuid_extensions import uuid7str
from sqlalchemy.ext.asyncio import AsyncSession

from drivewatch.core.features.inspections.db.orm import (
	Inspection,
	InspectionSubTask,
	InspectionTask,
	InspectionTemplate,
	TemplateSubTask,
	TemplateTask,
)
from drivewatch.core.features.inspections.models import (
	InspectionStatus,
	SubTaskStatus,
	TemplateFrequency,
)
from drivewatch.core.features.inspections.validation import Expectation


@pytest.fixture
async def make_inspection(db_session: AsyncSession, user):
	"""Factory fixture for creating inspections without tasks."""
	async def _make_inspection(
		name: str = "Daily Drive Check",
		status: InspectionStatus = InspectionStatus.ACTIVE,
		**kwargs,
	) -> Inspection:
		inspection = Inspection(
			id=uuid7str(),
			name=name,
			status=status.value,
			created_by=kwargs.get("created_by", user.id),
			assigned_to=kwargs.get("assigned_to", user.id),
			scheduled_date=kwargs.get("scheduled_date", date.today()),
			expiry_date=kwargs.get("expiry_date"),
			is_expired=kwargs.get("is_expired", False),
			performance_penalty=0,
			tasks=[],
		)
		if "created_at" in kwargs:
			inspection.created_at = kwargs["created_at"]
		db_session.add(inspection)
		await db_session.commit()
		return inspection

	return _make_inspection


@pytest.fixture
async def make_task(db_session: AsyncSession):
	"""Factory fixture for adding a task to an inspection."""
	async def _make_task(
		inspection: Inspection,
		name: str = "Check oil level",
		expectation: Expectation | None = None,
		required: bool = True,
		**kwargs,
	) -> InspectionTask:
		task = InspectionTask(
			id=uuid7str(),
			name=name,
			description=kwargs.get("description"),
			target_type=kwargs.get("target_type"),
			target_id=kwargs.get("target_id"),
			required=required,
			sort_order=len(inspection.tasks),
			sub_tasks=[],
		)
		task.expectation = expectation or Expectation.completion()
		inspection.tasks.append(task)
		await db_session.commit()
		return task

	return _make_task


@pytest.fixture
async def make_sub_task(db_session: AsyncSession):
	"""Factory fixture for adding a sub-task to a task."""
	async def _make_sub_task(
		task: InspectionTask,
		name: str = "Seal intact",
		expectation: Expectation | None = None,
		**kwargs,
	) -> InspectionSubTask:
		sub_task = InspectionSubTask(
			id=uuid7str(),
			name=name,
			description=kwargs.get("description"),
			status=kwargs.get("status", SubTaskStatus.PENDING).value,
			sort_order=len(task.sub_tasks),
		)
		sub_task.expectation = expectation or Expectation.completion()
		task.sub_tasks.append(sub_task)
		await db_session.commit()
		return sub_task

	return _make_sub_task


@pytest.fixture
async def make_template(db_session: AsyncSession, user):
	"""Factory fixture for creating templates with one decomposed task."""
	async def _make_template(
		name: str = "Weekly Drive Check",
		frequency: TemplateFrequency = TemplateFrequency.WEEKLY,
		start_date: date = date(2024, 1, 7),
		**kwargs,
	) -> InspectionTemplate:
		blueprint = TemplateTask(
			id=uuid7str(),
			name="Measure vibration",
			required=True,
			sort_order=0,
			sub_tasks=[],
		)
		blueprint.expectation = Expectation.numeric(0, 7.1, "mm/s")
		sub_blueprint = TemplateSubTask(id=uuid7str(), name="Mount secure", sort_order=0)
		sub_blueprint.expectation = Expectation.yes_no(True)
		blueprint.sub_tasks.append(sub_blueprint)

		template = InspectionTemplate(
			id=uuid7str(),
			name=name,
			frequency=frequency.value,
			start_date=start_date,
			end_date=kwargs.get("end_date"),
			assigned_to=kwargs.get("assigned_to", user.id),
			created_by=user.id,
			is_active=kwargs.get("is_active", True),
			tasks=[blueprint],
		)
		db_session.add(template)
		await db_session.commit()
		return template

	return _make_template


@pytest.fixture
def fixed_now() -> datetime:
	return datetime(2024, 3, 15, 12, 0, 0)
