# (c) Copyright Datacraft, 2026
"""
Operator performance test fixtures.
"""
from datetime import datetime

import pytest
from uuid_extensions import uuid7str
from sqlalchemy.ext.asyncio import AsyncSession

from drivewatch.core.features.inspections.db.orm import (
	Inspection,
	InspectionResult,
	InspectionTask,
)
from drivewatch.core.features.inspections.models import InspectionStatus
from drivewatch.core.features.inspections.validation import Expectation
from drivewatch.core.features.users.db.orm import User


@pytest.fixture
def now() -> datetime:
	return datetime(2024, 3, 15, 12, 0, 0)


@pytest.fixture
async def make_assignment(db_session: AsyncSession):
	"""Factory fixture for an inspection assigned to an operator, with one task."""
	async def _make_assignment(
		operator: User,
		status: InspectionStatus = InspectionStatus.ACTIVE,
		created_at: datetime = datetime(2024, 3, 1, 8, 0, 0),
		name: str = "Daily Drive Check",
	) -> Inspection:
		task = InspectionTask(
			id=uuid7str(),
			name="Check oil level",
			required=True,
			sort_order=0,
			sub_tasks=[],
		)
		task.expectation = Expectation.yes_no(True)
		inspection = Inspection(
			id=uuid7str(),
			name=name,
			status=status.value,
			created_by=operator.id,
			assigned_to=operator.id,
			is_expired=False,
			performance_penalty=0,
			created_at=created_at,
			tasks=[task],
		)
		db_session.add(inspection)
		await db_session.commit()
		return inspection

	return _make_assignment


@pytest.fixture
async def make_result(db_session: AsyncSession):
	"""Factory fixture appending a result to the first task of an inspection."""
	sequences: dict[str, int] = {}

	async def _make_result(
		inspection: Inspection,
		is_passing: bool,
		recorded_at: datetime = datetime(2024, 3, 14, 10, 0, 0),
	) -> InspectionResult:
		task = inspection.tasks[0]
		sequence = sequences.get(task.id, 0) + 1
		sequences[task.id] = sequence
		result = InspectionResult(
			id=uuid7str(),
			inspection_id=inspection.id,
			task_id=task.id,
			performed_by=inspection.assigned_to,
			value_boolean=is_passing,
			is_passing=is_passing,
			sequence=sequence,
			recorded_at=recorded_at,
		)
		db_session.add(result)
		await db_session.commit()
		return result

	return _make_result
