# (c) Copyright Datacraft, 2026
"""
Inspections router tests.
"""
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from drivewatch.core.features.inspections.db.orm import Inspection, InspectionTemplate
from drivewatch.core.features.inspections.models import InspectionStatus
from drivewatch.core.features.inspections.validation import Expectation
from drivewatch.core.tests.types import AuthTestClient


async def test_create_inspection(
	auth_api_client: AuthTestClient,
	db_session: AsyncSession,
):
	count_before = await db_session.scalar(select(func.count(Inspection.id)))
	assert count_before == 0

	response = await auth_api_client.post(
		"/inspections",
		json={
			"name": "Conveyor Drive 3",
			"assigned_to": auth_api_client.user.id,
			"tasks": [
				{
					"name": "Oil pressure",
					"kind": "numeric",
					"expected_value_min": 2.5,
					"expected_value_max": 4.0,
					"unit_of_measure": "bar",
					"sub_tasks": [
						{"name": "Gauge readable", "kind": "yes_no", "expected_value_boolean": True},
					],
				},
				{"name": "Wipe down", "required": False},
			],
		},
	)

	assert response.status_code == 201, response.json()
	data = response.json()
	assert data["status"] == "draft"
	assert data["tasks_total"] == 2
	assert data["required_total"] == 1
	assert data["subtasks_total"] == 1
	assert data["priority"] == "no_urgency"
	assert data["tasks"][0]["unit_of_measure"] == "bar"
	assert data["tasks"][0]["sub_tasks"][0]["compliance"] == "pending_action"

	count_after = await db_session.scalar(select(func.count(Inspection.id)))
	assert count_after == 1


async def test_create_inspection_rejects_inverted_range(
	auth_api_client: AuthTestClient,
):
	response = await auth_api_client.post(
		"/inspections",
		json={
			"name": "Conveyor Drive 3",
			"tasks": [
				{"name": "Temperature", "kind": "numeric", "expected_value_min": 80, "expected_value_max": 20},
			],
		},
	)

	assert response.status_code == 400, response.json()


async def test_create_inspection_cannot_start_active(
	auth_api_client: AuthTestClient,
):
	response = await auth_api_client.post(
		"/inspections",
		json={"name": "Conveyor Drive 3", "status": "active"},
	)

	assert response.status_code == 400, response.json()


async def test_get_missing_inspection(
	auth_api_client: AuthTestClient,
):
	response = await auth_api_client.get("/inspections/does-not-exist")

	assert response.status_code == 404, response.json()


async def test_list_inspections_by_status(
	auth_api_client: AuthTestClient,
	make_inspection,
):
	await make_inspection(name="Open")
	await make_inspection(name="Closed", status=InspectionStatus.COMPLETED)

	response = await auth_api_client.get("/inspections", params={"status": "active"})

	assert response.status_code == 200, response.json()
	assert [i["name"] for i in response.json()] == ["Open"]


async def test_complete_reports_missing_required_tasks(
	auth_api_client: AuthTestClient,
	make_inspection,
	make_task,
):
	inspection = await make_inspection()
	await make_task(inspection, name="Check oil level")
	inspection_id = inspection.id

	response = await auth_api_client.post(f"/inspections/{inspection_id}/complete")

	assert response.status_code == 409, response.json()
	assert response.json()["detail"]["missing_tasks"] == ["Check oil level"]


async def test_record_sub_task_result_and_complete(
	auth_api_client: AuthTestClient,
	make_inspection,
	make_task,
	make_sub_task,
):
	inspection = await make_inspection()
	task = await make_task(inspection, expectation=Expectation.numeric(10, 20))
	sub_task = await make_sub_task(task, expectation=Expectation.yes_no(True))
	inspection_id, task_id, sub_task_id = inspection.id, task.id, sub_task.id

	response = await auth_api_client.post(
		f"/sub-tasks/{sub_task_id}/result",
		json={"kind": "yes_no", "boolean_value": True},
	)
	assert response.status_code == 200, response.json()
	assert response.json()["status"] == "completed"
	assert response.json()["compliance"] == "passing"

	response = await auth_api_client.post(f"/tasks/{task_id}/results", json={"numeric_value": 12.5})
	assert response.status_code == 201, response.json()
	assert response.json()["is_passing"] is True
	assert response.json()["sequence"] == 1

	response = await auth_api_client.post(f"/inspections/{inspection_id}/complete")
	assert response.status_code == 200, response.json()
	assert response.json()["status"] == "completed"
	assert response.json()["completed_by"] == auth_api_client.user.id


async def test_gated_task_result_is_a_conflict(
	auth_api_client: AuthTestClient,
	make_inspection,
	make_task,
	make_sub_task,
):
	inspection = await make_inspection()
	task = await make_task(inspection)
	await make_sub_task(task)
	task_id = task.id

	response = await auth_api_client.post(f"/tasks/{task_id}/results", json={})

	assert response.status_code == 409, response.json()


async def test_correction_requires_editor(
	auth_api_client: AuthTestClient,
	make_inspection,
	make_task,
	make_sub_task,
):
	inspection = await make_inspection(status=InspectionStatus.COMPLETED)
	task = await make_task(inspection)
	sub_task = await make_sub_task(task, expectation=Expectation.yes_no(True))
	sub_task_id = sub_task.id

	response = await auth_api_client.post(
		f"/sub-tasks/{sub_task_id}/correction",
		json={"kind": "yes_no", "boolean_value": False},
	)

	assert response.status_code == 403, response.json()


async def test_editor_correction_on_completed_inspection(
	make_api_client,
	editor,
	make_inspection,
	make_task,
	make_sub_task,
):
	api_client = make_api_client(editor)
	inspection = await make_inspection(status=InspectionStatus.COMPLETED)
	task = await make_task(inspection)
	sub_task = await make_sub_task(task, expectation=Expectation.yes_no(True))
	sub_task_id = sub_task.id

	response = await api_client.post(
		f"/sub-tasks/{sub_task_id}/correction",
		json={"kind": "yes_no", "boolean_value": False},
	)

	assert response.status_code == 200, response.json()
	assert response.json()["compliance"] == "failing"
	assert response.json()["status"] == "pending"


async def test_create_template_and_generate(
	auth_api_client: AuthTestClient,
	db_session: AsyncSession,
):
	response = await auth_api_client.post(
		"/inspection-templates",
		json={
			"name": "Gearbox Check",
			"frequency": "daily",
			"start_date": "2024-01-01",
			"tasks": [{"name": "Listen for noise", "kind": "yes_no", "expected_value_boolean": False}],
		},
	)
	assert response.status_code == 201, response.json()
	assert response.json()["tasks"][0]["kind"] == "yes_no"

	response = await auth_api_client.post(
		"/inspection-templates/generate", json={"as_of": "2024-01-05"}
	)
	assert response.status_code == 200, response.json()
	assert response.json() == {"as_of": "2024-01-05", "created": 1}

	count = await db_session.scalar(select(func.count(InspectionTemplate.id)))
	assert count == 1


async def test_create_template_rejects_end_before_start(
	auth_api_client: AuthTestClient,
):
	response = await auth_api_client.post(
		"/inspection-templates",
		json={
			"name": "Gearbox Check",
			"frequency": "weekly",
			"start_date": "2024-02-01",
			"end_date": "2024-01-01",
		},
	)

	assert response.status_code == 400, response.json()
