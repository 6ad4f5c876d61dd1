# (c) Copyright Datacraft, 2026
"""FastAPI router for inspections."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from drivewatch.core.auth import get_current_user
from drivewatch.core.db.engine import get_session
from drivewatch.core.exceptions import DrivewatchError
from drivewatch.core.features.users.db.orm import User
from drivewatch.core.http_errors import to_http_exception
from drivewatch.core.utils.tz import utc_now

from .db.orm import Inspection
from .expiry import priority_level
from .models import InspectionStatus
from .service import InspectionService
from .views import (
	ExpectationFields,
	GenerateRequest,
	GenerateResponse,
	InspectionCreate,
	InspectionOut,
	InspectionSummary,
	ResultOut,
	ScheduleUpdate,
	SubTaskCreate,
	SubTaskOut,
	SubTaskReorder,
	SubTaskResultIn,
	TaskCreate,
	TaskOut,
	TaskResultIn,
	TemplateCreate,
	TemplateOut,
)

router = APIRouter(tags=["inspections"])


def _inspection_out(inspection: Inspection) -> InspectionOut:
	out = InspectionOut.model_validate(inspection)
	return out.model_copy(update={"priority": priority_level(inspection, utc_now())})


# --- Templates ---

@router.post("/inspection-templates", response_model=TemplateOut, status_code=status.HTTP_201_CREATED)
async def create_template(
	data: TemplateCreate,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		template = await InspectionService(session).create_template(data, created_by=current_user.id)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return TemplateOut.model_validate(template)


@router.post("/inspection-templates/generate", response_model=GenerateResponse)
async def generate_scheduled(
	data: GenerateRequest,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	"""Run scheduled generation now (normally triggered by the scheduler)."""
	as_of = data.as_of or utc_now().date()
	try:
		created = await InspectionService(session).generate_scheduled_inspections(as_of)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return GenerateResponse(as_of=as_of, created=created)


# --- Inspections ---

@router.get("/inspections", response_model=list[InspectionSummary])
async def list_inspections(
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
	assigned_to: str | None = None,
	inspection_status: InspectionStatus | None = Query(default=None, alias="status"),
	limit: int = Query(default=100, ge=1, le=500),
	offset: int = Query(default=0, ge=0),
):
	inspections = await InspectionService(session).list_inspections(
		assigned_to=assigned_to, status=inspection_status, limit=limit, offset=offset
	)
	return [InspectionSummary.model_validate(i) for i in inspections]


@router.post("/inspections", response_model=InspectionOut, status_code=status.HTTP_201_CREATED)
async def create_inspection(
	data: InspectionCreate,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		inspection = await InspectionService(session).create_inspection(
			data, created_by=current_user.id
		)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return _inspection_out(inspection)


@router.get("/inspections/{inspection_id}", response_model=InspectionOut)
async def get_inspection(
	inspection_id: str,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		inspection = await InspectionService(session).get_inspection(inspection_id)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return _inspection_out(inspection)


@router.delete("/inspections/{inspection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inspection(
	inspection_id: str,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		await InspectionService(session).delete_inspection(inspection_id)
	except DrivewatchError as e:
		raise to_http_exception(e)


@router.post("/inspections/{inspection_id}/activate", response_model=InspectionOut)
async def activate_inspection(
	inspection_id: str,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		inspection = await InspectionService(session).activate_inspection(inspection_id)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return _inspection_out(inspection)


@router.post("/inspections/{inspection_id}/complete", response_model=InspectionOut)
async def complete_inspection(
	inspection_id: str,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		inspection = await InspectionService(session).complete_inspection(
			inspection_id, completed_by=current_user.id
		)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return _inspection_out(inspection)


@router.post("/inspections/{inspection_id}/archive", response_model=InspectionOut)
async def archive_inspection(
	inspection_id: str,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		inspection = await InspectionService(session).archive_inspection(inspection_id)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return _inspection_out(inspection)


@router.patch("/inspections/{inspection_id}/schedule", response_model=InspectionOut)
async def update_schedule(
	inspection_id: str,
	data: ScheduleUpdate,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		inspection = await InspectionService(session).update_schedule(inspection_id, data)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return _inspection_out(inspection)


@router.post("/inspections/{inspection_id}/tasks", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
async def add_task(
	inspection_id: str,
	data: TaskCreate,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		task = await InspectionService(session).add_task(inspection_id, data)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return TaskOut.model_validate(task)


# --- Tasks ---

@router.post("/tasks/{task_id}/results", response_model=ResultOut, status_code=status.HTTP_201_CREATED)
async def record_task_result(
	task_id: str,
	data: TaskResultIn,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		result = await InspectionService(session).record_task_result(
			task_id,
			boolean_value=data.boolean_value,
			numeric_value=data.numeric_value,
			notes=data.notes,
			performed_by=current_user.id,
		)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return ResultOut.model_validate(result)


@router.get("/tasks/{task_id}/results", response_model=list[ResultOut])
async def task_result_history(
	task_id: str,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		results = await InspectionService(session).task_result_history(task_id)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return [ResultOut.model_validate(r) for r in results]


@router.put("/tasks/{task_id}/expectation", response_model=TaskOut)
async def update_task_expectation(
	task_id: str,
	data: ExpectationFields,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		task = await InspectionService(session).update_task_expectation(
			task_id, data.to_expectation()
		)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return TaskOut.model_validate(task)


@router.post("/tasks/{task_id}/sub-tasks", response_model=SubTaskOut, status_code=status.HTTP_201_CREATED)
async def add_sub_task(
	task_id: str,
	data: SubTaskCreate,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		sub_task = await InspectionService(session).add_sub_task(task_id, data)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return SubTaskOut.model_validate(sub_task)


@router.put("/tasks/{task_id}/sub-tasks/order", response_model=TaskOut)
async def reorder_sub_tasks(
	task_id: str,
	data: SubTaskReorder,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		task = await InspectionService(session).reorder_sub_tasks(task_id, data.ordered_ids)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return TaskOut.model_validate(task)


# --- Sub-tasks ---

@router.post("/sub-tasks/{sub_task_id}/result", response_model=SubTaskOut)
async def record_sub_task_result(
	sub_task_id: str,
	data: SubTaskResultIn,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		sub_task = await InspectionService(session).record_sub_task_result(
			sub_task_id,
			data.kind.value,
			boolean_value=data.boolean_value,
			numeric_value=data.numeric_value,
			notes=data.notes,
			performed_by=current_user.id,
		)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return SubTaskOut.model_validate(sub_task)


@router.post("/sub-tasks/{sub_task_id}/correction", response_model=SubTaskOut)
async def correct_sub_task_result(
	sub_task_id: str,
	data: SubTaskResultIn,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	"""Editor flow: fix a sub-task answer on a completed or failed inspection."""
	if not current_user.can_edit_closed_inspections:
		raise HTTPException(
			status_code=status.HTTP_403_FORBIDDEN,
			detail="Only editors can correct closed inspections",
		)
	try:
		sub_task = await InspectionService(session).record_sub_task_result(
			sub_task_id,
			data.kind.value,
			boolean_value=data.boolean_value,
			numeric_value=data.numeric_value,
			notes=data.notes,
			performed_by=current_user.id,
			as_editor=True,
		)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return SubTaskOut.model_validate(sub_task)


@router.post("/sub-tasks/{sub_task_id}/toggle", response_model=SubTaskOut)
async def toggle_sub_task_status(
	sub_task_id: str,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		sub_task = await InspectionService(session).toggle_sub_task_status(
			sub_task_id, performed_by=current_user.id
		)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return SubTaskOut.model_validate(sub_task)
