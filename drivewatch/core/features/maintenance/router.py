# (c) Copyright Datacraft, 2026
"""FastAPI router for maintenance records and their checklists."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from drivewatch.core.auth import get_current_user
from drivewatch.core.db.engine import get_session
from drivewatch.core.exceptions import DrivewatchError, ValidationError
from drivewatch.core.features.users.db.orm import User
from drivewatch.core.http_errors import to_http_exception

from .checklist import Checklist, MaintenanceStatus, checklist_stats
from .db.orm import Maintenance
from .service import MaintenanceService
from .views import (
	ChecklistItemCreate,
	ChecklistItemOut,
	ChecklistItemUpdate,
	ChecklistStatsOut,
	CreatedFromInspectionsResponse,
	MaintenanceCreate,
	MaintenanceOut,
	MaintenanceStatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/maintenance", tags=["maintenance"])


def _maintenance_out(maintenance: Maintenance) -> MaintenanceOut:
	try:
		items = Checklist.load(maintenance.checklist_json).items
	except ValidationError as e:
		# Listing stays available for records with a broken checklist
		logger.warning(f"Maintenance {maintenance.id} has a malformed checklist: {e}")
		items = []
	out = MaintenanceOut.model_validate(maintenance)
	return out.model_copy(update={
		"checklist": [ChecklistItemOut(**item.to_dict()) for item in items],
		"checklist_stats": ChecklistStatsOut(**checklist_stats(maintenance.checklist_json).to_dict()),
	})


@router.get("", response_model=list[MaintenanceOut])
async def list_maintenance(
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
	drive_id: str | None = None,
	maintenance_status: MaintenanceStatus | None = Query(default=None, alias="status"),
):
	records = await MaintenanceService(session).list_maintenance(
		drive_id=drive_id, status=maintenance_status
	)
	return [_maintenance_out(m) for m in records]


@router.post("", response_model=MaintenanceOut, status_code=status.HTTP_201_CREATED)
async def create_maintenance(
	data: MaintenanceCreate,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		maintenance = await MaintenanceService(session).create_maintenance(
			data, user_id=current_user.id
		)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return _maintenance_out(maintenance)


@router.post("/from-failed-inspections", response_model=CreatedFromInspectionsResponse)
async def create_for_failed_inspections(
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		created = await MaintenanceService(session).create_for_failed_inspections()
	except DrivewatchError as e:
		raise to_http_exception(e)
	return CreatedFromInspectionsResponse(created=created)


@router.get("/{maintenance_id}", response_model=MaintenanceOut)
async def get_maintenance(
	maintenance_id: str,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		maintenance = await MaintenanceService(session).get_maintenance(maintenance_id)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return _maintenance_out(maintenance)


@router.patch("/{maintenance_id}/status", response_model=MaintenanceOut)
async def set_status(
	maintenance_id: str,
	data: MaintenanceStatusUpdate,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		maintenance = await MaintenanceService(session).set_status(maintenance_id, data.status)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return _maintenance_out(maintenance)


@router.get("/{maintenance_id}/checklist/stats", response_model=ChecklistStatsOut)
async def get_checklist_stats(
	maintenance_id: str,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		stats = await MaintenanceService(session).get_checklist_stats(maintenance_id)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return ChecklistStatsOut(**stats.to_dict())


@router.post("/{maintenance_id}/checklist", response_model=MaintenanceOut, status_code=status.HTTP_201_CREATED)
async def add_checklist_item(
	maintenance_id: str,
	data: ChecklistItemCreate,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		maintenance, _ = await MaintenanceService(session).add_checklist_item(
			maintenance_id, data.text, status=data.status.value, notes=data.notes
		)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return _maintenance_out(maintenance)


@router.patch("/{maintenance_id}/checklist/{item_id}", response_model=MaintenanceOut)
async def update_checklist_item(
	maintenance_id: str,
	item_id: str,
	data: ChecklistItemUpdate,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		maintenance, _ = await MaintenanceService(session).update_checklist_item(
			maintenance_id,
			item_id,
			status=data.status.value if data.status else None,
			notes=data.notes,
		)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return _maintenance_out(maintenance)


@router.delete("/{maintenance_id}/checklist/{item_id}", response_model=MaintenanceOut)
async def remove_checklist_item(
	maintenance_id: str,
	item_id: str,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	try:
		maintenance = await MaintenanceService(session).remove_checklist_item(maintenance_id, item_id)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return _maintenance_out(maintenance)
