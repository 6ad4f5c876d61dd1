# (c) Copyright Datacraft, 2026
"""Pydantic schemas for the maintenance API."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .checklist import ItemStatus, MaintenanceStatus


class MaintenanceCreate(BaseModel):
	model_config = ConfigDict(extra="forbid")

	drive_id: str | None = None
	title: str = Field(..., min_length=1, max_length=255)
	description: str | None = None
	maintenance_date: datetime | None = None
	technician: str | None = None
	status: MaintenanceStatus = MaintenanceStatus.PENDING
	cost: float | None = Field(default=None, ge=0)
	checklist: list[str] = Field(default_factory=list)


class MaintenanceStatusUpdate(BaseModel):
	model_config = ConfigDict(extra="forbid")

	status: MaintenanceStatus


class ChecklistItemCreate(BaseModel):
	model_config = ConfigDict(extra="forbid")

	text: str = Field(..., min_length=1)
	status: ItemStatus = ItemStatus.PENDING
	notes: str | None = None


class ChecklistItemUpdate(BaseModel):
	model_config = ConfigDict(extra="forbid")

	status: ItemStatus | None = None
	notes: str | None = None


class ChecklistItemOut(BaseModel):
	id: str
	text: str
	status: ItemStatus
	notes: str | None = None
	updated_at: str | None = None


class ChecklistStatsOut(BaseModel):
	total: int
	completed: int
	failed: int
	pending: int
	completion_percentage: int


class MaintenanceOut(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str
	drive_id: str | None = None
	title: str
	description: str | None = None
	maintenance_date: datetime
	technician: str | None = None
	status: MaintenanceStatus
	cost: float | None = None
	user_id: str | None = None
	created_from_inspection: bool
	inspection_id: str | None = None
	inspection_task_id: str | None = None
	inspection_result_id: str | None = None
	checklist: list[ChecklistItemOut] = Field(default_factory=list)
	checklist_stats: ChecklistStatsOut | None = None
	created_at: datetime


class CreatedFromInspectionsResponse(BaseModel):
	created: int
