# (c) Copyright Datacraft, 2026
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .aggregator import PerformanceStatus


class PerformanceSnapshotOut(BaseModel):
	user_id: str
	period_start: datetime
	period_end: datetime
	total_inspections_assigned: int
	completed_inspections: int
	failed_inspections: int
	pending_inspections: int
	completion_rate: float
	pass_rate: float
	last_activity_at: datetime | None = None
	days_since_last_activity: int
	performance_score: float
	status: PerformanceStatus
	notes: str

	model_config = ConfigDict(from_attributes=True)


class ComputeRequest(BaseModel):
	window_days: int | None = Field(default=None, gt=0)


class PerformanceCheckRequest(BaseModel):
	window_days: int | None = Field(default=None, gt=0)


class PerformanceCheckSummary(BaseModel):
	checked: int
	needing_attention: int
	active: int = 0
	warning: int = 0
	critical: int = 0
	inactive: int = 0
