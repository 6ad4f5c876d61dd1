# (c) Copyright Datacraft, 2026
"""Pydantic schemas for the inspections API."""
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from .models import InspectionStatus, PriorityLevel, SubTaskStatus, TemplateFrequency
from .validation import Compliance, Expectation, ValidationKind


class ExpectationFields(BaseModel):
	"""Validation kind with its payload, as submitted by clients."""
	kind: ValidationKind = ValidationKind.NONE
	expected_value_boolean: bool | None = None
	expected_value_min: float | None = None
	expected_value_max: float | None = None
	unit_of_measure: str | None = Field(default=None, max_length=50)

	def to_expectation(self) -> Expectation:
		"""Build the tagged variant; fields foreign to the kind are dropped."""
		if self.kind == ValidationKind.YES_NO:
			expectation = Expectation(
				kind=self.kind,
				expected_boolean=self.expected_value_boolean,
			)
		elif self.kind == ValidationKind.NUMERIC:
			expectation = Expectation(
				kind=self.kind,
				minimum=self.expected_value_min,
				maximum=self.expected_value_max,
				unit=self.unit_of_measure,
			)
		else:
			expectation = Expectation.completion()
		return expectation.validate()


class SubTaskCreate(ExpectationFields):
	model_config = ConfigDict(extra="forbid")

	name: str = Field(..., min_length=1, max_length=255)
	description: str | None = None
	sort_order: int | None = None


class TaskCreate(ExpectationFields):
	model_config = ConfigDict(extra="forbid")

	name: str = Field(..., min_length=1, max_length=255)
	description: str | None = None
	target_type: str | None = None
	target_id: str | None = None
	required: bool = True
	sort_order: int | None = None
	sub_tasks: list[SubTaskCreate] = Field(default_factory=list)


class InspectionCreate(BaseModel):
	model_config = ConfigDict(extra="forbid")

	name: str = Field(..., min_length=1, max_length=255)
	description: str | None = None
	status: InspectionStatus = InspectionStatus.DRAFT
	assigned_to: str | None = None
	scheduled_date: date | None = None
	expiry_date: datetime | None = None
	notes: str | None = None
	tasks: list[TaskCreate] = Field(default_factory=list)


class TemplateCreate(BaseModel):
	model_config = ConfigDict(extra="forbid")

	name: str = Field(..., min_length=1, max_length=255)
	description: str | None = None
	frequency: TemplateFrequency = TemplateFrequency.ONE_TIME
	start_date: date
	end_date: date | None = None
	assigned_to: str | None = None
	tasks: list[TaskCreate] = Field(default_factory=list)


class ScheduleUpdate(BaseModel):
	model_config = ConfigDict(extra="forbid")

	scheduled_date: date | None = None
	expiry_date: datetime | None = None
	assigned_to: str | None = None


class SubTaskResultIn(BaseModel):
	model_config = ConfigDict(extra="forbid")

	kind: ValidationKind
	boolean_value: bool | None = None
	numeric_value: float | None = None
	notes: str | None = None


class TaskResultIn(BaseModel):
	model_config = ConfigDict(extra="forbid")

	boolean_value: bool | None = None
	numeric_value: float | None = None
	notes: str | None = None


class SubTaskReorder(BaseModel):
	model_config = ConfigDict(extra="forbid")

	ordered_ids: list[str] = Field(..., min_length=1)


class GenerateRequest(BaseModel):
	as_of: date | None = None


class GenerateResponse(BaseModel):
	as_of: date
	created: int


class SubTaskOut(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str
	task_id: str
	name: str
	description: str | None = None
	kind: str
	expected_value_boolean: bool | None = None
	expected_value_min: float | None = None
	expected_value_max: float | None = None
	unit_of_measure: str | None = None
	status: SubTaskStatus
	recorded_value_boolean: bool | None = None
	recorded_value_numeric: float | None = None
	notes: str | None = None
	completed_by: str | None = None
	completed_at: datetime | None = None
	sort_order: int
	compliance: Compliance | None = None


class TaskOut(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str
	inspection_id: str
	name: str
	description: str | None = None
	kind: str
	expected_value_boolean: bool | None = None
	expected_value_min: float | None = None
	expected_value_max: float | None = None
	unit_of_measure: str | None = None
	target_type: str | None = None
	target_id: str | None = None
	required: bool
	sort_order: int
	sub_tasks: list[SubTaskOut] = Field(default_factory=list)


class ResultOut(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str
	inspection_id: str
	task_id: str
	performed_by: str | None = None
	value_boolean: bool | None = None
	value_numeric: float | None = None
	is_passing: bool
	notes: str | None = None
	sequence: int
	recorded_at: datetime


class InspectionSummary(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str
	name: str
	template_id: str | None = None
	status: InspectionStatus
	assigned_to: str | None = None
	scheduled_date: date | None = None
	expiry_date: datetime | None = None
	is_expired: bool
	tasks_total: int
	tasks_with_result: int
	required_total: int
	required_passing: int
	subtasks_total: int
	subtasks_completed: int
	failing_items: int
	created_at: datetime


class InspectionOut(InspectionSummary):
	description: str | None = None
	created_by: str | None = None
	completed_by: str | None = None
	completed_date: datetime | None = None
	notes: str | None = None
	expired_at: datetime | None = None
	performance_penalty: int
	priority: PriorityLevel | None = None
	tasks: list[TaskOut] = Field(default_factory=list)


class TemplateTaskOut(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str
	name: str
	kind: str
	required: bool
	sort_order: int


class TemplateOut(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str
	name: str
	description: str | None = None
	frequency: TemplateFrequency
	start_date: date
	end_date: date | None = None
	assigned_to: str | None = None
	is_active: bool
	tasks: list[TemplateTaskOut] = Field(default_factory=list)

