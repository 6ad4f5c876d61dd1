# (c) Copyright Datacraft, 2026
"""Inspection domain enums and value objects."""
from dataclasses import dataclass, field
from enum import Enum


class InspectionStatus(str, Enum):
	"""Inspection lifecycle status."""
	DRAFT = "draft"
	PENDING = "pending"
	ACTIVE = "active"
	COMPLETED = "completed"
	FAILED = "failed"
	ARCHIVED = "archived"


# Not yet visible to operators; the first recorded result promotes to active
PRE_ACTIVE_STATUSES = frozenset({InspectionStatus.DRAFT, InspectionStatus.PENDING})
TERMINAL_STATUSES = frozenset({InspectionStatus.COMPLETED, InspectionStatus.FAILED})
CLOSED_STATUSES = TERMINAL_STATUSES | {InspectionStatus.ARCHIVED}


class SubTaskStatus(str, Enum):
	PENDING = "pending"
	COMPLETED = "completed"


class TemplateFrequency(str, Enum):
	ONE_TIME = "one_time"
	DAILY = "daily"
	WEEKLY = "weekly"
	MONTHLY = "monthly"


class PriorityLevel(str, Enum):
	"""Urgency of an open inspection, derived from its expiry date."""
	EXPIRED = "expired"
	CRITICAL = "critical"
	HIGH = "high"
	MEDIUM = "medium"
	LOW = "low"
	NO_URGENCY = "no_urgency"


@dataclass
class TaskRollup:
	"""Derived state of one task: its latest result and sub-task progress."""
	task_id: str
	name: str
	required: bool
	has_result: bool = False
	result_passing: bool = False
	subtasks_total: int = 0
	subtasks_completed: int = 0
	subtasks_failing: int = 0

	@property
	def is_failing(self) -> bool:
		return self.has_result and (not self.result_passing or self.subtasks_failing > 0)

	@property
	def is_passing(self) -> bool:
		return self.has_result and not self.is_failing


@dataclass
class InspectionRollup:
	"""Aggregate counters cached on the inspection row."""
	tasks: list[TaskRollup] = field(default_factory=list)

	@property
	def tasks_total(self) -> int:
		return len(self.tasks)

	@property
	def tasks_with_result(self) -> int:
		return sum(1 for t in self.tasks if t.has_result)

	@property
	def required_total(self) -> int:
		return sum(1 for t in self.tasks if t.required)

	@property
	def required_passing(self) -> int:
		return sum(1 for t in self.tasks if t.required and t.is_passing)

	@property
	def subtasks_total(self) -> int:
		return sum(t.subtasks_total for t in self.tasks)

	@property
	def subtasks_completed(self) -> int:
		return sum(t.subtasks_completed for t in self.tasks)

	@property
	def failing_items(self) -> int:
		"""Failing answers: task results plus sub-task values."""
		return sum(
			t.subtasks_failing + (1 if t.has_result and not t.result_passing else 0)
			for t in self.tasks
		)

	@property
	def missing_required(self) -> list[str]:
		return [t.name for t in self.tasks if t.required and not t.has_result]

	@property
	def any_required_failing(self) -> bool:
		return any(t.required and t.is_failing for t in self.tasks)

	@property
	def all_required_passing(self) -> bool:
		return self.required_passing == self.required_total
