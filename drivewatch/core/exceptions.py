# (c) Copyright Datacraft, 2026
"""Domain errors raised by the inspection, maintenance and performance engines."""


class DrivewatchError(Exception):
	"""Base class for all domain errors."""
	pass


class ValidationError(DrivewatchError):
	"""Malformed input. Nothing was written."""
	pass


class NotFound(DrivewatchError):
	"""A referenced entity does not exist."""

	def __init__(self, entity: str, entity_id: str):
		self.entity = entity
		self.entity_id = entity_id
		super().__init__(f"{entity} {entity_id} not found")


class StateConflict(DrivewatchError):
	"""Operation is illegal for the current state; re-fetch and retry."""
	pass


class TaskGated(StateConflict):
	"""A decomposed task still has sub-tasks that are not completed."""

	def __init__(self, task_name: str, pending_sub_tasks: list[str]):
		self.task_name = task_name
		self.pending_sub_tasks = pending_sub_tasks
		names = ", ".join(pending_sub_tasks)
		super().__init__(
			f"Task '{task_name}' cannot take a result until all sub-tasks are completed "
			f"(pending: {names})"
		)


class InspectionNotActive(StateConflict):
	"""Inspection must be active for this operation."""

	def __init__(self, inspection_id: str, status: str):
		self.inspection_id = inspection_id
		self.status = status
		super().__init__(
			f"Inspection {inspection_id} is '{status}'; only active inspections can be completed"
		)


class TerminalInspection(StateConflict):
	"""Completed or failed inspections are closed for editing."""

	def __init__(self, inspection_id: str, status: str):
		self.inspection_id = inspection_id
		self.status = status
		super().__init__(f"Inspection {inspection_id} is '{status}' and can no longer be edited")


class IllegalTransition(StateConflict):
	def __init__(self, entity: str, from_status: str, to_status: str):
		self.entity = entity
		self.from_status = from_status
		self.to_status = to_status
		super().__init__(f"{entity} cannot move from '{from_status}' to '{to_status}'")


class ChecklistDrivenStatus(StateConflict):
	"""Maintenance status is derived from its checklist and cannot be set by hand."""
	pass


class MissingRequiredTasks(DrivewatchError):
	"""Completion blocked by required tasks that have no recorded result."""

	def __init__(self, task_names: list[str]):
		self.task_names = task_names
		super().__init__(
			f"Required tasks without a result: {', '.join(task_names)}"
		)


class PersistenceFailure(DrivewatchError):
	"""Transactional write failed and was rolled back. Retryable."""
	pass
