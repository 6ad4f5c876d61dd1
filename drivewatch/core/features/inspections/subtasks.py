# (c) Copyright Datacraft, 2026
"""
Sub-task lifecycle.

A sub-task is pending or completed. For valued kinds completion is derived
from the answer: a passing value completes the item, a failing one leaves it
pending with the value kept so the operator sees what needs rework. Going
back to pending always clears the completion stamp and both recorded values
in the same write.
"""
import logging

from drivewatch.core.db.unit_of_work import UnitOfWork
from drivewatch.core.exceptions import StateConflict, ValidationError
from drivewatch.core.utils.tz import utc_now
from .db.orm import Inspection, InspectionSubTask
from .engine import InspectionEngine
from .models import SubTaskStatus
from .rollup import schedule_rollup
from .validation import (
	Compliance,
	ValidationKind,
	check_value_shape,
	is_passing,
)

logger = logging.getLogger(__name__)


class SubTaskEngine:
	"""Mutations of one sub-task; each one schedules the inspection rollup."""

	def __init__(self, sub_task: InspectionSubTask, inspection: Inspection, uow: UnitOfWork):
		self.sub_task = sub_task
		self.inspection = inspection
		self.uow = uow

	def _changed(self) -> None:
		schedule_rollup(self.uow, self.inspection.id)

	def complete(self, performed_by: str | None) -> InspectionSubTask:
		self.sub_task.status = SubTaskStatus.COMPLETED.value
		self.sub_task.completed_by = performed_by
		self.sub_task.completed_at = utc_now()
		self._changed()
		return self.sub_task

	def reset_to_pending(self) -> InspectionSubTask:
		self.sub_task.status = SubTaskStatus.PENDING.value
		self.sub_task.completed_by = None
		self.sub_task.completed_at = None
		self.sub_task.recorded_value_boolean = None
		self.sub_task.recorded_value_numeric = None
		self._changed()
		return self.sub_task

	def toggle(self, performed_by: str | None) -> InspectionSubTask:
		if self.sub_task.is_completed:
			return self.reset_to_pending()
		expectation = self.sub_task.expectation_or_none
		if expectation is None or expectation.requires_value:
			# Valued items complete only through a passing answer
			raise StateConflict(
				f"Sub-task '{self.sub_task.name}' is of kind '{self.sub_task.kind}'; "
				f"record a result instead"
			)
		return self.complete(performed_by)

	def record_result(
		self,
		kind: str,
		performed_by: str | None,
		boolean_value: bool | None = None,
		numeric_value: float | None = None,
		notes: str | None = None,
	) -> InspectionSubTask:
		try:
			requested = ValidationKind(kind)
		except ValueError:
			raise ValidationError(f"Unknown validation kind '{kind}'")

		if requested.value != self.sub_task.kind:
			raise ValidationError(
				f"Sub-task '{self.sub_task.name}' is of kind '{self.sub_task.kind}', "
				f"got a '{requested.value}' result"
			)

		if notes is not None:
			self.sub_task.notes = notes

		if requested == ValidationKind.NONE:
			result = self.toggle(performed_by)
			InspectionEngine(self.inspection).promote_on_result()
			return result

		expectation = self.sub_task.expectation
		boolean_value, numeric_value = check_value_shape(expectation, boolean_value, numeric_value)
		self.sub_task.recorded_value_boolean = boolean_value
		self.sub_task.recorded_value_numeric = numeric_value

		if is_passing(expectation, boolean_value, numeric_value):
			self.sub_task.status = SubTaskStatus.COMPLETED.value
			self.sub_task.completed_by = performed_by
			self.sub_task.completed_at = utc_now()
		else:
			# Needs rework: keep the value, drop the completion stamp
			self.sub_task.status = SubTaskStatus.PENDING.value
			self.sub_task.completed_by = None
			self.sub_task.completed_at = None
			logger.info(
				f"Sub-task {self.sub_task.id} recorded a non-passing value "
				f"({expectation.describe()})"
			)

		InspectionEngine(self.inspection).promote_on_result()
		self._changed()
		return self.sub_task

	def compliance(self) -> Compliance:
		return self.sub_task.compliance
