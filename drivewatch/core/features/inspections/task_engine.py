# (c) Copyright Datacraft, 2026
"""
Task result recording.

A flat task takes a result at any time. A task with sub-tasks is gated: it
only takes a result once every sub-task is completed. Results are appended to
the task's log; the newest entry is the current answer.
"""
import logging

from drivewatch.core.db.unit_of_work import UnitOfWork
from drivewatch.core.exceptions import TaskGated, ValidationError
from .db.api import InspectionDB
from .db.orm import Inspection, InspectionTask, InspectionResult
from .engine import InspectionEngine
from .rollup import schedule_rollup
from .validation import Expectation, ValidationKind, check_value_shape, is_passing

logger = logging.getLogger(__name__)

RECALCULATION_NOTE = "Recalculated after expectation change"


class TaskEngine:

	def __init__(
		self,
		task: InspectionTask,
		inspection: Inspection,
		uow: UnitOfWork,
	):
		self.task = task
		self.inspection = inspection
		self.uow = uow
		self.db = InspectionDB(uow.session)

	def _expectation(self) -> Expectation:
		expectation = self.task.expectation_or_none
		if expectation is None:
			raise ValidationError(
				f"Task '{self.task.name}' has unknown validation kind '{self.task.kind}'"
			)
		return expectation

	def ensure_not_gated(self) -> None:
		pending = self.task.pending_sub_tasks
		if pending:
			raise TaskGated(self.task.name, [s.name for s in pending])

	def is_passing(self, boolean_value: bool | None, numeric_value: float | None) -> bool:
		"""
		Verdict for a value against the task's own expectation.

		Recording a result on a completion-only task is the act of completing
		it, so such a result always passes.
		"""
		return is_passing(self._expectation(), boolean_value, numeric_value, completed=True)

	async def record_result(
		self,
		performed_by: str | None,
		boolean_value: bool | None = None,
		numeric_value: float | None = None,
		notes: str | None = None,
	) -> InspectionResult:
		self.ensure_not_gated()

		expectation = self._expectation()
		if not expectation.is_configured:
			raise ValidationError(
				f"Task '{self.task.name}' is misconfigured ({expectation.kind.value} without "
				f"expected value); fix its setup"
			)
		boolean_value, numeric_value = check_value_shape(expectation, boolean_value, numeric_value)
		passing = self.is_passing(boolean_value, numeric_value)

		result = await self.db.append_result(
			self.task,
			performed_by=performed_by,
			value_boolean=boolean_value,
			value_numeric=numeric_value,
			is_passing=passing,
			notes=notes,
		)
		logger.info(
			f"Recorded result #{result.sequence} for task {self.task.id} "
			f"({'passing' if passing else 'failing'})"
		)

		InspectionEngine(self.inspection).promote_on_result()
		schedule_rollup(self.uow, self.inspection.id)
		return result

	async def update_expectation(self, expectation: Expectation) -> InspectionResult | None:
		"""
		Replace the expectation and re-judge the current answer.

		When the verdict of the latest result changes, a copy of that result
		with the new verdict is appended, so the log shows both judgements.
		Returns the appended entry, if any.
		"""
		expectation.validate()
		self.task.expectation = expectation
		schedule_rollup(self.uow, self.inspection.id)

		latest = await self.db.latest_result(self.task.id)
		if latest is None:
			return None

		if expectation.kind == ValidationKind.NONE:
			passing = True
		else:
			passing = is_passing(expectation, latest.value_boolean, latest.value_numeric)
		if passing == latest.is_passing:
			return None

		logger.info(
			f"Task {self.task.id} verdict changed to {'passing' if passing else 'failing'} "
			f"after expectation update"
		)
		return await self.db.append_result(
			self.task,
			performed_by=latest.performed_by,
			value_boolean=latest.value_boolean,
			value_numeric=latest.value_numeric,
			is_passing=passing,
			notes=RECALCULATION_NOTE,
		)
