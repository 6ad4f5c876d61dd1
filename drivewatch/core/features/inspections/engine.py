# (c) Copyright Datacraft, 2026
"""
Inspection state machine.

	draft / pending -> active -> completed | failed -> archived

Completion is always an explicit act. The rollup keeps counters fresh but
never moves an inspection between states.
"""
import logging
from datetime import date, datetime

from drivewatch.core.exceptions import (
	IllegalTransition,
	InspectionNotActive,
	MissingRequiredTasks,
	TerminalInspection,
)
from drivewatch.core.utils.tz import utc_now
from .db.orm import Inspection
from .models import (
	InspectionRollup,
	InspectionStatus,
	CLOSED_STATUSES,
	PRE_ACTIVE_STATUSES,
	TERMINAL_STATUSES,
)

logger = logging.getLogger(__name__)


class InspectionEngine:
	"""Legal transitions and edit guards for one inspection."""

	def __init__(self, inspection: Inspection):
		self.inspection = inspection

	@property
	def status(self) -> InspectionStatus:
		return InspectionStatus(self.inspection.status)

	def _set_status(self, new_status: InspectionStatus) -> None:
		old_status = self.inspection.status
		self.inspection.status = new_status.value
		logger.info(
			f"Inspection {self.inspection.id} status changed: {old_status} -> {new_status.value}"
		)

	def ensure_editable(self, as_editor: bool = False) -> None:
		"""
		Reject result edits on closed inspections.

		Completed and failed inspections accept sub-task corrections from an
		authorized editor; archived ones accept nothing.
		"""
		if self.status == InspectionStatus.ARCHIVED:
			raise TerminalInspection(self.inspection.id, self.status.value)
		if self.status in TERMINAL_STATUSES and not as_editor:
			raise TerminalInspection(self.inspection.id, self.status.value)

	def ensure_schedule_editable(self) -> None:
		if self.status in CLOSED_STATUSES:
			raise TerminalInspection(self.inspection.id, self.status.value)

	def activate(self) -> None:
		"""Make the inspection visible to operators."""
		if self.status == InspectionStatus.ACTIVE:
			return
		if self.status not in PRE_ACTIVE_STATUSES:
			raise IllegalTransition("Inspection", self.status.value, InspectionStatus.ACTIVE.value)
		self._set_status(InspectionStatus.ACTIVE)

	def promote_on_result(self) -> None:
		"""The first recorded answer activates a draft or pending inspection."""
		if self.status in PRE_ACTIVE_STATUSES:
			self.activate()

	def complete(
		self,
		rollup: InspectionRollup,
		completed_by: str | None,
		now: datetime | None = None,
	) -> InspectionStatus:
		"""
		Close an active inspection.

		Every required task needs a result. The inspection fails when any
		required task is failing, otherwise it completes. Optional tasks never
		influence the outcome.
		"""
		if self.status != InspectionStatus.ACTIVE:
			raise InspectionNotActive(self.inspection.id, self.status.value)

		missing = rollup.missing_required
		if missing:
			raise MissingRequiredTasks(missing)

		final_status = (
			InspectionStatus.FAILED if rollup.any_required_failing
			else InspectionStatus.COMPLETED
		)
		self.inspection.completed_by = completed_by
		self.inspection.completed_date = now or utc_now()
		self._set_status(final_status)
		return final_status

	def archive(self) -> None:
		if self.status not in TERMINAL_STATUSES:
			raise IllegalTransition("Inspection", self.status.value, InspectionStatus.ARCHIVED.value)
		self._set_status(InspectionStatus.ARCHIVED)

	def update_schedule(
		self,
		scheduled_date: date | None = None,
		expiry_date: datetime | None = None,
		assigned_to: str | None = None,
	) -> None:
		self.ensure_schedule_editable()
		if scheduled_date is not None:
			self.inspection.scheduled_date = scheduled_date
		if expiry_date is not None:
			self.inspection.expiry_date = expiry_date
			self.inspection.is_expired = False
			self.inspection.expired_at = None
			self.inspection.performance_penalty = 0
		if assigned_to is not None:
			self.inspection.assigned_to = assigned_to
