# (c) Copyright Datacraft, 2026
"""Operator performance ORM model."""
from datetime import datetime

from sqlalchemy import String, ForeignKey, Integer, Float, Text, DateTime, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from drivewatch.core.db.base import Base
from drivewatch.core.utils.tz import utc_now
from ..aggregator import PerformanceSnapshot, PerformanceStatus


class OperatorPerformance(Base):
	"""One scored window for one operator. Rewritten wholesale on every run."""
	__tablename__ = "operator_performances"

	id: Mapped[str] = mapped_column(String(36), primary_key=True)
	user_id: Mapped[str] = mapped_column(
		String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True
	)
	period_start: Mapped[datetime] = mapped_column(DateTime)
	period_end: Mapped[datetime] = mapped_column(DateTime)

	total_inspections_assigned: Mapped[int] = mapped_column(Integer, default=0)
	completed_inspections: Mapped[int] = mapped_column(Integer, default=0)
	failed_inspections: Mapped[int] = mapped_column(Integer, default=0)
	pending_inspections: Mapped[int] = mapped_column(Integer, default=0)

	completion_rate: Mapped[float] = mapped_column(Float, default=0.0)
	pass_rate: Mapped[float] = mapped_column(Float, default=0.0)
	last_activity_at: Mapped[datetime | None] = mapped_column(DateTime)
	days_since_last_activity: Mapped[int] = mapped_column(Integer, default=0)
	performance_score: Mapped[float] = mapped_column(Float, default=0.0)
	status: Mapped[str] = mapped_column(String(20), default=PerformanceStatus.ACTIVE.value)
	notes: Mapped[str | None] = mapped_column(Text)

	created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
	updated_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, onupdate=utc_now)

	__table_args__ = (
		UniqueConstraint("user_id", "period_start", "period_end", name="uq_operator_performance_window"),
		Index("idx_operator_performance_status_end", "status", "period_end"),
	)

	def apply(self, snapshot: PerformanceSnapshot) -> None:
		"""Overwrite every computed field from a snapshot."""
		self.total_inspections_assigned = snapshot.total_inspections_assigned
		self.completed_inspections = snapshot.completed_inspections
		self.failed_inspections = snapshot.failed_inspections
		self.pending_inspections = snapshot.pending_inspections
		self.completion_rate = snapshot.completion_rate
		self.pass_rate = snapshot.pass_rate
		self.last_activity_at = snapshot.last_activity_at
		self.days_since_last_activity = snapshot.days_since_last_activity
		self.performance_score = snapshot.performance_score
		self.status = snapshot.status.value
		self.notes = snapshot.notes

	def to_snapshot(self) -> PerformanceSnapshot:
		return PerformanceSnapshot(
			user_id=self.user_id,
			period_start=self.period_start,
			period_end=self.period_end,
			total_inspections_assigned=self.total_inspections_assigned,
			completed_inspections=self.completed_inspections,
			failed_inspections=self.failed_inspections,
			pending_inspections=self.pending_inspections,
			completion_rate=self.completion_rate,
			pass_rate=self.pass_rate,
			last_activity_at=self.last_activity_at,
			days_since_last_activity=self.days_since_last_activity,
			performance_score=self.performance_score,
			status=PerformanceStatus(self.status),
			notes=self.notes or "",
		)
