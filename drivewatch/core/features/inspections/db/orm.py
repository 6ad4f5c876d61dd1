# (c) Copyright Datacraft, 2026
"""Inspection ORM models."""
from datetime import date, datetime

from sqlalchemy import (
	String, ForeignKey, Integer, Boolean, Text, Float, Date, DateTime,
	Index, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from drivewatch.core.db.base import Base
from drivewatch.core.utils.tz import utc_now
from ..models import InspectionStatus, SubTaskStatus, TemplateFrequency
from ..validation import Compliance, Expectation, ValidationKind, compliance


class ExpectationColumns:
	"""Expectation payload columns shared by tasks, sub-tasks and blueprints."""
	kind: Mapped[str] = mapped_column(String(20), default=ValidationKind.NONE.value)
	expected_value_boolean: Mapped[bool | None] = mapped_column(Boolean)
	expected_value_min: Mapped[float | None] = mapped_column(Float)
	expected_value_max: Mapped[float | None] = mapped_column(Float)
	unit_of_measure: Mapped[str | None] = mapped_column(String(50))

	@property
	def expectation(self) -> Expectation:
		return Expectation.from_columns(
			self.kind,
			self.expected_value_boolean,
			self.expected_value_min,
			self.expected_value_max,
			self.unit_of_measure,
		)

	@expectation.setter
	def expectation(self, value: Expectation) -> None:
		for column, column_value in value.columns().items():
			setattr(self, column, column_value)

	@property
	def expectation_or_none(self) -> Expectation | None:
		"""Like `expectation`, but None for a kind we do not know."""
		if self.kind not in {k.value for k in ValidationKind}:
			return None
		return self.expectation


class InspectionTemplate(Base):
	"""Blueprint that spawns recurring inspection instances."""
	__tablename__ = "inspection_templates"

	id: Mapped[str] = mapped_column(String(36), primary_key=True)
	name: Mapped[str] = mapped_column(String(255))
	description: Mapped[str | None] = mapped_column(Text)
	frequency: Mapped[str] = mapped_column(String(20), default=TemplateFrequency.ONE_TIME.value)
	start_date: Mapped[date] = mapped_column(Date)
	end_date: Mapped[date | None] = mapped_column(Date)
	assigned_to: Mapped[str | None] = mapped_column(
		String(36), ForeignKey("users.id", ondelete="SET NULL")
	)
	created_by: Mapped[str | None] = mapped_column(
		String(36), ForeignKey("users.id", ondelete="SET NULL")
	)
	is_active: Mapped[bool] = mapped_column(Boolean, default=True)
	created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
	updated_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, onupdate=utc_now)

	tasks: Mapped[list["TemplateTask"]] = relationship(
		back_populates="template",
		cascade="all, delete-orphan",
		order_by="TemplateTask.sort_order",
		lazy="selectin",
	)


class TemplateTask(ExpectationColumns, Base):
	__tablename__ = "inspection_template_tasks"

	id: Mapped[str] = mapped_column(String(36), primary_key=True)
	template_id: Mapped[str] = mapped_column(
		String(36), ForeignKey("inspection_templates.id", ondelete="CASCADE"), index=True
	)
	name: Mapped[str] = mapped_column(String(255))
	description: Mapped[str | None] = mapped_column(Text)
	target_type: Mapped[str | None] = mapped_column(String(20))
	target_id: Mapped[str | None] = mapped_column(String(36))
	required: Mapped[bool] = mapped_column(Boolean, default=True)
	sort_order: Mapped[int] = mapped_column(Integer, default=0)

	template: Mapped["InspectionTemplate"] = relationship(back_populates="tasks")
	sub_tasks: Mapped[list["TemplateSubTask"]] = relationship(
		back_populates="task",
		cascade="all, delete-orphan",
		order_by="TemplateSubTask.sort_order",
		lazy="selectin",
	)


class TemplateSubTask(ExpectationColumns, Base):
	__tablename__ = "inspection_template_sub_tasks"

	id: Mapped[str] = mapped_column(String(36), primary_key=True)
	template_task_id: Mapped[str] = mapped_column(
		String(36), ForeignKey("inspection_template_tasks.id", ondelete="CASCADE"), index=True
	)
	name: Mapped[str] = mapped_column(String(255))
	description: Mapped[str | None] = mapped_column(Text)
	sort_order: Mapped[int] = mapped_column(Integer, default=0)

	task: Mapped["TemplateTask"] = relationship(back_populates="sub_tasks")


class Inspection(Base):
	"""One scheduled or ad hoc execution of a checklist."""
	__tablename__ = "inspections"

	id: Mapped[str] = mapped_column(String(36), primary_key=True)
	name: Mapped[str] = mapped_column(String(255))
	description: Mapped[str | None] = mapped_column(Text)
	template_id: Mapped[str | None] = mapped_column(
		String(36), ForeignKey("inspection_templates.id", ondelete="SET NULL"), index=True
	)
	status: Mapped[str] = mapped_column(String(20), default=InspectionStatus.DRAFT.value)

	created_by: Mapped[str | None] = mapped_column(
		String(36), ForeignKey("users.id", ondelete="SET NULL")
	)
	assigned_to: Mapped[str | None] = mapped_column(
		String(36), ForeignKey("users.id", ondelete="SET NULL"), index=True
	)
	completed_by: Mapped[str | None] = mapped_column(
		String(36), ForeignKey("users.id", ondelete="SET NULL")
	)
	scheduled_date: Mapped[date | None] = mapped_column(Date)
	completed_date: Mapped[datetime | None] = mapped_column(DateTime)
	notes: Mapped[str | None] = mapped_column(Text)

	# Expiry tracking
	expiry_date: Mapped[datetime | None] = mapped_column(DateTime)
	is_expired: Mapped[bool] = mapped_column(Boolean, default=False)
	expired_at: Mapped[datetime | None] = mapped_column(DateTime)
	performance_penalty: Mapped[int] = mapped_column(Integer, default=0)

	# Rollup counters, refreshed at the end of every recording transaction
	tasks_total: Mapped[int] = mapped_column(Integer, default=0)
	tasks_with_result: Mapped[int] = mapped_column(Integer, default=0)
	required_total: Mapped[int] = mapped_column(Integer, default=0)
	required_passing: Mapped[int] = mapped_column(Integer, default=0)
	subtasks_total: Mapped[int] = mapped_column(Integer, default=0)
	subtasks_completed: Mapped[int] = mapped_column(Integer, default=0)
	failing_items: Mapped[int] = mapped_column(Integer, default=0)

	created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
	updated_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, onupdate=utc_now)
	deleted_at: Mapped[datetime | None] = mapped_column(DateTime)

	tasks: Mapped[list["InspectionTask"]] = relationship(
		back_populates="inspection",
		cascade="all, delete-orphan",
		order_by="InspectionTask.sort_order",
		lazy="selectin",
	)

	__table_args__ = (
		UniqueConstraint("template_id", "scheduled_date", name="uq_inspections_template_date"),
		Index("idx_inspections_assigned_created", "assigned_to", "created_at"),
		Index("idx_inspections_status", "status"),
	)

	@property
	def status_enum(self) -> InspectionStatus:
		return InspectionStatus(self.status)


class InspectionTask(ExpectationColumns, Base):
	__tablename__ = "inspection_tasks"

	id: Mapped[str] = mapped_column(String(36), primary_key=True)
	inspection_id: Mapped[str] = mapped_column(
		String(36), ForeignKey("inspections.id", ondelete="CASCADE"), index=True
	)
	name: Mapped[str] = mapped_column(String(255))
	description: Mapped[str | None] = mapped_column(Text)
	# Weak reference: no FK so equipment can be deleted without touching history
	target_type: Mapped[str | None] = mapped_column(String(20))
	target_id: Mapped[str | None] = mapped_column(String(36))
	required: Mapped[bool] = mapped_column(Boolean, default=True)
	sort_order: Mapped[int] = mapped_column(Integer, default=0)
	created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)

	inspection: Mapped["Inspection"] = relationship(back_populates="tasks")
	sub_tasks: Mapped[list["InspectionSubTask"]] = relationship(
		back_populates="task",
		cascade="all, delete-orphan",
		order_by="InspectionSubTask.sort_order",
		lazy="selectin",
	)

	@property
	def is_decomposed(self) -> bool:
		return len(self.sub_tasks) > 0

	@property
	def pending_sub_tasks(self) -> list["InspectionSubTask"]:
		return [s for s in self.sub_tasks if s.status != SubTaskStatus.COMPLETED.value]


class InspectionSubTask(ExpectationColumns, Base):
	__tablename__ = "inspection_sub_tasks"

	id: Mapped[str] = mapped_column(String(36), primary_key=True)
	task_id: Mapped[str] = mapped_column(
		String(36), ForeignKey("inspection_tasks.id", ondelete="CASCADE"), index=True
	)
	name: Mapped[str] = mapped_column(String(255))
	description: Mapped[str | None] = mapped_column(Text)
	status: Mapped[str] = mapped_column(String(20), default=SubTaskStatus.PENDING.value)
	recorded_value_boolean: Mapped[bool | None] = mapped_column(Boolean)
	recorded_value_numeric: Mapped[float | None] = mapped_column(Float)
	notes: Mapped[str | None] = mapped_column(Text)
	completed_by: Mapped[str | None] = mapped_column(
		String(36), ForeignKey("users.id", ondelete="SET NULL")
	)
	completed_at: Mapped[datetime | None] = mapped_column(DateTime)
	sort_order: Mapped[int] = mapped_column(Integer, default=0)
	created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
	updated_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, onupdate=utc_now)

	task: Mapped["InspectionTask"] = relationship(back_populates="sub_tasks")

	@property
	def is_completed(self) -> bool:
		return self.status == SubTaskStatus.COMPLETED.value

	@property
	def compliance(self) -> Compliance:
		return compliance(
			self.expectation_or_none,
			self.is_completed,
			self.recorded_value_boolean,
			self.recorded_value_numeric,
		)


class InspectionResult(Base):
	"""
	One recorded answer for a task.

	Rows are only ever appended. The row with the highest sequence per task is
	the current answer; older rows are the audit trail.
	"""
	__tablename__ = "inspection_results"

	id: Mapped[str] = mapped_column(String(36), primary_key=True)
	inspection_id: Mapped[str] = mapped_column(
		String(36), ForeignKey("inspections.id", ondelete="CASCADE"), index=True
	)
	task_id: Mapped[str] = mapped_column(
		String(36), ForeignKey("inspection_tasks.id", ondelete="CASCADE")
	)
	performed_by: Mapped[str | None] = mapped_column(
		String(36), ForeignKey("users.id", ondelete="SET NULL")
	)
	value_boolean: Mapped[bool | None] = mapped_column(Boolean)
	value_numeric: Mapped[float | None] = mapped_column(Float)
	is_passing: Mapped[bool] = mapped_column(Boolean, default=False)
	notes: Mapped[str | None] = mapped_column(Text)
	sequence: Mapped[int] = mapped_column(Integer, default=1)
	recorded_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)

	__table_args__ = (
		UniqueConstraint("task_id", "sequence", name="uq_inspection_results_task_sequence"),
		Index("idx_inspection_results_recorded", "recorded_at"),
	)
