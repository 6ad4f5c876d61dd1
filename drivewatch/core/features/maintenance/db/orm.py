# (c) Copyright Datacraft, 2026
"""Maintenance ORM model."""
from datetime import datetime

from sqlalchemy import String, ForeignKey, Boolean, Text, Float, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from drivewatch.core.db.base import Base
from drivewatch.core.utils.tz import utc_now
from ..checklist import MaintenanceStatus


class Maintenance(Base):
	"""Maintenance work on a drive, optionally raised by a failed inspection."""
	__tablename__ = "maintenances"

	id: Mapped[str] = mapped_column(String(36), primary_key=True)
	# Weak reference, same as inspection task targets
	drive_id: Mapped[str | None] = mapped_column(String(36), index=True)
	title: Mapped[str] = mapped_column(String(255))
	description: Mapped[str | None] = mapped_column(Text)
	maintenance_date: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
	technician: Mapped[str | None] = mapped_column(String(255))
	status: Mapped[str] = mapped_column(String(20), default=MaintenanceStatus.PENDING.value)
	cost: Mapped[float | None] = mapped_column(Float)
	user_id: Mapped[str | None] = mapped_column(
		String(36), ForeignKey("users.id", ondelete="SET NULL")
	)
	checklist_json: Mapped[list | None] = mapped_column(JSON)

	created_from_inspection: Mapped[bool] = mapped_column(Boolean, default=False)
	inspection_id: Mapped[str | None] = mapped_column(
		String(36), ForeignKey("inspections.id", ondelete="SET NULL")
	)
	inspection_task_id: Mapped[str | None] = mapped_column(String(36))
	inspection_result_id: Mapped[str | None] = mapped_column(String(36))

	created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
	updated_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, onupdate=utc_now)

	__table_args__ = (
		Index("idx_maintenances_inspection", "inspection_id"),
		Index("idx_maintenances_status", "status"),
	)
