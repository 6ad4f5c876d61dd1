# (c) Copyright Datacraft, 2026
"""Drive and part ORM models (equipment under inspection)."""
from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from drivewatch.core.db.base import Base
from drivewatch.core.utils.tz import utc_now


class Drive(Base):
	__tablename__ = "drives"

	id: Mapped[str] = mapped_column(String(36), primary_key=True)
	name: Mapped[str] = mapped_column(String(255))
	drive_ref: Mapped[str] = mapped_column(String(255), unique=True)
	location: Mapped[str | None] = mapped_column(String(255))
	notes: Mapped[str | None] = mapped_column(Text)
	status: Mapped[str] = mapped_column(String(20), default="active")
	created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
	deleted_at: Mapped[datetime | None] = mapped_column(DateTime)


class Part(Base):
	__tablename__ = "parts"

	id: Mapped[str] = mapped_column(String(36), primary_key=True)
	drive_id: Mapped[str | None] = mapped_column(
		String(36), ForeignKey("drives.id", ondelete="SET NULL"), index=True
	)
	name: Mapped[str] = mapped_column(String(255))
	part_ref: Mapped[str] = mapped_column(String(255), unique=True)
	status: Mapped[str] = mapped_column(String(20), default="in_stock")
	created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
	deleted_at: Mapped[datetime | None] = mapped_column(DateTime)
