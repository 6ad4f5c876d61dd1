# (c) Copyright Datacraft, 2026
"""User ORM model.

Users are owned by the identity provider; this table only mirrors what the
inspection engine needs: who is an operator, who may edit closed inspections.
"""
from datetime import datetime
from enum import Enum

from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from drivewatch.core.db.base import Base
from drivewatch.core.utils.tz import utc_now


class UserRole(str, Enum):
	OPERATOR = "operator"
	EDITOR = "editor"
	ADMIN = "admin"


class User(Base):
	__tablename__ = "users"

	id: Mapped[str] = mapped_column(String(36), primary_key=True)
	username: Mapped[str] = mapped_column(String(150), unique=True, index=True)
	name: Mapped[str] = mapped_column(String(255))
	email: Mapped[str | None] = mapped_column(String(255))
	role: Mapped[str] = mapped_column(String(20), default=UserRole.OPERATOR.value)
	is_active: Mapped[bool] = mapped_column(Boolean, default=True)
	created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)

	@property
	def can_edit_closed_inspections(self) -> bool:
		return self.role in (UserRole.EDITOR.value, UserRole.ADMIN.value)
