# (c) Copyright Datacraft, 2026
"""Users database API."""
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .orm import User, UserRole


async def get_user(session: AsyncSession, user_id: str) -> User | None:
	return await session.get(User, user_id)


async def get_user_by_username(session: AsyncSession, username: str) -> User | None:
	stmt = select(User).where(User.username == username)
	result = await session.execute(stmt)
	return result.scalar_one_or_none()


async def get_users_by_role(
	session: AsyncSession,
	role: UserRole,
	only_active: bool = True,
) -> Sequence[User]:
	"""Get users with the given role, ordered by name."""
	stmt = select(User).where(User.role == role.value)
	if only_active:
		stmt = stmt.where(User.is_active.is_(True))
	stmt = stmt.order_by(User.name)
	result = await session.execute(stmt)
	return result.scalars().all()
