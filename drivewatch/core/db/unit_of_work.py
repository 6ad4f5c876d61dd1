# (c) Copyright Datacraft, 2026
"""
Transaction boundary for engine operations.

A unit of work wraps one AsyncSession transaction. Engines register hooks
(e.g. the inspection rollup) which run inside the transaction, after all
pending writes are flushed and right before COMMIT. A failure anywhere rolls
the whole transaction back, so a mutation and its rollup are committed
together or not at all.
"""
import logging
from typing import Awaitable, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from drivewatch.core.exceptions import PersistenceFailure

logger = logging.getLogger(__name__)

CommitHook = Callable[[AsyncSession], Awaitable[None]]


class UnitOfWork:
	"""
	Usage:
		async with UnitOfWork(session) as uow:
			...mutate...
			uow.before_commit("rollup:123", hook)
			await uow.commit()
	"""

	def __init__(self, session: AsyncSession):
		self.session = session
		self._hooks: dict[str, CommitHook] = {}
		self._committed = False

	def before_commit(self, key: str, hook: CommitHook) -> None:
		"""Register a hook; registering the same key twice keeps one hook."""
		self._hooks.setdefault(key, hook)

	async def flush(self) -> None:
		try:
			await self.session.flush()
		except SQLAlchemyError as e:
			await self.rollback()
			logger.exception(f"Flush failed: {e}")
			raise PersistenceFailure("Could not write changes, please retry") from e

	async def commit(self) -> None:
		try:
			await self.session.flush()
			while self._hooks:
				hooks = list(self._hooks.items())
				self._hooks.clear()
				for key, hook in hooks:
					logger.debug(f"Running commit hook {key}")
					await hook(self.session)
				await self.session.flush()
			await self.session.commit()
			self._committed = True
		except SQLAlchemyError as e:
			await self.rollback()
			logger.exception(f"Commit failed: {e}")
			raise PersistenceFailure("Could not write changes, please retry") from e

	async def rollback(self) -> None:
		self._hooks.clear()
		await self.session.rollback()

	async def __aenter__(self) -> "UnitOfWork":
		return self

	async def __aexit__(self, exc_type, exc, tb) -> None:
		if exc_type is not None and not self._committed:
			await self.rollback()
