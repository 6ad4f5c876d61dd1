# (c) Copyright Datacraft, 2026
"""
Weak reference resolution for inspection targets.

Tasks point at a drive or part by (target_type, target_id) without a foreign
key, so deleting equipment never blocks on inspection history. Callers must
treat a missing target as a normal outcome.
"""
import logging
from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession

from .db.orm import Drive, Part

logger = logging.getLogger(__name__)


class TargetType(str, Enum):
	DRIVE = "drive"
	PART = "part"
	NONE = "none"


class AssetLookup:
	"""Resolves task targets against the drives and parts tables."""

	def __init__(self, session: AsyncSession):
		self.session = session

	async def resolve(self, target_type: str | None, target_id: str | None) -> Drive | Part | None:
		"""Return the live target, or None when unset, unknown or deleted."""
		if not target_id or target_type in (None, TargetType.NONE.value):
			return None

		if target_type == TargetType.DRIVE.value:
			target = await self.session.get(Drive, target_id)
		elif target_type == TargetType.PART.value:
			target = await self.session.get(Part, target_id)
		else:
			logger.warning(f"Unknown target type '{target_type}' for target {target_id}")
			return None

		if target is None or target.deleted_at is not None:
			logger.warning(f"Dangling {target_type} reference: {target_id}")
			return None
		return target
