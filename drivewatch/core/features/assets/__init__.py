# (c) Copyright Datacraft, 2026
"""Equipment under inspection and weak reference resolution of task targets."""
from .db.orm import Drive, Part
from .lookup import AssetLookup, TargetType

__all__ = [
	'Drive',
	'Part',
	'AssetLookup',
	'TargetType',
]
