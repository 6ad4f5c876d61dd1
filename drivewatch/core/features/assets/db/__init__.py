# (c) Copyright Datacraft, 2026
"""Assets database module."""
from .orm import Drive, Part

__all__ = [
	'Drive',
	'Part',
]
