# (c) Copyright Datacraft, 2026
"""Users database module."""
from .orm import User, UserRole

__all__ = [
	'User',
	'UserRole',
]
