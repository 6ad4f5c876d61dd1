# (c) Copyright Datacraft, 2026
"""Users known to the inspection engine: operators, editors and admins."""
from .db.orm import User, UserRole

__all__ = [
	'User',
	'UserRole',
]
