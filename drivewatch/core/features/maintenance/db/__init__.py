# (c) Copyright Datacraft, 2026
"""Maintenance database module."""
from .orm import Maintenance

__all__ = [
	'Maintenance',
]
