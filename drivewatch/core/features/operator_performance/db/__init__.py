# (c) Copyright Datacraft, 2026
"""Operator performance database module."""
from .orm import OperatorPerformance

__all__ = [
	'OperatorPerformance',
]
