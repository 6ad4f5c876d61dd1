# (c) Copyright Datacraft, 2026
"""Inspections database module."""
from .orm import (
	Inspection,
	InspectionTemplate,
	TemplateTask,
	TemplateSubTask,
	InspectionTask,
	InspectionSubTask,
	InspectionResult,
)
from .api import InspectionDB

__all__ = [
	'Inspection',
	'InspectionTemplate',
	'TemplateTask',
	'TemplateSubTask',
	'InspectionTask',
	'InspectionSubTask',
	'InspectionResult',
	'InspectionDB',
]
