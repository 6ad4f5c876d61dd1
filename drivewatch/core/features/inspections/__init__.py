# (c) Copyright Datacraft, 2026
"""
Inspection compliance engine.

Inspections hold tasks, tasks hold sub-tasks, and every checkable item
declares how its answer is validated (yes/no, numeric range, or completion
only). Recorded answers roll up into cached inspection counters; completing
an inspection is always an explicit act.
"""
from .models import (
	InspectionStatus,
	SubTaskStatus,
	TemplateFrequency,
	PriorityLevel,
)
from .validation import (
	Compliance,
	Expectation,
	ValidationKind,
	classify,
	is_passing,
)
from .service import InspectionService

__all__ = [
	'InspectionStatus',
	'SubTaskStatus',
	'TemplateFrequency',
	'PriorityLevel',
	'Compliance',
	'Expectation',
	'ValidationKind',
	'classify',
	'is_passing',
	'InspectionService',
]
