# (c) Copyright Datacraft, 2026
"""Re-export every ORM model; importing this module registers all tables on Base.metadata."""
from drivewatch.core.features.users.db.orm import User
from drivewatch.core.features.assets.db.orm import Drive, Part
from drivewatch.core.features.inspections.db.orm import (
	InspectionTemplate,
	TemplateTask,
	TemplateSubTask,
	Inspection,
	InspectionTask,
	InspectionSubTask,
	InspectionResult,
)
from drivewatch.core.features.maintenance.db.orm import Maintenance
from drivewatch.core.features.operator_performance.db.orm import OperatorPerformance

__all__ = [
	"User",
	"Drive",
	"Part",
	"InspectionTemplate",
	"TemplateTask",
	"TemplateSubTask",
	"Inspection",
	"InspectionTask",
	"InspectionSubTask",
	"InspectionResult",
	"Maintenance",
	"OperatorPerformance",
]
