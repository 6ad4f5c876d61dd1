# (c) Copyright Datacraft, 2026
"""
Maintenance records.

Work orders on drives with an optional checklist that drives the record
status. Failed inspections raise follow-up maintenance automatically.
"""
from .checklist import (
	Checklist,
	ChecklistItem,
	ChecklistStats,
	ItemStatus,
	MaintenanceStatus,
	checklist_stats,
	derive_status,
)

__all__ = [
	'Checklist',
	'ChecklistItem',
	'ChecklistStats',
	'ItemStatus',
	'MaintenanceStatus',
	'checklist_stats',
	'derive_status',
]
