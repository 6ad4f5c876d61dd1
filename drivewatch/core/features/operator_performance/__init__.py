# (c) Copyright Datacraft, 2026
"""
Operator performance.

Scores each operator over a rolling window from their assigned inspections
and recorded results, and flags operators whose score or activity needs a
manager's attention.
"""
from .aggregator import (
	ActivityFacts,
	PerformanceSnapshot,
	PerformanceStatus,
	classify_status,
	compute_snapshot,
	generate_notes,
)
from .service import OperatorPerformanceService

__all__ = [
	'ActivityFacts',
	'PerformanceSnapshot',
	'PerformanceStatus',
	'classify_status',
	'compute_snapshot',
	'generate_notes',
	'OperatorPerformanceService',
]
