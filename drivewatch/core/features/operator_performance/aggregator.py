# (c) Copyright Datacraft, 2026
"""
Operator performance scoring.

Pure computation over facts gathered for one operator and one window. All
rates are percentages (0-100):

	completion_rate   = completed / assigned * 100       (0 when nothing assigned)
	pass_rate         = passing results / results * 100  (0 when no results)
	performance_score = 0.6 * completion_rate + 0.4 * pass_rate

Status is critical below 50, warning below 75 or with completion under 60,
otherwise active. An operator with at least one assignment and no activity
for more than the inactivity threshold is inactive, whatever the score.
Status and notes are decided on unrounded values; stored rates are rounded
to two decimals.
"""
import json
from dataclasses import dataclass, asdict
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum

COMPLETION_WEIGHT = 0.6
PASS_WEIGHT = 0.4

CRITICAL_SCORE = 50
WARNING_SCORE = 75
LOW_COMPLETION_RATE = 60
LOW_PASS_RATE = 80


class PerformanceStatus(str, Enum):
	ACTIVE = "active"
	WARNING = "warning"
	CRITICAL = "critical"
	INACTIVE = "inactive"


ATTENTION_STATUSES = (
	PerformanceStatus.WARNING,
	PerformanceStatus.CRITICAL,
	PerformanceStatus.INACTIVE,
)


@dataclass(frozen=True)
class ActivityFacts:
	"""Raw counts for one operator within one window."""
	total_assigned: int = 0
	completed: int = 0
	failed: int = 0
	pending: int = 0
	results_total: int = 0
	results_passing: int = 0
	last_activity_at: datetime | None = None


@dataclass(frozen=True)
class PerformanceSnapshot:
	user_id: str
	period_start: datetime
	period_end: datetime
	total_inspections_assigned: int
	completed_inspections: int
	failed_inspections: int
	pending_inspections: int
	completion_rate: float
	pass_rate: float
	last_activity_at: datetime | None
	days_since_last_activity: int
	performance_score: float
	status: PerformanceStatus
	notes: str

	@property
	def needs_attention(self) -> bool:
		return self.status in ATTENTION_STATUSES

	def to_dict(self) -> dict:
		data = asdict(self)
		data["status"] = self.status.value
		for key in ("period_start", "period_end", "last_activity_at"):
			if data[key] is not None:
				data[key] = data[key].isoformat()
		return data

	def to_json(self) -> str:
		"""Stable serialization: same inputs give the same bytes."""
		return json.dumps(self.to_dict(), sort_keys=True)


def round2(value: float) -> float:
	return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def classify_status(
	performance_score: float,
	completion_rate: float,
	days_since_last_activity: int,
	total_assigned: int,
	inactivity_threshold_days: int = 7,
) -> PerformanceStatus:
	if performance_score < CRITICAL_SCORE:
		status = PerformanceStatus.CRITICAL
	elif performance_score < WARNING_SCORE or completion_rate < LOW_COMPLETION_RATE:
		status = PerformanceStatus.WARNING
	else:
		status = PerformanceStatus.ACTIVE

	# Nobody is inactive for work that was never assigned
	if days_since_last_activity > inactivity_threshold_days and total_assigned > 0:
		status = PerformanceStatus.INACTIVE
	return status


def generate_notes(
	status: PerformanceStatus,
	completion_rate: float,
	pass_rate: float,
	days_since_last_activity: int,
	total_assigned: int,
	inactivity_threshold_days: int = 7,
) -> str:
	notes = []

	if total_assigned == 0:
		notes.append("No inspections assigned in this period.")
	else:
		if completion_rate < LOW_COMPLETION_RATE:
			notes.append("Low completion rate - may need support or training.")
		if pass_rate < LOW_PASS_RATE:
			notes.append("Low pass rate - may need quality improvement.")
		if days_since_last_activity > inactivity_threshold_days:
			notes.append(f"No activity for {days_since_last_activity} days.")

	if status == PerformanceStatus.CRITICAL:
		notes.append("CRITICAL: Immediate attention required.")
	elif status == PerformanceStatus.WARNING:
		notes.append("WARNING: Performance below acceptable levels.")
	elif status == PerformanceStatus.INACTIVE:
		notes.append("INACTIVE: No recent activity detected.")

	return " ".join(notes)


def compute_snapshot(
	user_id: str,
	facts: ActivityFacts,
	period_start: datetime,
	period_end: datetime,
	window_days: int,
	inactivity_threshold_days: int = 7,
) -> PerformanceSnapshot:
	"""Score one operator. `period_end` is "now" for the run."""
	if facts.total_assigned > 0:
		completion_rate = facts.completed / facts.total_assigned * 100
	else:
		completion_rate = 0.0

	if facts.results_total > 0:
		pass_rate = facts.results_passing / facts.results_total * 100
	else:
		pass_rate = 0.0

	performance_score = completion_rate * COMPLETION_WEIGHT + pass_rate * PASS_WEIGHT

	if facts.last_activity_at is not None:
		days_since = max((period_end - facts.last_activity_at).days, 0)
	else:
		days_since = window_days

	status = classify_status(
		performance_score,
		completion_rate,
		days_since,
		facts.total_assigned,
		inactivity_threshold_days,
	)
	notes = generate_notes(
		status,
		completion_rate,
		pass_rate,
		days_since,
		facts.total_assigned,
		inactivity_threshold_days,
	)

	return PerformanceSnapshot(
		user_id=user_id,
		period_start=period_start,
		period_end=period_end,
		total_inspections_assigned=facts.total_assigned,
		completed_inspections=facts.completed,
		failed_inspections=facts.failed,
		pending_inspections=facts.pending,
		completion_rate=round2(completion_rate),
		pass_rate=round2(pass_rate),
		last_activity_at=facts.last_activity_at,
		days_since_last_activity=days_since,
		performance_score=round2(performance_score),
		status=status,
		notes=notes,
	)
