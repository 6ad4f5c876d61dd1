# (c) Copyright Datacraft, 2026
"""
Maintenance checklist.

A maintenance record may carry an ordered checklist. While the checklist has
items, the record status follows it:

- every item completed               -> completed
- any item completed or failed       -> in_progress
- otherwise                          -> pending

and cannot be set by hand. Older records store items as
{"task": ..., "completed": bool}; they are read as pending/completed and
written back in the current shape on the next edit.
"""
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from uuid_extensions import uuid7str

from drivewatch.core.exceptions import NotFound, ValidationError
from drivewatch.core.utils.tz import utc_now

logger = logging.getLogger(__name__)


class MaintenanceStatus(str, Enum):
	PENDING = "pending"
	IN_PROGRESS = "in_progress"
	COMPLETED = "completed"


class ItemStatus(str, Enum):
	PENDING = "pending"
	COMPLETED = "completed"
	FAILED = "failed"


@dataclass
class ChecklistItem:
	id: str
	text: str
	status: ItemStatus = ItemStatus.PENDING
	notes: str | None = None
	updated_at: str | None = None

	@classmethod
	def from_dict(cls, raw: Any) -> "ChecklistItem":
		if not isinstance(raw, dict):
			raise ValidationError(f"Checklist item must be an object, got {type(raw).__name__}")

		item_id = raw.get("id")
		if item_id is None:
			raise ValidationError("Checklist item without an id")

		if "status" in raw:
			try:
				status = ItemStatus(raw["status"])
			except ValueError:
				raise ValidationError(f"Unknown checklist item status '{raw['status']}'")
			text = raw.get("text", raw.get("task", ""))
		elif "completed" in raw:
			# legacy shape
			status = ItemStatus.COMPLETED if raw["completed"] else ItemStatus.PENDING
			text = raw.get("task", raw.get("text", ""))
		else:
			status = ItemStatus.PENDING
			text = raw.get("text", raw.get("task", ""))

		return cls(
			id=str(item_id),
			text=str(text),
			status=status,
			notes=raw.get("notes") or None,
			updated_at=raw.get("updated_at"),
		)

	def to_dict(self) -> dict:
		return {
			"id": self.id,
			"text": self.text,
			"status": self.status.value,
			"notes": self.notes,
			"updated_at": self.updated_at,
		}


@dataclass
class ChecklistStats:
	total: int = 0
	completed: int = 0
	failed: int = 0
	pending: int = 0

	@property
	def completion_percentage(self) -> int:
		if self.total == 0:
			return 0
		# half-up rounding
		return int(self.completed * 100 / self.total + 0.5)

	def to_dict(self) -> dict:
		return {
			"total": self.total,
			"completed": self.completed,
			"failed": self.failed,
			"pending": self.pending,
			"completion_percentage": self.completion_percentage,
		}


def _load(raw: Any) -> Any:
	if isinstance(raw, (str, bytes)):
		return json.loads(raw)
	return raw


def parse_checklist(raw: Any) -> list[ChecklistItem]:
	"""Strict parse used before any mutation. Raises ValidationError."""
	if raw is None:
		return []
	try:
		data = _load(raw)
	except ValueError as e:
		raise ValidationError(f"Checklist is not valid JSON: {e}")
	if data is None:
		return []
	if not isinstance(data, list):
		raise ValidationError(f"Checklist must be a list, got {type(data).__name__}")
	return [ChecklistItem.from_dict(item) for item in data]


def checklist_stats(raw: Any) -> ChecklistStats:
	"""
	Counts for reporting. A malformed payload yields zero counts and a
	warning instead of an error.
	"""
	try:
		data = _load(raw)
	except ValueError:
		logger.warning("Malformed checklist payload; reporting zero counts")
		return ChecklistStats()
	if data is None:
		return ChecklistStats()
	if not isinstance(data, list):
		logger.warning(f"Checklist payload is a {type(data).__name__}, not a list; reporting zero counts")
		return ChecklistStats()

	stats = ChecklistStats(total=len(data))
	for item in data:
		status = None
		if isinstance(item, dict):
			if "status" in item:
				status = item["status"]
			elif "completed" in item:
				status = ItemStatus.COMPLETED.value if item["completed"] else ItemStatus.PENDING.value
		if status == ItemStatus.COMPLETED.value:
			stats.completed += 1
		elif status == ItemStatus.FAILED.value:
			stats.failed += 1
		else:
			stats.pending += 1
	return stats


def derive_status(stats: ChecklistStats, current: str | None) -> MaintenanceStatus:
	if stats.total == 0:
		return MaintenanceStatus(current) if current else MaintenanceStatus.PENDING
	if stats.completed == stats.total:
		return MaintenanceStatus.COMPLETED
	if stats.completed > 0 or stats.failed > 0:
		return MaintenanceStatus.IN_PROGRESS
	return MaintenanceStatus.PENDING


def _item_status(status: str | ItemStatus) -> ItemStatus:
	try:
		return ItemStatus(status)
	except ValueError:
		raise ValidationError(f"Unknown checklist item status '{status}'")


@dataclass
class Checklist:
	"""Editable checklist; `to_json()` gives the payload to store."""
	items: list[ChecklistItem] = field(default_factory=list)

	@classmethod
	def load(cls, raw: Any) -> "Checklist":
		return cls(items=parse_checklist(raw))

	def _find(self, item_id: str) -> ChecklistItem:
		for item in self.items:
			if item.id == str(item_id):
				return item
		raise NotFound("ChecklistItem", str(item_id))

	def add_item(
		self,
		text: str,
		status: str | ItemStatus = ItemStatus.PENDING,
		notes: str | None = None,
	) -> ChecklistItem:
		if not text or not text.strip():
			raise ValidationError("Checklist item text cannot be empty")
		item = ChecklistItem(
			id=uuid7str(),
			text=text.strip(),
			status=_item_status(status),
			notes=notes,
			updated_at=utc_now().isoformat(),
		)
		self.items.append(item)
		return item

	def update_item(
		self,
		item_id: str,
		status: str | ItemStatus | None = None,
		notes: str | None = None,
	) -> ChecklistItem:
		item = self._find(item_id)
		if status is not None:
			item.status = _item_status(status)
		if notes is not None:
			item.notes = notes
		item.updated_at = utc_now().isoformat()
		return item

	def remove_item(self, item_id: str) -> None:
		item = self._find(item_id)
		self.items.remove(item)

	def stats(self) -> ChecklistStats:
		stats = ChecklistStats(total=len(self.items))
		for item in self.items:
			if item.status == ItemStatus.COMPLETED:
				stats.completed += 1
			elif item.status == ItemStatus.FAILED:
				stats.failed += 1
			else:
				stats.pending += 1
		return stats

	def derive_status(self, current: str | None) -> MaintenanceStatus:
		return derive_status(self.stats(), current)

	def to_json(self) -> list[dict]:
		return [item.to_dict() for item in self.items]
