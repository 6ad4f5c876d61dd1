# (c) Copyright Datacraft, 2026
"""
Value validation for inspection tasks and sub-tasks.

Each checkable item declares one validation kind:

- yes_no:  the recorded boolean must equal the expected boolean
- numeric: the recorded number must lie in [minimum, maximum]
- none:    no value; the item passes once it is completed

The expectation is a tagged variant (kind + payload). Persisted rows keep one
column per payload field; `Expectation.columns()` always returns every column,
so fields that do not belong to the kind are written as NULL.
"""
import logging
import math
from dataclasses import dataclass
from enum import Enum

from drivewatch.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class ValidationKind(str, Enum):
	YES_NO = "yes_no"
	NUMERIC = "numeric"
	NONE = "none"


class Compliance(str, Enum):
	"""Fine-grained classification of an item's answer against its expectation."""
	PENDING_ACTION = "pending_action"
	PENDING_RESULT = "pending_result"
	PASSING = "passing"
	FAILING = "failing"
	WARNING = "warning"
	COMPLETE = "complete"
	MISCONFIGURED = "misconfigured"
	UNKNOWN = "unknown"


# Compliance values that count as a failed check in rollups and reports
NON_COMPLIANT = frozenset({Compliance.FAILING, Compliance.WARNING})


@dataclass(frozen=True)
class Expectation:
	"""What a recorded value is checked against."""
	kind: ValidationKind
	expected_boolean: bool | None = None
	minimum: float | None = None
	maximum: float | None = None
	unit: str | None = None

	@classmethod
	def yes_no(cls, expected: bool) -> "Expectation":
		return cls(kind=ValidationKind.YES_NO, expected_boolean=expected)

	@classmethod
	def numeric(cls, minimum: float, maximum: float, unit: str | None = None) -> "Expectation":
		return cls(kind=ValidationKind.NUMERIC, minimum=minimum, maximum=maximum, unit=unit)

	@classmethod
	def completion(cls) -> "Expectation":
		return cls(kind=ValidationKind.NONE)

	@classmethod
	def from_columns(
		cls,
		kind: str,
		expected_boolean: bool | None,
		minimum: float | None,
		maximum: float | None,
		unit: str | None = None,
	) -> "Expectation":
		"""
		Rebuild the variant from stored columns.

		Stored rows are not re-validated here: a row imported with a missing
		range must still load so it can be reported as misconfigured.
		Raises ValueError for an unknown kind.
		"""
		kind = ValidationKind(kind)
		if kind == ValidationKind.YES_NO:
			return cls(kind=kind, expected_boolean=expected_boolean)
		if kind == ValidationKind.NUMERIC:
			return cls(kind=kind, minimum=minimum, maximum=maximum, unit=unit)
		return cls(kind=kind)

	@property
	def is_configured(self) -> bool:
		if self.kind == ValidationKind.YES_NO:
			return self.expected_boolean is not None
		if self.kind == ValidationKind.NUMERIC:
			return (
				self.minimum is not None
				and self.maximum is not None
				and self.minimum <= self.maximum
			)
		return True

	@property
	def requires_value(self) -> bool:
		return self.kind != ValidationKind.NONE

	def validate(self) -> "Expectation":
		"""Reject an expectation that cannot be evaluated. Returns self."""
		if self.kind == ValidationKind.YES_NO and self.expected_boolean is None:
			raise ValidationError("yes_no items need an expected boolean value")
		if self.kind == ValidationKind.NUMERIC:
			if self.minimum is None or self.maximum is None:
				raise ValidationError("numeric items need both a minimum and a maximum")
			if not (math.isfinite(self.minimum) and math.isfinite(self.maximum)):
				raise ValidationError("numeric range bounds must be finite numbers")
			if self.minimum > self.maximum:
				raise ValidationError(
					f"numeric range is inverted: minimum {self.minimum} > maximum {self.maximum}"
				)
		return self

	def columns(self) -> dict:
		"""Column values for persistence; unused payload fields are None."""
		return {
			"kind": self.kind.value,
			"expected_value_boolean": self.expected_boolean if self.kind == ValidationKind.YES_NO else None,
			"expected_value_min": self.minimum if self.kind == ValidationKind.NUMERIC else None,
			"expected_value_max": self.maximum if self.kind == ValidationKind.NUMERIC else None,
			"unit_of_measure": self.unit if self.kind == ValidationKind.NUMERIC else None,
		}

	def describe(self) -> str:
		if self.kind == ValidationKind.YES_NO:
			return f"expected {'yes' if self.expected_boolean else 'no'}"
		if self.kind == ValidationKind.NUMERIC:
			unit = f" {self.unit}" if self.unit else ""
			return f"expected between {self.minimum} and {self.maximum}{unit}"
		return "completion only"


def check_value_shape(
	expectation: Expectation,
	boolean_value: bool | None,
	numeric_value: float | None,
) -> tuple[bool | None, float | None]:
	"""
	Validate a submitted answer against the declared kind.

	Returns the (boolean, numeric) pair to persist: the field that belongs to
	the kind is kept, the other one is forced to None.
	"""
	if expectation.kind == ValidationKind.YES_NO:
		if boolean_value is None:
			raise ValidationError("a yes_no result needs a boolean value")
		return boolean_value, None
	if expectation.kind == ValidationKind.NUMERIC:
		if numeric_value is None:
			raise ValidationError("a numeric result needs a numeric value")
		if not math.isfinite(numeric_value):
			raise ValidationError("numeric result must be a finite number")
		return None, float(numeric_value)
	return None, None


def is_passing(
	expectation: Expectation,
	boolean_value: bool | None = None,
	numeric_value: float | None = None,
	completed: bool = False,
) -> bool:
	"""True when the answer satisfies the expectation."""
	if expectation.kind == ValidationKind.NONE:
		return completed
	return classify(expectation, boolean_value, numeric_value) == Compliance.PASSING


def classify(
	expectation: Expectation,
	boolean_value: bool | None,
	numeric_value: float | None,
) -> Compliance:
	"""
	Classify a recorded value.

	Numeric values above the maximum are a WARNING, values below the minimum
	are FAILING. Missing configuration is MISCONFIGURED regardless of value.
	"""
	if not expectation.is_configured:
		return Compliance.MISCONFIGURED

	if expectation.kind == ValidationKind.YES_NO:
		if boolean_value is None:
			return Compliance.PENDING_RESULT
		if boolean_value == expectation.expected_boolean:
			return Compliance.PASSING
		return Compliance.FAILING

	if expectation.kind == ValidationKind.NUMERIC:
		if numeric_value is None:
			return Compliance.PENDING_RESULT
		if numeric_value > expectation.maximum:
			return Compliance.WARNING
		if numeric_value < expectation.minimum:
			return Compliance.FAILING
		return Compliance.PASSING

	return Compliance.COMPLETE


def compliance(
	expectation: Expectation | None,
	completed: bool,
	boolean_value: bool | None,
	numeric_value: float | None,
) -> Compliance:
	"""
	Classify an item's current state, not just its last value.

	`expectation` is None when the stored kind is not one we know.
	"""
	if expectation is None:
		return Compliance.UNKNOWN
	if expectation.kind == ValidationKind.NONE:
		return Compliance.COMPLETE if completed else Compliance.PENDING_ACTION
	if not expectation.is_configured:
		return Compliance.MISCONFIGURED
	if boolean_value is None and numeric_value is None:
		# Completed without a value only happens for imported data
		return Compliance.PENDING_RESULT if completed else Compliance.PENDING_ACTION
	return classify(expectation, boolean_value, numeric_value)
