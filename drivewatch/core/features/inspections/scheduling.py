# (c) Copyright Datacraft, 2026
"""
Scheduled generation of inspection instances from templates.

Invoked once per day by the external scheduler. A template is due on:

- daily:    every day
- weekly:   the weekday of its start date
- monthly:  the day of month of its start date, clamped to the last day of
            shorter months (a template starting on the 31st runs on Feb 29)
- one_time: any day, as long as it never spawned an instance

inside its [start_date, end_date] window. A template spawns at most one
instance per calendar date: the generator checks first, and the unique
(template_id, scheduled_date) constraint catches concurrent runs.
"""
import calendar
import logging
from datetime import date, datetime, time, timedelta

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_extensions import uuid7str

from drivewatch.core.exceptions import PersistenceFailure
from .db.api import InspectionDB
from .db.orm import (
	Inspection, InspectionTask, InspectionSubTask, InspectionTemplate,
)
from .models import InspectionStatus, SubTaskStatus, TemplateFrequency
from .rollup import apply_rollup, compute_rollup

logger = logging.getLogger(__name__)

END_OF_DAY = time(23, 59, 59)


def _last_day_of_month(on_date: date) -> int:
	return calendar.monthrange(on_date.year, on_date.month)[1]


def is_due(template: InspectionTemplate, as_of: date) -> bool:
	"""Whether the template's calendar asks for an instance on `as_of`."""
	if not template.is_active:
		return False
	if as_of < template.start_date:
		return False
	if template.end_date is not None and as_of > template.end_date:
		return False

	frequency = TemplateFrequency(template.frequency)
	if frequency == TemplateFrequency.DAILY:
		return True
	if frequency == TemplateFrequency.WEEKLY:
		return as_of.weekday() == template.start_date.weekday()
	if frequency == TemplateFrequency.MONTHLY:
		return as_of.day == min(template.start_date.day, _last_day_of_month(as_of))
	# one_time: existence is checked by the caller
	return True


def instance_name(template: InspectionTemplate, on_date: date) -> str:
	frequency = TemplateFrequency(template.frequency)
	if frequency == TemplateFrequency.DAILY:
		return f"{template.name} - {on_date.strftime('%b %d')}"
	if frequency == TemplateFrequency.WEEKLY:
		week_start = on_date - timedelta(days=on_date.weekday())
		return f"{template.name} - Week of {week_start.strftime('%b %d')}"
	if frequency == TemplateFrequency.MONTHLY:
		return f"{template.name} - {on_date.strftime('%B %Y')}"
	return f"{template.name} - {on_date.strftime('%b %d, %Y')}"


def instance_expiry(frequency: str, on_date: date) -> datetime:
	"""
	Deadline of an instance: end of its day, week (Sunday), or month.
	One-time instances get a day.
	"""
	frequency = TemplateFrequency(frequency)
	if frequency == TemplateFrequency.DAILY:
		return datetime.combine(on_date, END_OF_DAY)
	if frequency == TemplateFrequency.WEEKLY:
		week_end = on_date + timedelta(days=6 - on_date.weekday())
		return datetime.combine(week_end, END_OF_DAY)
	if frequency == TemplateFrequency.MONTHLY:
		month_end = on_date.replace(day=_last_day_of_month(on_date))
		return datetime.combine(month_end, END_OF_DAY)
	return datetime.combine(on_date, time()) + timedelta(days=1)


def build_instance(template: InspectionTemplate, on_date: date) -> Inspection:
	"""Copy the template's task and sub-task blueprints into a new active instance."""
	instance = Inspection(
		id=uuid7str(),
		name=instance_name(template, on_date),
		description=template.description,
		template_id=template.id,
		status=InspectionStatus.ACTIVE.value,
		created_by=template.created_by,
		assigned_to=template.assigned_to,
		scheduled_date=on_date,
		expiry_date=instance_expiry(template.frequency, on_date),
		is_expired=False,
		performance_penalty=0,
		tasks=[],
	)
	for blueprint in template.tasks:
		task = InspectionTask(
			id=uuid7str(),
			name=blueprint.name,
			description=blueprint.description,
			target_type=blueprint.target_type,
			target_id=blueprint.target_id,
			required=blueprint.required,
			sort_order=blueprint.sort_order,
			sub_tasks=[],
		)
		task.expectation = blueprint.expectation
		for sub_blueprint in blueprint.sub_tasks:
			sub_task = InspectionSubTask(
				id=uuid7str(),
				name=sub_blueprint.name,
				description=sub_blueprint.description,
				status=SubTaskStatus.PENDING.value,
				sort_order=sub_blueprint.sort_order,
			)
			sub_task.expectation = sub_blueprint.expectation
			task.sub_tasks.append(sub_task)
		instance.tasks.append(task)

	apply_rollup(instance, compute_rollup(instance, {}))
	return instance


async def generate_scheduled_inspections(session: AsyncSession, as_of: date) -> int:
	"""
	Spawn today's instances for every due template.

	Each template is committed on its own, so one bad template does not block
	the others. Returns the number of instances created.
	"""
	db = InspectionDB(session)
	template_ids = [t.id for t in await db.get_active_templates()]
	created = 0

	for template_id in template_ids:
		template = await db.get_template(template_id)
		if template is None or not is_due(template, as_of):
			continue

		if TemplateFrequency(template.frequency) == TemplateFrequency.ONE_TIME:
			exists = await db.instance_exists(template.id)
		else:
			exists = await db.instance_exists(template.id, as_of)
		if exists:
			logger.info(f"Skipping template {template.id}: instance for {as_of} already exists")
			continue

		instance = build_instance(template, as_of)
		session.add(instance)
		try:
			await session.commit()
		except IntegrityError:
			await session.rollback()
			logger.warning(
				f"Skipping template {template_id}: instance for {as_of} was created concurrently"
			)
			continue
		except SQLAlchemyError as e:
			await session.rollback()
			logger.exception(f"Failed to create instance for template {template_id}: {e}")
			raise PersistenceFailure("Could not create scheduled inspections, please retry") from e

		created += 1
		logger.info(
			f"Created inspection {instance.id} '{instance.name}' from template {template_id} "
			f"with {len(instance.tasks)} tasks"
		)

	logger.info(f"Scheduled generation for {as_of}: {created} instances created")
	return created
