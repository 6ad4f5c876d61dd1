# (c) Copyright Datacraft, 2026
"""
Celery application and beat schedule.

The inspection engine never schedules itself; these periodic tasks are the
external trigger for generation, expiry, follow-up maintenance and the
operator performance run.
"""
from celery import Celery
from celery.schedules import crontab

from drivewatch.core.config import get_settings

settings = get_settings()

app = Celery(
	"drivewatch",
	broker=settings.redis_url,
	backend=settings.redis_url,
	include=["drivewatch.core.tasks"],
)

app.conf.update(
	timezone="UTC",
	enable_utc=True,
	task_acks_late=True,
)

app.conf.beat_schedule = {
	"create-scheduled-inspections": {
		"task": "inspections.create_scheduled",
		"schedule": crontab(hour=0, minute=5),
	},
	"check-expired-inspections": {
		"task": "inspections.check_expired",
		"schedule": crontab(minute=0),
	},
	"maintenance-for-failed-inspections": {
		"task": "inspections.maintenance_for_failed",
		"schedule": crontab(hour=1, minute=0),
	},
	"check-operator-performance": {
		"task": "operators.check_performance",
		"schedule": crontab(hour=6, minute=0),
	},
}
