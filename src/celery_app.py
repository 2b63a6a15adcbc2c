"""Celery application configuration."""

from celery import Celery

from src.config import get_settings

settings = get_settings()

app = Celery(
    "baba_selo",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["src.tasks.cat_visits"],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=120,  # 2 minutes max per run
    task_soft_time_limit=100,
)

app.conf.beat_schedule = {
    "process-cat-visits": {
        "task": "src.tasks.cat_visits.process_cat_visits",
        "schedule": settings.cat_visit_interval_seconds,
    },
}
