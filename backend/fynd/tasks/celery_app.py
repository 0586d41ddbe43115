import os
from celery import Celery


def make_celery() -> Celery:
    broker = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
    backend = os.getenv("CELERY_RESULT_BACKEND", broker)
    app = Celery("fynd", broker=broker, backend=backend, include=[
        "fynd.tasks.jobs.matching",
    ])
    interval = float(os.getenv("MATCH_REFRESH_INTERVAL_SECONDS", "900"))
    app.conf.update(
        task_track_started=True,
        beat_schedule={
            "recompute-matches": {
                "task": "fynd.tasks.jobs.matching.recompute_matches",
                "schedule": interval,
            },
        },
    )
    return app

celery_app = make_celery()
