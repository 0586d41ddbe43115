import logging

from fynd.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task
def recompute_matches(min_score: float | None = None) -> dict:
    """Batch match pass, run by beat or queued from the API."""
    from fynd import create_app
    from fynd.modules.matches.service import recompute_all

    app = create_app()
    with app.app_context():
        threshold = min_score if min_score is not None else float(app.config.get("MATCH_MIN_SCORE", 30))
        written = recompute_all(min_score=threshold)
    logger.info("recompute_matches wrote %d rows", written)
    return {"written": written}
