import logging
from datetime import timedelta
from rq import Queue, get_current_job
from rq.registry import ScheduledJobRegistry, StartedJobRegistry
from careercoach.core.config import settings
from careercoach.core.database import SessionLocal
from careercoach.models.orm import utcnow
from careercoach.services.generative import get_generative_client
from careercoach.services.insights import InsightStore

logger = logging.getLogger(__name__)

REFRESH_JOB_PREFIX = "insights-refresh-"

def refresh_interval() -> timedelta:
    return timedelta(days=settings.INSIGHT_REFRESH_INTERVAL_DAYS)

def build_store() -> InsightStore:
    return InsightStore(SessionLocal, get_generative_client(), refresh_interval=refresh_interval(),
                        max_create_attempts=settings.INSIGHT_CREATE_MAX_ATTEMPTS)

def run_refresh(store: InsightStore) -> dict:
    """Refresh every insight and summarize the per-key outcomes.

    Progress is mirrored into ``job.meta`` when running under an rq worker.
    """
    job = get_current_job()
    if job:
        job.meta.update({"state": "running"}); job.save_meta()
    outcomes = store.refresh_all()
    failed = [o for o in outcomes if not o.ok]
    for o in failed:
        logger.warning("Weekly refresh failed for %s: %s (%s)", o.industry, o.failure, o.detail)
    result = {"total": len(outcomes), "succeeded": len(outcomes) - len(failed), "failed": len(failed),
              "outcomes": [o.to_dict() for o in outcomes]}
    if job:
        job.meta.update({"state": "done", "total": result["total"], "succeeded": result["succeeded"], "failed": result["failed"]})
        job.save_meta()
    return result

def refresh_insights_job(reschedule: bool = False) -> dict:
    """Entry point of the weekly activation; re-arms the next run when ``reschedule`` is set."""
    try:
        return run_refresh(build_store())
    finally:
        if reschedule:
            from careercoach.jobs.queue import queue
            schedule_weekly_refresh(queue)

def schedule_weekly_refresh(q: Queue, interval: timedelta | None = None):
    # one id per due date so repeated activations in the same cycle collapse
    delay = interval or refresh_interval()
    due = utcnow() + delay
    return q.enqueue_in(delay, refresh_insights_job, reschedule=True,
                        job_id=f"{REFRESH_JOB_PREFIX}{due:%Y%m%d}", job_timeout=settings.REFRESH_JOB_TIMEOUT)

def pending_refresh_ids(q: Queue, registries=None) -> list:
    """Ids of weekly refresh jobs already scheduled, queued or running."""
    if registries is None:
        registries = [ScheduledJobRegistry(queue=q), StartedJobRegistry(queue=q)]
    ids = list(q.job_ids)
    for reg in registries:
        ids.extend(reg.get_job_ids())
    return [i for i in ids if i.startswith(REFRESH_JOB_PREFIX)]

def ensure_weekly_refresh(q: Queue, registries=None):
    """Arm the weekly chain unless one is already pending; returns the new job or None."""
    pending = pending_refresh_ids(q, registries)
    if pending:
        logger.info("Weekly insight refresh already pending as %s", ", ".join(pending))
        return None
    return schedule_weekly_refresh(q)
