import logging
from rq import Worker
from careercoach.core.config import settings
from careercoach.core.log_config import configure_logging
from careercoach.jobs.queue import queue, redis
from careercoach.jobs.refresh_job import ensure_weekly_refresh

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    configure_logging()
    job = ensure_weekly_refresh(queue)
    if job is not None:
        logger.info("Weekly insight refresh armed as %s", job.id)
    w = Worker([settings.RQ_QUEUE], connection=redis)
    w.work(with_scheduler=True)
