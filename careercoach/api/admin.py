from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from rq.job import Job
from rq.exceptions import NoSuchJobError
from careercoach.core.auth import require_roles
from careercoach.core.config import settings
from careercoach.jobs.queue import queue, redis
from careercoach.jobs.refresh_job import refresh_insights_job

router = APIRouter()

class RefreshStatus(BaseModel):
    state: str
    total: int | None = None
    succeeded: int | None = None
    failed: int | None = None
    result: dict | None = None

@router.post("/insights/refresh", status_code=202, dependencies=[Depends(require_roles("admin"))])
def start_refresh():
    job = queue.enqueue(refresh_insights_job, job_timeout=settings.REFRESH_JOB_TIMEOUT)
    return {"job_id": job.get_id()}

@router.get("/insights/refresh/status", response_model=RefreshStatus, dependencies=[Depends(require_roles("admin"))])
def refresh_status(job_id: str):
    try:
        job = Job.fetch(job_id, connection=redis)
    except NoSuchJobError:
        raise HTTPException(404, "Job not found")
    meta = job.meta or {}
    rq_status = job.get_status()
    state = meta.get("state") or (rq_status.value if rq_status is not None else "unknown")
    return RefreshStatus(state=state, total=meta.get("total"), succeeded=meta.get("succeeded"), failed=meta.get("failed"),
                         result=job.result if state == "done" else None)
