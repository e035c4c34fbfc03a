from celery.result import AsyncResult
from fastapi import APIRouter
from bindings_release.schemas.releases import ReleaseAccepted, ReleaseRequest, ReleaseResult, ReleaseStatus
from bindings_release.tasks.celery_app import celery_app
from bindings_release.tasks.releases import run_release_task

router = APIRouter(prefix="/releases")

@router.post("", response_model=ReleaseAccepted, status_code=202)
def dispatch_release(req: ReleaseRequest):
    task = run_release_task.delay(req.tag)
    return ReleaseAccepted(task_id=task.id, tag=req.tag)

@router.get("/{task_id}", response_model=ReleaseStatus)
def get_release(task_id: str):
    res = AsyncResult(task_id, app=celery_app)
    result = None
    if res.successful():
        result = ReleaseResult(**res.result)
    return ReleaseStatus(task_id=task_id, state=res.state, result=result)
