from __future__ import annotations
import logging
from bindings_release.tasks.celery_app import celery_app
from bindings_release.pipeline import run_release

log = logging.getLogger(__name__)

@celery_app.task(name="run_release")
def run_release_task(tag: str) -> dict:
    log.info("Starting release for tag %s", tag, extra={"run_id": "-", "stage": "-"})
    result = run_release(tag)
    if result.ok:
        log.info("Release completed successfully", extra={"run_id": result.run_id, "stage": "-"})
    else:
        log.error("Release failed", extra={"run_id": result.run_id, "stage": result.failed_stage or "-"})
    return result.to_dict()
