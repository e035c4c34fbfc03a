from __future__ import annotations
import logging
import threading
from typing import List, Optional, Tuple
from bindings_release.core.errors import PipelineError, RunAborted
from bindings_release.core.workflow import PipelineResult, PipelineRun, Stage, Status

log = logging.getLogger(__name__)

class WorkflowEngine:
    """Runs release stages strictly in order and stops at the first failure."""

    def __init__(self, tag: str, run_id: Optional[str] = None, abort: Optional[threading.Event] = None):
        self.tag = tag
        self.run_id = run_id
        self.abort = abort

    def _extra(self, run: PipelineRun, stage: Stage) -> dict:
        return {"run_id": run.run_id, "stage": stage.name}

    def _merge_artifacts(self, run: PipelineRun, updates: Optional[dict]) -> None:
        if updates:
            run.artifacts.update(updates)

    def _fail(self, run: PipelineRun, stage: Stage, error: str) -> PipelineResult:
        stage.error = error
        stage.transition(Status.FAILED)
        run.status = Status.FAILED
        run.failed_stage = stage.name
        run.error = error
        log.error("Stage failed: %s", error, extra=self._extra(run, stage))
        return PipelineResult.from_run(run)

    def _blocked_by(self, run: PipelineRun, stage: Stage) -> Optional[str]:
        if stage.depends_on is None:
            return None
        dependency = run.stage(stage.depends_on)
        if dependency.status != Status.SUCCEEDED:
            return f"dependency {dependency.name} is {dependency.status.value}"
        return None

    def _check_stages(self, stages: List[Stage]) -> Optional[Tuple[Stage, str]]:
        seen = set()
        for stage in stages:
            if stage.status != Status.PENDING:
                return stage, f"Stage {stage.name} is {stage.status.value}; a run needs fresh PENDING stages"
            if stage.name in seen:
                return stage, f"Stage {stage.name} appears more than once"
            if stage.depends_on is not None and stage.depends_on not in seen:
                return stage, f"Stage {stage.name} depends on {stage.depends_on}, which does not run before it"
            seen.add(stage.name)
        return None

    def _reject(self, run: PipelineRun, stage: Stage, error: str) -> PipelineResult:
        run.status = Status.FAILED
        run.failed_stage = stage.name
        run.error = error
        log.error("Stage list rejected: %s", error, extra=self._extra(run, stage))
        return PipelineResult.from_run(run)

    def run(self, stages: List[Stage]) -> PipelineResult:
        kwargs = {"run_id": self.run_id} if self.run_id else {}
        run = PipelineRun(tag=self.tag, stages=stages, **kwargs)
        invalid = self._check_stages(stages)
        if invalid:
            return self._reject(run, *invalid)

        run.status = Status.RUNNING
        log.info("Starting release run for tag %s", self.tag, extra={"run_id": run.run_id, "stage": "-"})

        for stage in stages:
            if self.abort is not None and self.abort.is_set():
                return self._fail(run, stage, str(RunAborted(f"run aborted before {stage.name}")))

            blocked = self._blocked_by(run, stage)
            if blocked:
                return self._fail(run, stage, f"Stage {stage.name} not started: {blocked}")

            stage.transition(Status.RUNNING)
            log.info("Running stage", extra=self._extra(run, stage))
            try:
                details = stage.action()
            except PipelineError as e:
                return self._fail(run, stage, f"{type(e).__name__}: {e}")
            except Exception as e:
                log.exception("Stage raised unexpectedly", extra=self._extra(run, stage))
                return self._fail(run, stage, f"{type(e).__name__}: {e}")

            stage.details = dict(details or {})
            self._merge_artifacts(run, stage.details)
            stage.transition(Status.SUCCEEDED)
            log.info("Stage succeeded", extra=self._extra(run, stage))

        run.status = Status.SUCCEEDED
        log.info("Release run succeeded for tag %s", self.tag, extra={"run_id": run.run_id, "stage": "-"})
        return PipelineResult.from_run(run)
