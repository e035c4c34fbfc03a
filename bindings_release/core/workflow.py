from __future__ import annotations
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

class StageName(str, Enum):
    CHECKOUT_SOURCE = "checkout_source"
    BUILD = "build"
    CLONE_TARGET = "clone_target"
    STAGE_ARTIFACT = "stage_artifact"
    TEST_LIBRARY = "test_library"
    TEST_INTEGRATION = "test_integration"
    PUBLISH = "publish"

RELEASE_STAGES = [
    StageName.CHECKOUT_SOURCE,
    StageName.BUILD,
    StageName.CLONE_TARGET,
    StageName.STAGE_ARTIFACT,
    StageName.TEST_LIBRARY,
    StageName.TEST_INTEGRATION,
    StageName.PUBLISH,
]

class Status(str, Enum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"

_TRANSITIONS = {
    Status.PENDING: {Status.RUNNING, Status.FAILED},
    Status.RUNNING: {Status.SUCCEEDED, Status.FAILED},
    Status.SUCCEEDED: set(),
    Status.FAILED: set(),
}

StageAction = Callable[[], Optional[Dict[str, Any]]]


@dataclass
class Stage:
    """One ordered step of a release run.

    ``action`` returns an optional artifacts index that is merged into the
    run. ``depends_on`` names the stage that must have succeeded first.
    """
    name: str
    action: StageAction
    depends_on: Optional[str] = None
    status: Status = Status.PENDING
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def transition(self, new_status: Status) -> None:
        if new_status not in _TRANSITIONS[self.status]:
            raise ValueError(f"Stage {self.name}: illegal transition {self.status.value} -> {new_status.value}")
        self.status = new_status


@dataclass
class PipelineRun:
    tag: str
    stages: List[Stage]
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    status: Status = Status.PENDING
    failed_stage: Optional[str] = None
    error: Optional[str] = None
    artifacts: Dict[str, Any] = field(default_factory=dict)

    def stage(self, name: str) -> Stage:
        for stage in self.stages:
            if stage.name == name:
                return stage
        raise KeyError(name)


@dataclass(frozen=True)
class StageReport:
    name: str
    status: Status
    error: Optional[str]
    details: Dict[str, Any]


@dataclass(frozen=True)
class PipelineResult:
    run_id: str
    tag: str
    status: Status
    failed_stage: Optional[str]
    error: Optional[str]
    stages: List[StageReport]
    artifacts: Dict[str, Any]

    @property
    def ok(self) -> bool:
        return self.status == Status.SUCCEEDED

    @classmethod
    def from_run(cls, run: PipelineRun) -> "PipelineResult":
        return cls(
            run_id=run.run_id,
            tag=run.tag,
            status=run.status,
            failed_stage=run.failed_stage,
            error=run.error,
            stages=[StageReport(s.name, s.status, s.error, dict(s.details)) for s in run.stages],
            artifacts=dict(run.artifacts),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "tag": self.tag,
            "status": self.status.value,
            "failed_stage": self.failed_stage,
            "error": self.error,
            "stages": [
                {"name": s.name, "status": s.status.value, "error": s.error, "details": s.details}
                for s in self.stages
            ],
            "artifacts": self.artifacts,
        }
