from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional

class ReleaseRequest(BaseModel):
    tag: str = Field(..., examples=["v1.2.3"])

    @field_validator("tag")
    @classmethod
    def tag_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("tag must not be blank")
        return v

class ReleaseAccepted(BaseModel):
    task_id: str
    tag: str

class StageReport(BaseModel):
    name: str
    status: str
    error: Optional[str] = None
    details: Dict[str, Any] = {}

class ReleaseResult(BaseModel):
    run_id: str
    tag: str
    status: str
    failed_stage: Optional[str] = None
    error: Optional[str] = None
    stages: List[StageReport] = []
    artifacts: Dict[str, Any] = {}

class ReleaseStatus(BaseModel):
    task_id: str
    state: str
    result: Optional[ReleaseResult] = None
