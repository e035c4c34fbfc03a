from __future__ import annotations
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
from bindings_release.core.config import Settings
from bindings_release.core.credentials import CredentialProvider
from bindings_release.core.models import Artifact, Repository
from bindings_release.core.workflow import StageName
from bindings_release.workspace.manager import WorkspaceManager

@dataclass
class ReleaseContext:
    """Inputs of one run plus the values earlier stages hand to later ones."""
    tag: str
    run_id: str
    ws: WorkspaceManager
    settings: Settings
    credentials: CredentialProvider
    abort: Optional[threading.Event] = None
    source_dir: Optional[Path] = None
    artifact: Optional[Artifact] = None
    repository: Optional[Repository] = None

@dataclass
class AgentResult:
    stage: StageName
    message: str
    artifacts_index: Dict[str, Any] = field(default_factory=dict)

class BaseAgent:
    stage: StageName
    def run(self, ctx: ReleaseContext) -> AgentResult:
        raise NotImplementedError
