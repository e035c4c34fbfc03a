from __future__ import annotations
from pathlib import Path
from bindings_release.core.config import settings

class WorkspaceManager:
    """Directory layout owned by one release run."""

    def __init__(self, run_id: str, base_dir: str | Path | None = None):
        self.run_id = run_id
        self.root = Path(base_dir or settings.workspaces_dir) / run_id

    @property
    def source_dir(self) -> Path:
        return self.root / "source"

    @property
    def target_dir(self) -> Path:
        return self.root / "target_repo"

    @property
    def results_dir(self) -> Path:
        return self.root / "results"

    def ensure(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self.results_dir.mkdir(parents=True, exist_ok=True)
