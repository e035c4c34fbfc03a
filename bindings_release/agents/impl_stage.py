from __future__ import annotations
import logging
import os
import shutil
from pathlib import Path
from bindings_release.agents.base import BaseAgent, AgentResult, ReleaseContext
from bindings_release.core.errors import StagingFailure
from bindings_release.core.models import Artifact, Repository
from bindings_release.core.workflow import StageName

log = logging.getLogger(__name__)


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def _clear(path: Path) -> None:
    """Removes path, trying once more before giving up."""
    try:
        _remove(path)
    except OSError as e:
        log.warning("Removing %s failed (%s), retrying", path, e)
        _remove(path)


def _failure_state(dest: Path) -> dict:
    if dest.exists() or dest.is_symlink():
        return {"destination_partial": True}
    return {"destination_cleared": True}


class ArtifactStager:
    """Replaces the artifact directory inside a checkout, never merging old and new."""

    def destination(self, artifact: Artifact, repository: Repository) -> Path:
        root = Path(repository.local_path).resolve()
        dest = (root / artifact.dest_path).resolve()
        if dest == root or root not in dest.parents:
            raise StagingFailure(f"Destination {artifact.dest_path!r} is outside the checkout {root}")
        return dest

    def stage(self, artifact: Artifact, repository: Repository) -> Path:
        source = Path(artifact.source_path)
        if not source.is_dir():
            raise StagingFailure(f"Built artifact not found at {source}")
        dest = self.destination(artifact, repository)
        tmp = dest.with_name(f".{dest.name}.staging")

        try:
            _clear(tmp)
        except OSError as e:
            raise StagingFailure(f"Could not remove stale staging copy {tmp}: {e}") from e
        try:
            _clear(dest)
        except OSError as e:
            raise StagingFailure(f"Could not clear {dest}: {e}", **_failure_state(dest)) from e

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copytree(source, tmp, symlinks=True)
            os.replace(tmp, dest)
        except OSError as e:
            try:
                _clear(tmp)
                _clear(dest)
            except OSError:
                log.error("Could not remove partial copy under %s", dest.parent)
                raise StagingFailure(f"Copy into {dest} failed and cleanup failed: {e}", **_failure_state(dest)) from e
            raise StagingFailure(f"Copy into {dest} failed: {e}", destination_cleared=True) from e

        log.info("Staged %s into %s", source, dest)
        return dest


class StageArtifactAgent(BaseAgent):
    stage = StageName.STAGE_ARTIFACT

    def __init__(self, stager: ArtifactStager | None = None):
        self.stager = stager or ArtifactStager()

    def run(self, ctx: ReleaseContext) -> AgentResult:
        if ctx.artifact is None or ctx.repository is None:
            raise StagingFailure("Nothing to stage: build artifact or target checkout missing")
        dest = self.stager.stage(ctx.artifact, ctx.repository)
        return AgentResult(self.stage, "Staged artifact", {"staged_path": str(dest)})
