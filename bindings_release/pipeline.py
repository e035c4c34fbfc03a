from __future__ import annotations
import threading
import uuid
from pathlib import Path
from typing import Optional
from bindings_release.agents.base import ReleaseContext
from bindings_release.agents.impl_publish import PublishManager
from bindings_release.agents.registry import AgentRegistry
from bindings_release.core.config import Settings, settings as default_settings
from bindings_release.core.credentials import CredentialProvider
from bindings_release.core.engine import WorkflowEngine
from bindings_release.core.models import Published, Repository
from bindings_release.core.workflow import PipelineResult
from bindings_release.workspace.manager import WorkspaceManager


def credential_provider(settings: Settings) -> CredentialProvider:
    return CredentialProvider(settings.credential_env_var, settings.credential_username)


def run_release(
    tag: str,
    *,
    settings: Optional[Settings] = None,
    registry: Optional[AgentRegistry] = None,
    abort: Optional[threading.Event] = None,
    run_id: Optional[str] = None,
) -> PipelineResult:
    """Build, stage, test and publish the bindings under ``tag``."""
    if not tag or not tag.strip():
        raise ValueError("tag must be a non-empty string")
    settings = settings or default_settings
    run_id = run_id or uuid.uuid4().hex[:12]

    ws = WorkspaceManager(run_id=run_id, base_dir=settings.workspaces_dir)
    ws.ensure()
    ctx = ReleaseContext(
        tag=tag,
        run_id=run_id,
        ws=ws,
        settings=settings,
        credentials=credential_provider(settings),
        abort=abort,
    )
    registry = registry or AgentRegistry.default()
    engine = WorkflowEngine(tag=tag, run_id=run_id, abort=abort)
    return engine.run(registry.stages(ctx))


def resume_push(tag: str, checkout: str | Path, *, settings: Optional[Settings] = None) -> Published:
    """Retry only the push of a release whose commit and tag exist in ``checkout``."""
    settings = settings or default_settings
    manager = PublishManager(
        commit_message=settings.commit_message,
        author_name=settings.git_author_name,
        author_email=settings.git_author_email,
        branch=settings.target_branch,
    )
    repository = Repository(remote_url=settings.target_repo_url, local_path=Path(checkout))
    return manager.resume(repository, tag, credential_provider(settings))
