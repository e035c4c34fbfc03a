import logging
from pathlib import Path
from git import Repo
from git.exc import GitError
from bindings_release.agents.base import BaseAgent, AgentResult, ReleaseContext
from bindings_release.core.errors import CheckoutFailure
from bindings_release.core.models import Repository
from bindings_release.core.workflow import StageName

log = logging.getLogger(__name__)

class CloneSourceAgent(BaseAgent):
    stage = StageName.CHECKOUT_SOURCE
    def run(self, ctx: ReleaseContext) -> AgentResult:
        s = ctx.settings
        if not s.source_repo_url:
            source_dir = Path(s.source_dir).resolve()
            if not source_dir.is_dir():
                raise CheckoutFailure(f"Source directory not found: {source_dir}")
            ctx.source_dir = source_dir
            return AgentResult(self.stage, "Using local source tree", {"source_dir": str(source_dir)})

        source_dir = ctx.ws.source_dir
        if source_dir.exists() and any(source_dir.iterdir()):
            ctx.source_dir = source_dir
            return AgentResult(self.stage, "Source already present", {"source_dir": str(source_dir)})
        try:
            ref = s.source_ref or ctx.tag
            log.info("Cloning source repo at %s", ref, extra={"run_id": ctx.run_id, "stage": self.stage.value})
            Repo.clone_from(s.source_repo_url, source_dir, depth=1, branch=ref)
        except GitError as e:
            raise CheckoutFailure(f"Failed to clone source repo: {e}") from e
        ctx.source_dir = source_dir
        return AgentResult(self.stage, "Cloned source repo", {"source_dir": str(source_dir), "source_ref": ref})

class CloneTargetAgent(BaseAgent):
    stage = StageName.CLONE_TARGET
    def run(self, ctx: ReleaseContext) -> AgentResult:
        remote_url = ctx.settings.target_repo_url
        target_dir = ctx.ws.target_dir
        if target_dir.exists() and any(target_dir.iterdir()):
            raise CheckoutFailure(f"Target checkout {target_dir} is not empty; each run needs a fresh clone")
        try:
            log.info("Cloning target repo %s", remote_url, extra={"run_id": ctx.run_id, "stage": self.stage.value})
            Repo.clone_from(remote_url, target_dir)
        except GitError as e:
            raise CheckoutFailure(f"Failed to clone target repo: {e}") from e
        ctx.repository = Repository(remote_url=remote_url, local_path=target_dir)
        return AgentResult(self.stage, "Cloned target repo", {"target_dir": str(target_dir)})
