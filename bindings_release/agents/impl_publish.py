from __future__ import annotations
import logging
from typing import List, Optional
from git import Repo
from git.exc import GitCommandError
from bindings_release.agents.base import BaseAgent, AgentResult, ReleaseContext
from bindings_release.core.credentials import Credential, CredentialProvider
from bindings_release.core.errors import PublishFailure
from bindings_release.core.models import Published, Repository, Tag
from bindings_release.core.workflow import StageName

log = logging.getLogger(__name__)


class PublishManager:
    """Commits and tags the staged checkout locally, then pushes both in one atomic push.

    The local commit and tag survive a failed push, so ``resume`` can retry
    the remote half without rebuilding or retesting.
    """

    def __init__(self, commit_message: str, author_name: str, author_email: str, branch: Optional[str] = None):
        self.commit_message = commit_message
        self.author_name = author_name
        self.author_email = author_email
        self.branch = branch

    def publish(self, repository: Repository, tag_name: str, credentials: CredentialProvider, paths: List[str]) -> Published:
        repo = Repo(repository.local_path)
        branch = self._branch(repo)
        commit = self._commit(repo, paths)
        tag = self._tag(repo, tag_name, commit)
        return self._push(repo, repository, branch, tag, credentials, created_tag=True)

    def resume(self, repository: Repository, tag_name: str, credentials: CredentialProvider) -> Published:
        repo = Repo(repository.local_path)
        if tag_name not in [t.name for t in repo.tags]:
            raise PublishFailure("tag", f"no local tag {tag_name} to resume from")
        tag = Tag(name=tag_name, target_commit=repo.tags[tag_name].commit.hexsha)
        return self._push(repo, repository, self._branch(repo), tag, credentials, created_tag=False)

    def _branch(self, repo: Repo) -> str:
        if self.branch:
            return self.branch
        try:
            return repo.active_branch.name
        except TypeError as e:
            raise PublishFailure("commit", "checkout is on a detached HEAD and no target branch is configured") from e

    def _commit(self, repo: Repo, paths: List[str]) -> str:
        try:
            with repo.config_writer() as cw:
                cw.set_value("user", "name", self.author_name)
                cw.set_value("user", "email", self.author_email)
            repo.git.add("--all", "--", *paths)
            if not repo.index.diff("HEAD"):
                raise PublishFailure("commit", "no staged changes to commit")
            repo.git.commit("-m", self.commit_message)
        except GitCommandError as e:
            raise PublishFailure("commit", str(e)) from e
        sha = repo.head.commit.hexsha
        log.info("Committed %s", sha)
        return sha

    def _tag(self, repo: Repo, tag_name: str, commit: str) -> Tag:
        if tag_name in [t.name for t in repo.tags]:
            raise PublishFailure("tag", f"tag {tag_name} already exists locally")
        try:
            repo.create_tag(tag_name, ref=commit)
        except GitCommandError as e:
            raise PublishFailure("tag", str(e)) from e
        log.info("Tagged %s as %s", commit, tag_name)
        return Tag(name=tag_name, target_commit=commit)

    def _remote_tag_commit(self, repo: Repo, url: str, tag: Tag, credential: Credential) -> Optional[str]:
        try:
            out = repo.git.ls_remote("--tags", url, f"refs/tags/{tag.name}")
        except GitCommandError as e:
            raise PublishFailure("push", f"could not list remote tags: {credential.redact(str(e))}") from None
        for line in out.splitlines():
            sha, _, ref = line.partition("\t")
            if ref == f"refs/tags/{tag.name}":
                return sha
        return None

    def _push(
        self,
        repo: Repo,
        repository: Repository,
        branch: str,
        tag: Tag,
        credentials: CredentialProvider,
        created_tag: bool,
    ) -> Published:
        credential = credentials.resolve()
        url = credential.authenticated_url(repository.remote_url)

        remote_sha = self._remote_tag_commit(repo, url, tag, credential)
        if remote_sha is not None and remote_sha != tag.target_commit:
            if created_tag:
                repo.delete_tag(tag.name)
            raise PublishFailure("tag", f"tag {tag.name} already exists on the remote at {remote_sha[:12]}")

        refspecs = [f"{tag.target_commit}:refs/heads/{branch}"]
        if remote_sha is None:
            refspecs.append(f"refs/tags/{tag.name}:refs/tags/{tag.name}")
        # branch and tag land together or not at all
        try:
            repo.git.push("--atomic", url, *refspecs)
        except GitCommandError as e:
            raise PublishFailure("push", credential.redact(str(e))) from None
        log.info("Pushed %s", ", ".join(r.rsplit(":", 1)[-1] for r in refspecs))
        return Published(branch=branch, commit=tag.target_commit, tag=tag.name)


class PublishAgent(BaseAgent):
    stage = StageName.PUBLISH

    def run(self, ctx: ReleaseContext) -> AgentResult:
        if ctx.repository is None:
            raise PublishFailure("commit", "no staged checkout to publish")
        s = ctx.settings
        manager = PublishManager(
            commit_message=s.commit_message,
            author_name=s.git_author_name,
            author_email=s.git_author_email,
            branch=s.target_branch,
        )
        published = manager.publish(ctx.repository, ctx.tag, ctx.credentials, paths=[s.artifact_dest])
        return AgentResult(self.stage, f"Published {published.tag}", {
            "branch": published.branch,
            "commit_hash": published.commit,
            "tag": published.tag,
            "pushed": True,
        })
