"""Shared fixtures: a local bare remote standing in for the Swift package repo."""
from pathlib import Path
import pytest
from git import Repo
from bindings_release.core.config import Settings


def commit_all(repo: Repo, message: str) -> str:
    with repo.config_writer() as cw:
        cw.set_value("user", "name", "Test User")
        cw.set_value("user", "email", "test@example.com")
        cw.set_value("commit", "gpgsign", "false")
        cw.set_value("tag", "gpgsign", "false")
    repo.git.add(all=True)
    repo.git.commit("-m", message)
    return repo.head.commit.hexsha


@pytest.fixture(autouse=True)
def _no_git_prompts(monkeypatch):
    monkeypatch.setenv("GIT_TERMINAL_PROMPT", "0")


@pytest.fixture
def remote_repo(tmp_path) -> Path:
    """Bare repository seeded with an old EzklCoreBindings and an Example app."""
    bare_path = tmp_path / "remote.git"
    bare = Repo.init(bare_path, bare=True)

    seed_path = tmp_path / "seed"
    seed = Repo.init(seed_path)
    old = seed_path / "Sources" / "EzklCoreBindings"
    old.mkdir(parents=True)
    (old / "old.swift").write_text("// previous bindings\n", encoding="utf-8")
    (old / "nested").mkdir()
    (old / "nested" / "stale.h").write_text("// stale header\n", encoding="utf-8")
    (seed_path / "Package.swift").write_text("// swift-tools-version:5.9\n", encoding="utf-8")
    (seed_path / "Example").mkdir()
    (seed_path / "Example" / "README.md").write_text("example app\n", encoding="utf-8")
    commit_all(seed, "initial")

    branch = seed.active_branch.name
    seed.git.push(str(bare_path), f"HEAD:refs/heads/{branch}")
    bare.git.symbolic_ref("HEAD", f"refs/heads/{branch}")
    return bare_path


@pytest.fixture
def remote_branch(remote_repo) -> str:
    return Repo(remote_repo).git.symbolic_ref("--short", "HEAD")


@pytest.fixture
def checkout(tmp_path, remote_repo) -> Path:
    path = tmp_path / "checkout"
    Repo.clone_from(str(remote_repo), path)
    return path


@pytest.fixture
def built_artifact(tmp_path) -> Path:
    out = tmp_path / "build" / "EzklCoreBindings"
    (out / "include").mkdir(parents=True)
    (out / "EzklCore.swift").write_text("// generated bindings\n", encoding="utf-8")
    (out / "include" / "ezklFFI.h").write_text("// ffi header\n", encoding="utf-8")
    return out


@pytest.fixture
def release_settings(tmp_path, remote_repo) -> Settings:
    source = tmp_path / "ezkl"
    source.mkdir()
    return Settings(
        _env_file=None,
        workspaces_dir=str(tmp_path / "workspaces"),
        source_dir=str(source),
        target_repo_url=str(remote_repo),
        credential_env_var="EZKL_PORTER_TOKEN",
    )
