from __future__ import annotations
import logging
import shutil
from pathlib import Path
from typing import Callable, List, Optional
from bindings_release.agents.base import BaseAgent, AgentResult, ReleaseContext
from bindings_release.core.commands import CommandError, run_command
from bindings_release.core.errors import BuildFailure
from bindings_release.core.models import Artifact
from bindings_release.core.workflow import StageName

log = logging.getLogger(__name__)


class Builder:
    """Runs the binding generator and checks that it left its output directory behind."""

    def __init__(
        self,
        command: List[str],
        output_dir: str,
        dest_path: str,
        features: Optional[List[str]] = None,
        default_features: bool = True,
        configuration: str = "release",
        timeout: Optional[float] = None,
        runner: Callable = run_command,
    ):
        self.command = list(command)
        self.output_dir = output_dir
        self.dest_path = dest_path
        self.features = list(features or [])
        self.default_features = default_features
        self.configuration = configuration
        self.timeout = timeout
        self.runner = runner

    def toolchain_command(self) -> List[str]:
        cmd = list(self.command)
        if self.features:
            cmd += ["--features", " ".join(self.features)]
        if not self.default_features:
            cmd.append("--no-default-features")
        return cmd

    def build(self, source_dir: Path) -> Artifact:
        output = Path(source_dir) / self.output_dir
        if output.exists():
            shutil.rmtree(output)

        cmd = self.toolchain_command()
        log.info("Building bindings (%s): %s", self.configuration, " ".join(cmd))
        try:
            self.runner(cmd, cwd=source_dir, env={"CONFIGURATION": self.configuration}, timeout=self.timeout)
        except CommandError as e:
            raise BuildFailure(f"{e}\n{e.tail()}".rstrip()) from e

        if not output.is_dir():
            raise BuildFailure(f"Toolchain succeeded but produced no output at {output}")
        return Artifact(source_path=output, dest_path=self.dest_path)


class BuilderAgent(BaseAgent):
    stage = StageName.BUILD

    def __init__(self, runner: Callable = run_command):
        self.runner = runner

    def run(self, ctx: ReleaseContext) -> AgentResult:
        if ctx.source_dir is None:
            raise BuildFailure("No source tree checked out")
        s = ctx.settings
        builder = Builder(
            command=s.build_command,
            output_dir=s.build_output_dir,
            dest_path=s.artifact_dest,
            features=s.build_features,
            default_features=s.build_default_features,
            configuration=s.build_configuration,
            timeout=s.stage_timeout_s,
            runner=self.runner,
        )
        ctx.artifact = builder.build(ctx.source_dir)
        return AgentResult(self.stage, "Built bindings", {"artifact_dir": str(ctx.artifact.source_path)})
