from __future__ import annotations
import logging
import shutil
from pathlib import Path
from typing import Callable, List, Optional
from bindings_release.agents.base import BaseAgent, AgentResult, ReleaseContext
from bindings_release.core.commands import CommandError, run_command
from bindings_release.core.errors import TestFailure
from bindings_release.core.models import Repository, SuiteDescriptor, TestVerdict
from bindings_release.core.workflow import StageName

log = logging.getLogger(__name__)


class TestGate:
    """Runs one external test suite against the staged checkout. Pass or fail, no retries."""
    __test__ = False  # not a pytest test class

    def __init__(self, runner_command: List[str], timeout: Optional[float] = None, runner: Callable = run_command):
        self.runner_command = list(runner_command)
        self.timeout = timeout
        self.runner = runner

    def command(self, suite: SuiteDescriptor) -> List[str]:
        cmd = list(self.runner_command)
        if suite.project:
            cmd += ["-project", suite.project]
        cmd += ["-scheme", suite.scheme, "-destination", suite.destination]
        if suite.parallel_testing is not None:
            cmd += ["-parallel-testing-enabled", "YES" if suite.parallel_testing else "NO"]
        cmd += ["-resultBundlePath", str(suite.result_bundle)]
        cmd += [f"-skip-testing:{test_id}" for test_id in suite.skip_tests]
        return cmd

    def verify(self, suite: SuiteDescriptor, repository: Repository) -> TestVerdict:
        workdir = Path(repository.local_path) / suite.working_dir
        if not workdir.is_dir():
            raise TestFailure(suite.name, f"working directory {workdir} does not exist")
        # the runner refuses to overwrite an existing result bundle
        if suite.result_bundle.exists():
            shutil.rmtree(suite.result_bundle)

        cmd = self.command(suite)
        log.info("Running %s suite (%d skipped)", suite.name, len(suite.skip_tests))
        try:
            self.runner(cmd, cwd=workdir, timeout=self.timeout)
        except CommandError as e:
            raise TestFailure(suite.name, f"{e}\n{e.tail()}".rstrip()) from e
        return TestVerdict(suite=suite.name, passed=True, result_bundle=suite.result_bundle)


def library_suite(ctx: ReleaseContext) -> SuiteDescriptor:
    s = ctx.settings
    return SuiteDescriptor(
        name="library",
        scheme=s.library_suite_scheme,
        destination=s.test_destination,
        result_bundle=ctx.ws.results_dir / "testResults",
        skip_tests=list(s.library_suite_skip),
    )


def integration_suite(ctx: ReleaseContext) -> SuiteDescriptor:
    s = ctx.settings
    return SuiteDescriptor(
        name="integration",
        scheme=s.integration_suite_scheme,
        destination=s.test_destination,
        result_bundle=ctx.ws.results_dir / "exampleTestResults",
        working_dir=s.integration_suite_dir,
        project=s.integration_suite_project,
        parallel_testing=False,
        skip_tests=list(s.integration_suite_skip),
    )


class TestGateAgent(BaseAgent):
    __test__ = False  # not a pytest test class

    def __init__(self, stage: StageName, suite_factory: Callable[[ReleaseContext], SuiteDescriptor], runner: Callable = run_command):
        self.stage = stage
        self.suite_factory = suite_factory
        self.runner = runner

    def run(self, ctx: ReleaseContext) -> AgentResult:
        suite = self.suite_factory(ctx)
        if ctx.repository is None:
            raise TestFailure(suite.name, "no staged checkout to test")
        gate = TestGate(ctx.settings.test_runner, timeout=ctx.settings.stage_timeout_s, runner=self.runner)
        verdict = gate.verify(suite, ctx.repository)
        return AgentResult(self.stage, f"Suite {suite.name} passed", {f"{suite.name}_results": str(verdict.result_bundle)})
