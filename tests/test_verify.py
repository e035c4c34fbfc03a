"""TestGate builds the runner invocation and reports a single pass/fail verdict."""
from pathlib import Path
import pytest
from bindings_release.agents.impl_verify import TestGate
from bindings_release.core.commands import CommandError
from bindings_release.core.errors import TestFailure
from bindings_release.core.models import Repository, SuiteDescriptor

DESTINATION = "platform=iOS Simulator,name=iPhone 15 Pro,OS=17.5"


class FakeRunner:
    def __init__(self, exit_code=0):
        self.exit_code = exit_code
        self.calls = []

    def __call__(self, cmd, cwd=None, env=None, timeout=None):
        self.calls.append((cmd, cwd, timeout))
        if self.exit_code:
            raise CommandError(cmd, self.exit_code, "Test Case '-[EzklTests testProve]' failed\n** TEST FAILED **\n")


@pytest.fixture
def repository(tmp_path):
    (tmp_path / "Example").mkdir()
    return Repository(remote_url="unused", local_path=tmp_path)


def integration(tmp_path, **overrides):
    values = dict(
        name="integration",
        scheme="EzklApp",
        destination=DESTINATION,
        result_bundle=tmp_path / "results" / "exampleTestResults",
        working_dir="Example",
        project="Example.xcodeproj",
        parallel_testing=False,
        skip_tests=["EzklAppUITests/EzklAppUITests/testButtonClicksInOrder"],
    )
    values.update(overrides)
    return SuiteDescriptor(**values)


def test_integration_command_matches_runner_flags(tmp_path):
    gate = TestGate(["xcodebuild", "test"])
    suite = integration(tmp_path)

    assert gate.command(suite) == [
        "xcodebuild", "test",
        "-project", "Example.xcodeproj",
        "-scheme", "EzklApp",
        "-destination", DESTINATION,
        "-parallel-testing-enabled", "NO",
        "-resultBundlePath", str(tmp_path / "results" / "exampleTestResults"),
        "-skip-testing:EzklAppUITests/EzklAppUITests/testButtonClicksInOrder",
    ]


def test_library_command_has_no_project_or_skips(tmp_path):
    suite = SuiteDescriptor(name="library", scheme="EzklPackage", destination=DESTINATION, result_bundle=tmp_path / "r")
    assert TestGate(["xcodebuild", "test"]).command(suite) == [
        "xcodebuild", "test", "-scheme", "EzklPackage", "-destination", DESTINATION, "-resultBundlePath", str(tmp_path / "r"),
    ]


def test_passing_suite_runs_in_working_dir(tmp_path, repository):
    runner = FakeRunner()
    stale_bundle = tmp_path / "results" / "exampleTestResults"
    stale_bundle.mkdir(parents=True)

    verdict = TestGate(["xcodebuild", "test"], timeout=30, runner=runner).verify(integration(tmp_path), repository)

    assert verdict.passed
    assert verdict.suite == "integration"
    _, cwd, timeout = runner.calls[0]
    assert cwd == Path(repository.local_path) / "Example"
    assert timeout == 30
    assert not stale_bundle.exists()


def test_failing_suite_raises_with_suite_name(tmp_path, repository):
    with pytest.raises(TestFailure) as excinfo:
        TestGate(["xcodebuild", "test"], runner=FakeRunner(exit_code=65)).verify(integration(tmp_path), repository)

    assert excinfo.value.suite == "integration"
    assert "TEST FAILED" in excinfo.value.details
    assert "exit code 65" in str(excinfo.value)


def test_gate_runs_once_without_retry(tmp_path, repository):
    runner = FakeRunner(exit_code=65)
    with pytest.raises(TestFailure):
        TestGate(["xcodebuild", "test"], runner=runner).verify(integration(tmp_path), repository)
    assert len(runner.calls) == 1


def test_missing_working_dir_fails_gate(tmp_path):
    repository = Repository(remote_url="unused", local_path=tmp_path / "nothing")
    runner = FakeRunner()
    with pytest.raises(TestFailure, match="does not exist"):
        TestGate(["xcodebuild", "test"], runner=runner).verify(integration(tmp_path), repository)
    assert runner.calls == []
