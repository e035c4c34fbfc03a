import sys
import pytest
from bindings_release.core.commands import CommandError, run_command


def test_output_is_captured():
    result = run_command([sys.executable, "-c", "print('built')"])
    assert result.stdout.strip() == "built"


def test_env_is_merged_into_process_environment():
    result = run_command([sys.executable, "-c", "import os; print(os.environ['CONFIGURATION'])"], env={"CONFIGURATION": "release"})
    assert result.stdout.strip() == "release"


def test_nonzero_exit_keeps_output_tail():
    with pytest.raises(CommandError) as excinfo:
        run_command([sys.executable, "-c", "import sys; print('line1'); print('boom', file=sys.stderr); sys.exit(3)"])
    assert excinfo.value.returncode == 3
    assert excinfo.value.tail().splitlines() == ["line1", "boom"]


def test_timeout():
    with pytest.raises(CommandError, match="timed out"):
        run_command([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2)
