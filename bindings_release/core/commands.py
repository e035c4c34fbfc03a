from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Mapping, Sequence

OUTPUT_TAIL_LINES = 40


class CommandError(RuntimeError):
    """Raised when a subprocess fails to start, times out or exits non-zero."""

    def __init__(self, command: Sequence[str], returncode: int | None, output: str, reason: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        if not reason:
            reason = f"exit code {returncode}"
        super().__init__(f"Command {' '.join(command)} failed ({reason})")

    def tail(self, lines: int = OUTPUT_TAIL_LINES) -> str:
        return "\n".join(self.output.splitlines()[-lines:])


def run_command(
    command: Sequence[str],
    *,
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run ``command`` to completion, merging stderr into stdout."""

    process_env = os.environ.copy()
    if env:
        process_env.update(env)

    try:
        result = subprocess.run(
            list(command),
            cwd=str(cwd) if cwd else None,
            env=process_env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise CommandError(command, None, "", reason=f"executable not found: {e.filename}") from e
    except subprocess.TimeoutExpired as e:
        output = e.output or ""
        if isinstance(output, bytes):
            output = output.decode("utf-8", errors="replace")
        raise CommandError(command, None, output, reason=f"timed out after {timeout}s") from e

    if result.returncode != 0:
        raise CommandError(command, result.returncode, result.stdout or "")
    return result
