"""Command line entry point: ``bindings-release run --tag v1.2.3``."""
from __future__ import annotations
import argparse
import logging
import signal
import sys
import threading
from typing import List, Optional
from bindings_release.core.errors import PipelineError
from bindings_release.core.logging import configure_logging
from bindings_release.pipeline import resume_push, run_release

log = logging.getLogger(__name__)


def _install_abort_handler(abort: threading.Event) -> None:
    def _handler(signum, frame):
        log.warning("Received signal %s, stopping after the current stage", signum)
        abort.set()
    signal.signal(signal.SIGTERM, _handler)


def _cmd_run(args: argparse.Namespace) -> int:
    abort = threading.Event()
    if args.abort_on_sigterm:
        _install_abort_handler(abort)
    try:
        result = run_release(args.tag, abort=abort)
    except ValueError as e:
        print(f"Invalid release request: {e}", file=sys.stderr)
        return 2
    for stage in result.stages:
        print(f"{stage.name:<18} {stage.status.value}")
    if result.ok:
        print(f"Release {result.tag} published (run {result.run_id})")
        return 0
    print(f"Release {result.tag} failed at stage {result.failed_stage}: {result.error}", file=sys.stderr)
    return 1


def _cmd_resume_push(args: argparse.Namespace) -> int:
    try:
        published = resume_push(args.tag, args.checkout)
    except PipelineError as e:
        print(f"Push of {args.tag} failed: {e}", file=sys.stderr)
        return 1
    print(f"Pushed {published.tag} ({published.commit[:12]}) to {published.branch}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bindings-release", description="Build, test and publish the iOS binding package")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run the full release pipeline")
    run.add_argument("--tag", required=True, help="Version tag to apply in the target repository")
    run.add_argument(
        "--abort-on-sigterm",
        action="store_true",
        help="On SIGTERM, finish the current stage and start no further stages",
    )
    run.set_defaults(func=_cmd_run)

    resume = sub.add_parser("resume-push", help="Retry pushing an already committed and tagged checkout")
    resume.add_argument("--tag", required=True, help="Local tag to push")
    resume.add_argument("--checkout", required=True, help="Path to the target repository checkout")
    resume.set_defaults(func=_cmd_resume_push)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
