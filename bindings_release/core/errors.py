"""Error kinds raised by release stages.

Every kind is fatal to the run that raised it. Messages must never carry a
credential value.
"""
from __future__ import annotations
from typing import Literal

PublishStep = Literal["commit", "tag", "push"]


class PipelineError(Exception):
    """Base class for stage failures recorded by the engine."""


class CheckoutFailure(PipelineError):
    pass


class BuildFailure(PipelineError):
    pass


class StagingFailure(PipelineError):
    def __init__(self, message: str, destination_cleared: bool = False, destination_partial: bool = False):
        self.destination_cleared = destination_cleared
        self.destination_partial = destination_partial
        if destination_cleared:
            message = f"{message} (destination cleared, left empty)"
        elif destination_partial:
            message = f"{message} (destination left partially removed)"
        super().__init__(message)


class TestFailure(PipelineError):
    __test__ = False  # not a pytest test class

    def __init__(self, suite: str, details: str):
        self.suite = suite
        self.details = details
        super().__init__(f"Test suite '{suite}' failed: {details}")


class PublishFailure(PipelineError):
    def __init__(self, step: PublishStep, message: str):
        self.step = step
        super().__init__(f"Publish failed at {step}: {message}")


class CredentialMissing(PipelineError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Credential {name} is not set in the environment")


class RunAborted(PipelineError):
    pass
