"""Dataclasses passed between release stages."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class Artifact:
    """A built binding directory and where it lands inside the target checkout."""
    source_path: Path
    dest_path: str  # Relative to the repository checkout


@dataclass(frozen=True)
class Repository:
    """Local clone of the consumer repository."""
    remote_url: str
    local_path: Path


@dataclass(frozen=True)
class Tag:
    name: str
    target_commit: str


@dataclass(frozen=True)
class SuiteDescriptor:
    """Which test runner configuration a gate invokes."""
    name: str
    scheme: str
    destination: str
    result_bundle: Path
    working_dir: str = "."  # Relative to the repository checkout
    project: Optional[str] = None
    parallel_testing: Optional[bool] = None
    skip_tests: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class TestVerdict:
    __test__ = False  # not a pytest test class

    suite: str
    passed: bool
    result_bundle: Path


@dataclass(frozen=True)
class Published:
    branch: str
    commit: str
    tag: str
