"""Data models for autotester entities."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path
from typing import List, Optional


class ProgramStatus(Enum):
    """Overall state of a submitted program."""

    AWAITING_TESTS = "Waiting in queue..."
    PLAGIARIZED = "Program is plagiarized!"
    COMPILE_ERROR = "Program could not be compiled!"
    FINISHED_TESTING = "Done testing!"
    GRADED = "Program graded!"
    NO_SOURCES_FOUND = "No sources to be tested found..."
    CURRENTLY_TESTING = "Running tests..."
    REJECTED = "Could not test program. Please try again..."

    @property
    def is_terminal(self) -> bool:
        """No more polling happens once a program reaches this status."""
        return self not in (ProgramStatus.AWAITING_TESTS, ProgramStatus.CURRENTLY_TESTING)


class TestResultStatus(Enum):
    """Outcome of a single test case."""

    __test__ = False

    SUCCESS = "Success!"
    SYMBOL_NOT_FOUND = "Symbol not found"
    COMPILE_FAILED = "Could not compile program"
    EXECUTION_TIMEOUT = "Program took too long to execute"
    EXECUTION_CRASH = "Program crashed"
    WRONG_OUTPUT = "Wrong output"
    PROFILER_ERROR = "Profiler error"
    OUTPUT_NOT_FOUND = "Output not found"
    UNEXPECTED_EXCEPTION = "Unexpected exception"
    INTERNAL_ERROR = "Internal server error"
    UNZIP_FAILED = "Unzip failed"
    TOOL_FAILED = "Execution tool failed"


class RunStatus(IntEnum):
    """Status reported back from a run request."""

    RUNNING = 1
    NO_AUTOTESTS_DEFINED = 2
    ERROR_OPENING_DIRECTORY = 3


@dataclass
class TestResult:
    """Represents a test case result."""

    __test__ = False

    id: int
    success: bool
    status: TestResultStatus


@dataclass
class Result:
    """Snapshot of testing progress for a program."""

    completed_tests: int = 0
    is_being_tested: bool = False
    is_waiting: bool = False
    in_queue: int = 0
    test_results: List[TestResult] = field(default_factory=list)

    @classmethod
    def from_status(
        cls, status: ProgramStatus, in_queue: int = 0, completed_tests: int = 0
    ) -> "Result":
        """Build a progress snapshot whose flags follow from *status*."""
        return cls(
            completed_tests=completed_tests,
            is_being_tested=status is ProgramStatus.CURRENTLY_TESTING,
            is_waiting=status is ProgramStatus.AWAITING_TESTS,
            in_queue=in_queue,
        )


@dataclass
class Program:
    """
    Testing session of one directory.
    An empty id means the program was never submitted or was loaded from
    a results file.
    """

    id: str
    location_key: str
    status: ProgramStatus
    total_tests: int = 0
    result: Optional[Result] = None


@dataclass
class RunInfo:
    """Outcome of a request to run tests."""

    success: bool
    status: RunStatus


@dataclass
class AutotestEvent:
    """Payload delivered to event listeners."""

    program: Program


@dataclass
class SourceFile:
    """A program file sent to the autotester."""

    name: str
    content: str

    def to_dict(self) -> dict:
        return {"name": self.name, "content": self.content}


@dataclass
class FileStat:
    """Metadata about a path in file storage."""

    path: Path
    is_directory: bool
    children: List["FileStat"] = field(default_factory=list)
