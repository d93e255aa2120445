"""Client module for autotester interaction."""

from .client import Autotester, AutotesterClient
from .models import (
    AutotestEvent,
    FileStat,
    Program,
    ProgramStatus,
    Result,
    RunInfo,
    RunStatus,
    SourceFile,
    TestResult,
    TestResultStatus,
)

__all__ = [
    "Autotester",
    "AutotesterClient",
    "AutotestEvent",
    "FileStat",
    "Program",
    "ProgramStatus",
    "Result",
    "RunInfo",
    "RunStatus",
    "SourceFile",
    "TestResult",
    "TestResultStatus",
]
