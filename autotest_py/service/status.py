"""Translation of autotester integer status codes into domain statuses."""

from typing import Dict

from ..client.models import ProgramStatus, TestResultStatus
from ..errors import UnknownStatusCode


PROGRAM_STATUS_CODES: Dict[int, ProgramStatus] = {
    1: ProgramStatus.AWAITING_TESTS,
    2: ProgramStatus.PLAGIARIZED,
    3: ProgramStatus.COMPILE_ERROR,
    4: ProgramStatus.FINISHED_TESTING,
    5: ProgramStatus.GRADED,
    6: ProgramStatus.NO_SOURCES_FOUND,
    7: ProgramStatus.CURRENTLY_TESTING,
    8: ProgramStatus.REJECTED,
}

TEST_STATUS_CODES: Dict[int, TestResultStatus] = {
    1: TestResultStatus.SUCCESS,
    2: TestResultStatus.SYMBOL_NOT_FOUND,
    3: TestResultStatus.COMPILE_FAILED,
    4: TestResultStatus.EXECUTION_TIMEOUT,
    5: TestResultStatus.EXECUTION_CRASH,
    6: TestResultStatus.WRONG_OUTPUT,
    7: TestResultStatus.PROFILER_ERROR,
    8: TestResultStatus.OUTPUT_NOT_FOUND,
    9: TestResultStatus.UNEXPECTED_EXCEPTION,
    10: TestResultStatus.INTERNAL_ERROR,
    11: TestResultStatus.UNZIP_FAILED,
    12: TestResultStatus.TOOL_FAILED,
}

_PROGRAM_CODES_BY_STATUS = {status: code for code, status in PROGRAM_STATUS_CODES.items()}
_TEST_CODES_BY_STATUS = {status: code for code, status in TEST_STATUS_CODES.items()}


def _lookup(table: dict, kind: str, code):
    # bool is an int subclass; True must not pass as code 1
    if isinstance(code, bool) or not isinstance(code, int):
        raise UnknownStatusCode(kind, code)
    try:
        return table[code]
    except KeyError:
        raise UnknownStatusCode(kind, code) from None


def program_status(code: int) -> ProgramStatus:
    """Translate a program status code (1-8)."""
    return _lookup(PROGRAM_STATUS_CODES, "program", code)


def test_status(code: int) -> TestResultStatus:
    """Translate a test result status code (1-12)."""
    return _lookup(TEST_STATUS_CODES, "test", code)


def program_status_code(status: ProgramStatus) -> int:
    return _PROGRAM_CODES_BY_STATUS[status]


def test_status_code(status: TestResultStatus) -> int:
    return _TEST_CODES_BY_STATUS[status]
