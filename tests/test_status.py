import pytest

from autotest_py.client.models import ProgramStatus, TestResultStatus
from autotest_py.errors import UnknownStatusCode
from autotest_py.service import status


def test_program_codes_cover_every_status() -> None:
    translated = [status.program_status(code) for code in range(1, 9)]
    assert len(set(translated)) == 8
    assert set(translated) == set(ProgramStatus)


def test_test_codes_cover_every_status() -> None:
    translated = [status.test_status(code) for code in range(1, 13)]
    assert len(set(translated)) == 12
    assert set(translated) == set(TestResultStatus)


@pytest.mark.parametrize(
    "code, expected",
    [
        (1, ProgramStatus.AWAITING_TESTS),
        (5, ProgramStatus.GRADED),
        (7, ProgramStatus.CURRENTLY_TESTING),
        (8, ProgramStatus.REJECTED),
    ],
)
def test_program_status(code, expected) -> None:
    assert status.program_status(code) is expected


def test_test_status_values() -> None:
    assert status.test_status(1) is TestResultStatus.SUCCESS
    assert status.test_status(6) is TestResultStatus.WRONG_OUTPUT
    assert status.test_status(12) is TestResultStatus.TOOL_FAILED


@pytest.mark.parametrize("code", [0, 9, -1, None, "5", True, 5.0])
def test_unknown_program_code(code) -> None:
    with pytest.raises(UnknownStatusCode) as excinfo:
        status.program_status(code)
    assert excinfo.value.kind == "program"


@pytest.mark.parametrize("code", [0, 13, None])
def test_unknown_test_code(code) -> None:
    with pytest.raises(UnknownStatusCode):
        status.test_status(code)


def test_reverse_lookup() -> None:
    for code in range(1, 9):
        assert status.program_status_code(status.program_status(code)) == code
    for code in range(1, 13):
        assert status.test_status_code(status.test_status(code)) == code


def test_terminal_statuses() -> None:
    running = {s for s in ProgramStatus if not s.is_terminal}
    assert running == {ProgramStatus.AWAITING_TESTS, ProgramStatus.CURRENTLY_TESTING}
