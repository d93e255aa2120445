import asyncio
import json
from pathlib import Path

import pytest

from autotest_py.client.models import ProgramStatus, TestResult, TestResultStatus
from autotest_py.errors import MalformedResultsFile, UnknownStatusCode
from autotest_py.service import AutotestService, LocalFileStorage

from conftest import GRADED_RESPONSE, FakeAutotester


@pytest.fixture()
def service() -> AutotestService:
    return AutotestService(FakeAutotester([GRADED_RESPONSE]), LocalFileStorage(), poll_interval=0.001)


def load(service: AutotestService, directory: Path):
    return asyncio.run(service.get_program_from_autotest_result_file(directory))


def test_missing_results_file(service, task_dir: Path) -> None:
    assert load(service, task_dir) is None


def test_persisted_results_round_trip(service, task_dir: Path) -> None:
    async def scenario():
        await service.run_tests(task_dir)
        await service.wait_for(task_dir)

    asyncio.run(scenario())
    live = service.get_program(task_dir)
    program = load(service, task_dir)

    assert program.status is live.status is ProgramStatus.GRADED
    assert program.id == ""
    assert program.total_tests == 0
    assert program.location_key == live.location_key
    assert sorted(program.result.test_results, key=lambda t: t.id) == [
        TestResult(id=1, success=True, status=TestResultStatus.SUCCESS),
        TestResult(id=2, success=False, status=TestResultStatus.WRONG_OUTPUT),
    ]
    # a loaded program is not a live session
    assert not service.is_being_tested(task_dir)


def test_results_without_tests(service, task_dir: Path) -> None:
    (task_dir / ".at_result").write_text(json.dumps({"status": 3, "test_results": []}))
    program = load(service, task_dir)
    assert program.status is ProgramStatus.COMPILE_ERROR
    assert program.result.test_results == []


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        "[1, 2]",
        json.dumps({"status": 5, "test_results": {"one": {"success": True, "status": 1}}}),
        json.dumps({"status": 5, "test_results": {"1": {"success": True}}}),
    ],
)
def test_malformed_results_file(service, task_dir: Path, content: str) -> None:
    (task_dir / ".at_result").write_text(content)
    with pytest.raises(MalformedResultsFile):
        load(service, task_dir)


def test_unknown_code_in_results_file(service, task_dir: Path) -> None:
    (task_dir / ".at_result").write_text(json.dumps({"status": 5, "test_results": {"1": {"success": True, "status": 99}}}))
    with pytest.raises(UnknownStatusCode):
        load(service, task_dir)


def test_results_page(task_dir: Path) -> None:
    autotester = FakeAutotester([GRADED_RESPONSE])
    service = AutotestService(autotester, LocalFileStorage())

    assert asyncio.run(service.get_results_page(task_dir, 2)) is None
    assert autotester.render_calls == []

    (task_dir / ".at_result").write_text(json.dumps(GRADED_RESPONSE))
    page = asyncio.run(service.get_results_page(task_dir, 2))

    assert page == autotester.rendered
    task, result, test_id = autotester.render_calls[0]
    assert json.loads(task)["name"] == "Zadatak 1"
    assert json.loads(result) == GRADED_RESPONSE
    assert test_id == 2
