"""Autotest session tracking: submit a directory, poll for results, persist them."""

import asyncio
import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional

from .events import Emitter
from .registry import SessionRegistry, normalize_key
from .status import program_status, test_status
from .storage import FileStorage
from ..client.client import Autotester
from ..client.models import (
    AutotestEvent,
    FileStat,
    Program,
    ProgramStatus,
    Result,
    RunInfo,
    RunStatus,
    SourceFile,
    TestResult,
)
from ..errors import MalformedResultsFile, UnknownStatusCode


logger = logging.getLogger(__name__)

AUTOTEST_FILENAME = ".autotest2"
AUTOTEST_RESULTS_FILENAME = ".at_result"


class AutotestService:
    """
    Runs autotests for directories and tracks each directory's session.

    run_tests() submits the task definition and the directory's files, then
    polls the autotester in a background task until the program reaches a
    terminal status. Progress is published through on_tests_update, the
    final state through on_tests_finished. If polling breaks because of a
    remote or storage error, on_tests_failed fires instead.
    """

    POLL_INTERVAL = 0.5

    def __init__(
        self,
        autotester: Autotester,
        storage: FileStorage,
        registry: Optional[SessionRegistry] = None,
        poll_interval: Optional[float] = None,
        workspace_root: Optional[Path] = None,
    ):
        self.autotester = autotester
        self.storage = storage
        self.registry = registry if registry is not None else SessionRegistry()
        self.poll_interval = self.POLL_INTERVAL if poll_interval is None else poll_interval
        self.workspace_root = workspace_root

        self.on_tests_update: Emitter[AutotestEvent] = Emitter("update")
        self.on_tests_finished: Emitter[AutotestEvent] = Emitter("finished")
        self.on_tests_failed: Emitter[AutotestEvent] = Emitter("failed")

        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Counter = Counter()
        self._pollers: Dict[str, asyncio.Task] = {}

    async def run_tests(self, directory) -> RunInfo:
        """
        Submit *directory* for testing.
        Returns once the submission is accepted; testing continues in the
        background.
        """
        key = normalize_key(directory)
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._lock_users[key] += 1
        try:
            async with lock:
                return await self._run_tests(key)
        finally:
            self._lock_users[key] -= 1
            if self._lock_users[key] == 0:
                del self._lock_users[key]
                del self._locks[key]

    async def _run_tests(self, key: str) -> RunInfo:
        if self.is_being_tested(key):
            return RunInfo(success=False, status=RunStatus.RUNNING)

        dir_stat = await self.storage.stat(key)
        if dir_stat is None or not dir_stat.is_directory:
            logger.info("Cannot open directory %s", key)
            return RunInfo(success=False, status=RunStatus.ERROR_OPENING_DIRECTORY)

        autotest_content = await self._load_autotest_file(key)
        if autotest_content is None:
            logger.info("No autotests defined in %s", key)
            return RunInfo(success=False, status=RunStatus.NO_AUTOTESTS_DEFINED)

        autotest = _parse_json(autotest_content, _join(key, AUTOTEST_FILENAME))
        files = await self._read_source_files(dir_stat.children)

        task_id = await self.autotester.set_task(autotest)
        logger.info("Task ID: %s", task_id)

        program = self.get_program(key)
        if program is None:
            program = await self._create_program(task_id, len(autotest.get("tests", [])), key)
            self.registry.put(key, program)
        logger.info("Program ID: %s", program.id)

        await self.autotester.set_program_files(program.id, files)
        logger.info("Source files are set (%d files)", len(files))

        # Claim the session before the first poll so a second run is refused
        program.result = Result.from_status(program.status)
        self._pollers[key] = asyncio.create_task(self._poll(key))

        return RunInfo(success=True, status=RunStatus.RUNNING)

    async def _read_source_files(self, children: List[FileStat]) -> List[SourceFile]:
        """Read the text files of a directory listing; binaries are skipped."""
        files: List[SourceFile] = []
        for child in children:
            if child.is_directory:
                continue
            name = Path(child.path).name
            try:
                content = await self.storage.read_text(child.path)
            except UnicodeDecodeError:
                logger.warning("Skipping %s: not a text file", name)
                continue
            files.append(SourceFile(name=name, content=content))
        return files

    async def _create_program(self, task_id: str, total_tests: int, key: str) -> Program:
        program_id = await self.autotester.set_program(task_id)
        return Program(
            id=program_id,
            location_key=key,
            status=ProgramStatus.AWAITING_TESTS,
            total_tests=total_tests,
        )

    def get_program(self, directory) -> Optional[Program]:
        return self.registry.get(directory)

    def is_being_tested(self, directory) -> bool:
        return self.registry.is_being_tested(directory)

    async def _poll(self, key: str) -> None:
        program = self.get_program(key)
        if program is None:
            logger.warning("No program found for %s", key)
            return

        try:
            while not await self.poll_once(key, program):
                await asyncio.sleep(self.poll_interval)
        except asyncio.CancelledError:
            self.registry.clear_result(key)
            raise
        except Exception:
            logger.exception("Polling results for %s failed", key)
            self.registry.clear_result(key)
            self.on_tests_failed.fire(AutotestEvent(program=program))
        finally:
            self._pollers.pop(key, None)

    async def poll_once(self, key: str, program: Program) -> bool:
        """
        Fetch results once and update *program*.
        Returns True when the program reached a terminal status.
        """
        response = await self.autotester.get_results(program.id)
        program.status = program_status(response.get("status"))

        program.result = Result.from_status(
            program.status,
            in_queue=response.get("queue_items") or 0,
            completed_tests=len(response.get("test_results") or {}),
        )
        self.on_tests_update.fire(AutotestEvent(program=program))

        if not program.status.is_terminal:
            return False

        await self._write_autotest_results_file(key, json.dumps(response, indent=4))
        self.registry.clear_result(key)
        logger.info("Testing of %s finished: %s", key, program.status.name)

        self.on_tests_finished.fire(AutotestEvent(program=program))
        return True

    async def wait_for(self, directory) -> None:
        """Wait until the poll loop of *directory* (if any) stops."""
        task = self._pollers.get(normalize_key(directory))
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel all running poll loops."""
        tasks = list(self._pollers.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _load_autotest_file(self, key: str) -> Optional[str]:
        return await self._load_optional(_join(key, AUTOTEST_FILENAME))

    async def _load_autotest_results_file(self, key: str) -> Optional[str]:
        return await self._load_optional(_join(key, AUTOTEST_RESULTS_FILENAME))

    async def _load_optional(self, path: str) -> Optional[str]:
        try:
            return await self.storage.read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Cannot read %s: %s", path, e)
            return None

    async def _write_autotest_results_file(self, key: str, content: str) -> None:
        path = _join(key, AUTOTEST_RESULTS_FILENAME)
        try:
            await self.storage.delete(path)
        except FileNotFoundError:
            pass
        await self.storage.write_text(path, content)

    async def has_autotests_defined(self, directory) -> bool:
        """Check whether *directory* (inside the workspace) has a task definition."""
        key = normalize_key(directory)
        if self.workspace_root is not None:
            root = Path(self.workspace_root).resolve()
            target = Path(key).resolve()
            if target != root and root not in target.parents:
                return False
        file_stat = await self.storage.stat(_join(key, AUTOTEST_FILENAME))
        return file_stat is not None and not file_stat.is_directory

    async def get_program_from_autotest_result_file(self, directory) -> Optional[Program]:
        """Rebuild a Program from the persisted results of *directory*."""
        key = normalize_key(directory)
        content = await self._load_autotest_results_file(key)
        if content is None:
            return None

        path = _join(key, AUTOTEST_RESULTS_FILENAME)
        data = _parse_json(content, path)

        test_results = []
        for test_id, value in (data.get("test_results") or {}).items():
            try:
                test_results.append(
                    TestResult(id=int(test_id), success=bool(value["success"]), status=test_status(value["status"]))
                )
            except UnknownStatusCode:
                raise
            except (KeyError, TypeError, ValueError) as e:
                raise MalformedResultsFile(path, f"bad entry for test {test_id}: {e!r}") from e

        return Program(
            id="",
            location_key=key,
            status=program_status(data.get("status")),
            total_tests=0,
            result=Result(test_results=test_results),
        )

    async def get_results_page(self, directory, test_id) -> Optional[str]:
        """Render the results page of one test; None unless both files exist."""
        key = normalize_key(directory)
        autotest_content = await self._load_autotest_file(key)
        results_content = await self._load_autotest_results_file(key)

        if autotest_content is None or results_content is None:
            return None

        return await self.autotester.render_results_page(autotest_content, results_content, test_id)


def _join(key: str, filename: str) -> str:
    return str(Path(key) / filename)


def _parse_json(content: str, path: str) -> Dict[str, Any]:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise MalformedResultsFile(path, str(e)) from e
    if not isinstance(data, dict):
        raise MalformedResultsFile(path, "expected a JSON object")
    return data
