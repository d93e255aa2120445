import json
from pathlib import Path

import pytest

from autotest_py.service import LocalFileStorage


class FakeAutotester:
    """In-memory stand-in for the autotester service."""

    def __init__(self, responses=None, rendered="<html><body><p>Test OK</p></body></html>"):
        self.responses = list(responses or [])
        self.rendered = rendered
        self.tasks = []
        self.programs = []
        self.files = []
        self.polls = []
        self.render_calls = []

    async def set_task(self, task):
        self.tasks.append(task)
        return f"task-{len(self.tasks)}"

    async def set_program(self, task_id):
        self.programs.append(task_id)
        return f"program-{len(self.programs)}"

    async def set_program_files(self, program_id, files):
        self.files.append((program_id, list(files)))

    async def get_results(self, program_id):
        self.polls.append(program_id)
        # the last response repeats forever
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item

    async def render_results_page(self, task, result, test_id):
        self.render_calls.append((task, result, test_id))
        return self.rendered


class CountingStorage(LocalFileStorage):
    def __init__(self):
        super().__init__()
        self.writes = []
        self.deletes = []

    async def write_text(self, path, content):
        self.writes.append(Path(path).name)
        await super().write_text(path, content)

    async def delete(self, path):
        self.deletes.append(Path(path).name)
        await super().delete(path)


GRADED_RESPONSE = {
    "status": 5,
    "test_results": {
        "1": {"success": True, "status": 1},
        "2": {"success": False, "status": 6},
    },
}


@pytest.fixture()
def task_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "T1"
    directory.mkdir()
    task = {"name": "Zadatak 1", "language": "C", "tests": [{"id": 1}, {"id": 2}, {"id": 3}]}
    (directory / ".autotest2").write_text(json.dumps(task), encoding="utf-8")
    (directory / "main.c").write_text("int main() { return 0; }\n", encoding="utf-8")
    return directory


@pytest.fixture()
def storage() -> CountingStorage:
    return CountingStorage()
