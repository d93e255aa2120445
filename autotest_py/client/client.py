"""HTTP client for the autotester grading service."""

import asyncio
import logging
from typing import Any, Dict, Iterable, Optional, Protocol

import requests

from .models import SourceFile
from ..config.global_config import GlobalConfig
from ..errors import RemoteServiceFailure


logger = logging.getLogger(__name__)


class Autotester(Protocol):
    """Remote grading capability used by AutotestService."""

    async def set_task(self, task: Dict[str, Any]) -> str: ...

    async def set_program(self, task_id: str) -> str: ...

    async def set_program_files(self, program_id: str, files: Iterable[SourceFile]) -> None: ...

    async def get_results(self, program_id: str) -> Dict[str, Any]: ...

    async def render_results_page(self, task: str, result: str, test_id) -> str: ...


class AutotesterClient:
    """HTTP client for interacting with the autotester service."""

    TASKS_PATH = "/autotester/api/tasks"
    PROGRAMS_PATH = "/autotester/api/tasks/{task_id}/programs"
    FILES_PATH = "/autotester/api/programs/{program_id}/files"
    RESULT_PATH = "/autotester/api/programs/{program_id}/result"
    RENDER_PATH = "/autotester/render/render.php"

    def __init__(
        self,
        config: Optional[GlobalConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client."""
        self.config = config or GlobalConfig.load()
        self.base_url = self.config.server_url.rstrip("/")
        self.session = session or requests.Session()
        if self.config.has_credentials():
            self.session.auth = (self.config.user, self.config.password)

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        kwargs.setdefault("timeout", self.config.timeout)
        try:
            response = self.session.request(method, url, **kwargs)
            response.raise_for_status()
        except requests.RequestException as e:
            raise RemoteServiceFailure(f"{method} {path} failed: {e}") from e
        return response

    def _json(self, method: str, path: str, **kwargs) -> Any:
        """Make a request and decode the JSON body."""
        response = self._request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise RemoteServiceFailure(f"{method} {path} returned invalid JSON") from e

    def _id(self, method: str, path: str, **kwargs) -> str:
        data = self._json(method, path, **kwargs)
        if not isinstance(data, dict) or data.get("id") in (None, ""):
            raise RemoteServiceFailure(f"{method} {path} returned no id: {data!r}")
        return str(data["id"])

    async def set_task(self, task: Dict[str, Any]) -> str:
        """Register a task definition and return its id."""
        task_id = await asyncio.to_thread(self._id, "POST", self.TASKS_PATH, json=task)
        logger.debug("Task ID: %s", task_id)
        return task_id

    async def set_program(self, task_id: str) -> str:
        """Create a submission for *task_id* and return its id."""
        path = self.PROGRAMS_PATH.format(task_id=task_id)
        program_id = await asyncio.to_thread(self._id, "POST", path)
        logger.debug("Program ID: %s", program_id)
        return program_id

    async def set_program_files(self, program_id: str, files: Iterable[SourceFile]) -> None:
        """Upload the source files of a submission."""
        payload = {"files": [f.to_dict() for f in files]}
        path = self.FILES_PATH.format(program_id=program_id)
        await asyncio.to_thread(self._request, "POST", path, json=payload)
        logger.debug("Sent %d files for program %s", len(payload["files"]), program_id)

    async def get_results(self, program_id: str) -> Dict[str, Any]:
        """Fetch the current testing results of a submission."""
        path = self.RESULT_PATH.format(program_id=program_id)
        data = await asyncio.to_thread(self._json, "GET", path)
        if not isinstance(data, dict) or "status" not in data:
            raise RemoteServiceFailure(f"Unexpected result payload for {program_id}: {data!r}")
        return data

    async def render_results_page(self, task: str, result: str, test_id) -> str:
        """Render the results of one test as HTML using the server-side renderer."""
        response = await asyncio.to_thread(
            self._request,
            "POST",
            self.RENDER_PATH,
            params={"language": self.config.language},
            data={"task": task, "result": result, "test": str(test_id)},
        )
        return response.text
