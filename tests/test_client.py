import asyncio
import json

import pytest
import requests

from autotest_py.client import AutotesterClient, SourceFile
from autotest_py.config import GlobalConfig
from autotest_py.errors import RemoteServiceFailure


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self.payload = payload
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(payload)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.payload is None:
            raise ValueError("No JSON object could be decoded")
        return self.payload


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
        self.auth = None

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_client(*responses, **config):
    config.setdefault("server_url", "https://c9.example.org/")
    session = FakeSession(*responses)
    return AutotesterClient(GlobalConfig(**config), session=session), session


def test_set_task_posts_definition() -> None:
    client, session = make_client(FakeResponse({"id": 17}))
    task_id = asyncio.run(client.set_task({"tests": [1, 2]}))

    assert task_id == "17"
    method, url, kwargs = session.calls[0]
    assert method == "POST"
    assert url == "https://c9.example.org/autotester/api/tasks"
    assert kwargs["json"] == {"tests": [1, 2]}
    assert kwargs["timeout"] == 30.0


def test_set_program_and_files() -> None:
    client, session = make_client(FakeResponse({"id": "abc"}), FakeResponse({}))
    program_id = asyncio.run(client.set_program("17"))
    asyncio.run(client.set_program_files(program_id, [SourceFile("main.c", "int x;")]))

    assert program_id == "abc"
    assert session.calls[0][1].endswith("/autotester/api/tasks/17/programs")
    method, url, kwargs = session.calls[1]
    assert url.endswith("/autotester/api/programs/abc/files")
    assert kwargs["json"] == {"files": [{"name": "main.c", "content": "int x;"}]}


def test_get_results_returns_raw_payload() -> None:
    payload = {"status": 7, "queue_items": 0, "test_results": {"1": {"success": True, "status": 1}}}
    client, session = make_client(FakeResponse(payload))
    assert asyncio.run(client.get_results("abc")) == payload
    assert session.calls[0][0] == "GET"


def test_credentials_become_basic_auth() -> None:
    client, session = make_client(user="student", password="secret")
    assert session.auth == ("student", "secret")


def test_render_results_page() -> None:
    client, session = make_client(FakeResponse(text="<p>ok</p>"), language="en")
    html = asyncio.run(client.render_results_page('{"tests": []}', '{"status": 5}', 3))

    assert html == "<p>ok</p>"
    method, url, kwargs = session.calls[0]
    assert url == "https://c9.example.org/autotester/render/render.php"
    assert kwargs["params"] == {"language": "en"}
    assert kwargs["data"] == {"task": '{"tests": []}', "result": '{"status": 5}', "test": "3"}


@pytest.mark.parametrize(
    "response",
    [
        requests.ConnectionError("refused"),
        FakeResponse({"error": "x"}, status_code=500),
        FakeResponse(None, text="<html>"),
        FakeResponse({"message": "no id"}),
    ],
)
def test_failures_are_wrapped(response) -> None:
    client, _ = make_client(response)
    with pytest.raises(RemoteServiceFailure):
        asyncio.run(client.set_task({"tests": []}))


def test_result_without_status_is_rejected() -> None:
    client, _ = make_client(FakeResponse({"test_results": {}}))
    with pytest.raises(RemoteServiceFailure):
        asyncio.run(client.get_results("abc"))
