"""Agent API client.

The agent is the scheduler-side service a worker calls back into while it
processes a task: it reserves and stores results and accepts new task
submissions. Use-cases only depend on the `AgentClient` protocol; the HTTP
implementation below keeps transport details out of them and makes tests easy.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any, Protocol
from urllib.parse import quote

import requests

from subtasking_worker.worker.models import TaskOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResultCreate:
    """A result to create with its data already known."""

    name: str
    data: bytes


@dataclass(frozen=True, slots=True)
class CreatedResult:
    """A result slot as known by the agent."""

    name: str
    result_id: str


@dataclass(frozen=True, slots=True)
class TaskCreation:
    """One task to submit.

    `data_dependencies` lists result ids the scheduler must resolve before the
    task becomes runnable.
    """

    payload_id: str
    expected_output_keys: list[str]
    data_dependencies: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SubmittedTask:
    """Minimal metadata returned for a submitted task."""

    task_id: str
    payload_id: str
    expected_output_keys: list[str]
    data_dependencies: list[str]


class AgentError(RuntimeError):
    """Raised when the agent answers with something we cannot interpret."""


class AgentClient(Protocol):
    """Operations a task may perform against the agent.

    Every call is self-contained: no transaction spans several calls.
    """

    def create_results_metadata(self, names: list[str]) -> list[CreatedResult]:
        """Reserve result slots without data."""
        ...

    def create_results(self, results: list[ResultCreate]) -> list[CreatedResult]:
        """Create results and write their data in one call."""
        ...

    def submit_tasks(
        self, tasks: list[TaskCreation], task_options: TaskOptions
    ) -> list[SubmittedTask]:
        """Submit tasks sharing the same options."""
        ...

    def send_result(self, result_id: str, data: bytes) -> None:
        """Write the final data of one of the current task's expected results."""
        ...

    def close(self) -> None: ...


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _str_list(value: object, *, what: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise AgentError(f"Agent response has an invalid '{what}' field")
    return list(value)


def _parse_created_results(data: object) -> list[CreatedResult]:
    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        raise AgentError("Agent response is missing 'results'")

    out: list[CreatedResult] = []
    for item in data["results"]:
        if not isinstance(item, dict):
            raise AgentError("Agent response has a malformed result entry")
        name = item.get("name")
        result_id = item.get("result_id")
        if not isinstance(name, str) or not isinstance(result_id, str) or not result_id:
            raise AgentError("Agent response has a malformed result entry")
        out.append(CreatedResult(name=name, result_id=result_id))
    return out


def _parse_submitted_tasks(data: object) -> list[SubmittedTask]:
    if not isinstance(data, dict) or not isinstance(data.get("task_infos"), list):
        raise AgentError("Agent response is missing 'task_infos'")

    out: list[SubmittedTask] = []
    for item in data["task_infos"]:
        if not isinstance(item, dict) or not isinstance(item.get("task_id"), str):
            raise AgentError("Agent response has a malformed task entry")
        out.append(
            SubmittedTask(
                task_id=item["task_id"],
                payload_id=str(item.get("payload_id", "")),
                expected_output_keys=_str_list(
                    item.get("expected_output_keys", []), what="expected_output_keys"
                ),
                data_dependencies=_str_list(
                    item.get("data_dependencies", []), what="data_dependencies"
                ),
            )
        )
    return out


class HttpAgentClient:
    """REST client for the agent, scoped to one session and communication token."""

    def __init__(
        self,
        *,
        base_url: str,
        session_id: str,
        communication_token: str = "",
        timeout_seconds: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("Agent base URL is required")
        if not session_id:
            raise ValueError("Session id is required")

        self._base_url = base_url.rstrip("/")
        self._session_id = session_id
        self._communication_token = communication_token
        self._timeout = timeout_seconds
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                "User-Agent": "subtasking-worker",
            }
        )

    @property
    def session_id(self) -> str:
        return self._session_id

    def _url(self, path: str) -> str:
        # Ids are opaque: escape them so they stay a single path segment.
        path = path.lstrip("/")
        return f"{self._base_url}/sessions/{quote(self._session_id, safe='')}/{path}"

    def _body(self, **fields: Any) -> dict[str, Any]:
        return {"communication_token": self._communication_token, **fields}

    def create_results_metadata(self, names: list[str]) -> list[CreatedResult]:
        resp = self._session.post(
            self._url("results/metadata"),
            json=self._body(results=[{"name": name} for name in names]),
            timeout=self._timeout,
        )
        resp.raise_for_status()
        created = _parse_created_results(resp.json())
        logger.debug(
            "Reserved results",
            extra={"session_id": self._session_id, "count": len(created)},
        )
        return created

    def create_results(self, results: list[ResultCreate]) -> list[CreatedResult]:
        resp = self._session.post(
            self._url("results"),
            json=self._body(results=[{"name": r.name, "data": _b64(r.data)} for r in results]),
            timeout=self._timeout,
        )
        resp.raise_for_status()
        return _parse_created_results(resp.json())

    def submit_tasks(
        self, tasks: list[TaskCreation], task_options: TaskOptions
    ) -> list[SubmittedTask]:
        resp = self._session.post(
            self._url("tasks"),
            json=self._body(
                task_options=task_options.model_dump(mode="json"),
                tasks=[
                    {
                        "payload_id": t.payload_id,
                        "expected_output_keys": list(t.expected_output_keys),
                        "data_dependencies": list(t.data_dependencies),
                    }
                    for t in tasks
                ],
            ),
            timeout=self._timeout,
        )
        resp.raise_for_status()
        submitted = _parse_submitted_tasks(resp.json())
        logger.debug(
            "Submitted tasks",
            extra={"session_id": self._session_id, "count": len(submitted)},
        )
        return submitted

    def send_result(self, result_id: str, data: bytes) -> None:
        if not result_id:
            raise ValueError("result_id is required")
        resp = self._session.put(
            self._url(f"results/{quote(result_id, safe='')}/data"),
            json=self._body(data=_b64(data)),
            timeout=self._timeout,
        )
        resp.raise_for_status()

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> HttpAgentClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
