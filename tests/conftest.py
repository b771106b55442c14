"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from itertools import count

import pytest

from subtasking_worker.worker.agent.client import (
    CreatedResult,
    ResultCreate,
    SubmittedTask,
    TaskCreation,
)
from subtasking_worker.worker.config import WorkerSettings
from subtasking_worker.worker.models import USE_CASE_OPTION, TaskDescriptor, TaskOptions

_ENV_VARS = (
    "LOG_LEVEL",
    "SUBTASKING_AGENT_URL",
    "SUBTASKING_AGENT_TIMEOUT_SECONDS",
    "SUBTASKING_SUBTASK_MAX_DURATION_SECONDS",
    "SUBTASKING_SUBTASK_MAX_RETRIES",
    "SUBTASKING_SUBTASK_PRIORITY",
    "SUBTASKING_JOIN_ORDER",
)


class InMemoryAgent:
    """Agent double backed by dictionaries.

    Records every call by name in `calls`. `fail_on` maps a method name to the
    exception that method raises (after being recorded).
    """

    def __init__(self, *, first_task_number: int = 2) -> None:
        self.results: dict[str, bytes | None] = {}
        self.names: dict[str, str] = {}
        self.tasks: list[tuple[SubmittedTask, TaskOptions]] = []
        self.calls: list[str] = []
        self.fail_on: dict[str, Exception] = {}
        self.closed = False
        self._result_numbers = count(1)
        self._task_numbers = count(first_task_number)

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise self.fail_on[name]

    def _new_result(self, name: str, data: bytes | None) -> CreatedResult:
        result_id = f"r{next(self._result_numbers)}"
        self.results[result_id] = data
        self.names[result_id] = name
        return CreatedResult(name=name, result_id=result_id)

    def create_results_metadata(self, names: list[str]) -> list[CreatedResult]:
        self._record("create_results_metadata")
        return [self._new_result(name, None) for name in names]

    def create_results(self, results: list[ResultCreate]) -> list[CreatedResult]:
        self._record("create_results")
        return [self._new_result(r.name, r.data) for r in results]

    def submit_tasks(
        self, tasks: list[TaskCreation], task_options: TaskOptions
    ) -> list[SubmittedTask]:
        self._record("submit_tasks")
        submitted = []
        for t in tasks:
            info = SubmittedTask(
                task_id=f"T{next(self._task_numbers)}",
                payload_id=t.payload_id,
                expected_output_keys=list(t.expected_output_keys),
                data_dependencies=list(t.data_dependencies),
            )
            self.tasks.append((info, task_options))
            submitted.append(info)
        return submitted

    def send_result(self, result_id: str, data: bytes) -> None:
        self._record("send_result")
        if self.results.get(result_id, b"") is not None:
            raise RuntimeError(f"Result {result_id} is unknown or already resolved")
        self.results[result_id] = data

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> InMemoryAgent:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def reserve(self, result_id: str) -> None:
        """Pre-create a result slot the test hands to the task under test."""

        self.results[result_id] = None
        self.names[result_id] = result_id


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[pytest.MonkeyPatch]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch


@pytest.fixture
def settings(clean_env: pytest.MonkeyPatch) -> WorkerSettings:
    """Provide default settings, ignoring any local environment."""
    return WorkerSettings(_env_file=None)


@pytest.fixture
def agent() -> InMemoryAgent:
    """Provide an empty in-memory agent with the root result reserved."""
    fake = InMemoryAgent()
    fake.reserve("root-result")
    return fake


@pytest.fixture
def make_task() -> Callable[..., TaskDescriptor]:
    """Build task descriptors with sensible defaults."""

    def _make(
        use_case: str | None = "Launch",
        *,
        payload: bytes = b"abc",
        task_id: str = "T1",
        expected_results: list[str] | None = None,
        data_dependencies: dict[str, bytes] | None = None,
        partition_id: str = "partition-a",
    ) -> TaskDescriptor:
        options = {} if use_case is None else {USE_CASE_OPTION: use_case}
        return TaskDescriptor(
            session_id="session-1",
            task_id=task_id,
            payload=payload,
            task_options=TaskOptions(partition_id=partition_id, options=options),
            expected_results=["root-result"] if expected_results is None else expected_results,
            data_dependencies=data_dependencies or {},
        )

    return _make
