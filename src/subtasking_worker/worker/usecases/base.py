from __future__ import annotations

from typing import Protocol

from subtasking_worker.worker.agent.client import AgentClient
from subtasking_worker.worker.models import TaskDescriptor, TaskFailure


class UseCaseHandler(Protocol):
    """One behavior selectable by a task.

    Handlers run to completion and raise on failure; turning exceptions into a
    task outcome is the dispatcher's job.
    """

    def execute(self, task: TaskDescriptor, agent: AgentClient) -> None: ...


def single_expected_result(task: TaskDescriptor) -> str:
    """Return the only result `task` is responsible for."""

    if len(task.expected_results) != 1:
        raise TaskFailure(
            f"Expected exactly one expected result, got {len(task.expected_results)}"
        )
    return task.expected_results[0]


def decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise TaskFailure(f"Data is not valid UTF-8 text: {e.reason}") from e
