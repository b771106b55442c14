from __future__ import annotations

from dataclasses import dataclass

from subtasking_worker.worker.agent.client import AgentClient
from subtasking_worker.worker.models import TaskDescriptor

from .base import decode_text, single_expected_result


def son_payload(payload: str, task_id: str) -> str:
    return f"{payload}_SonId_{task_id}"


@dataclass(frozen=True, slots=True)
class HelloWorker:
    """Leaf task: tag the payload with our task id and store it as our result."""

    def execute(self, task: TaskDescriptor, agent: AgentClient) -> None:
        result_id = single_expected_result(task)
        text = decode_text(task.payload)
        agent.send_result(result_id, son_payload(text, task.task_id).encode("utf-8"))
