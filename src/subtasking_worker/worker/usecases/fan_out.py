"""Fan-out of leaf workers and submission of the joiner continuation.

A `Launch` task never waits for its children. It submits independent
`HelloWorker` tasks, then hands its own expected result over to a `Joiner`
task whose data dependencies are the workers' results. The scheduler only
runs the joiner once all of them are resolved.

Partial failures are not rolled back: results reserved and tasks submitted
before a failing call stay live.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from subtasking_worker.worker.agent.client import (
    AgentClient,
    ResultCreate,
    SubmittedTask,
    TaskCreation,
)
from subtasking_worker.worker.config import WorkerSettings
from subtasking_worker.worker.logging import task_logger
from subtasking_worker.worker.models import TaskDescriptor, TaskFailure, UseCase

from .base import decode_text, single_expected_result

logger = logging.getLogger(__name__)

FAN_OUT_WIDTH = 5
JOINER_PAYLOAD = b"Submitting Joiner"


def father_payload(payload: str, task_id: str) -> str:
    """Payload shared by the workers, tagged with the launching task's id."""

    return f"{payload}_FatherId_{task_id}"


@dataclass(frozen=True, slots=True)
class SubmitWorkers:
    """Submit `FAN_OUT_WIDTH` independent workers sharing one payload.

    Returns the reserved result ids, one per worker, in submission order.
    """

    settings: WorkerSettings

    def submit(self, task: TaskDescriptor, agent: AgentClient) -> list[str]:
        log = task_logger(logger, session_id=task.session_id, task_id=task.task_id)
        log.debug("Submitting workers")

        text = decode_text(task.payload)

        reserved = agent.create_results_metadata(
            [f"{uuid.uuid4()}_{i}" for i in range(1, FAN_OUT_WIDTH + 1)]
        )
        result_ids = [r.result_id for r in reserved]
        if len(result_ids) != FAN_OUT_WIDTH:
            raise TaskFailure(f"Expected {FAN_OUT_WIDTH} reserved results, got {len(result_ids)}")

        payload_id = _create_payload(
            agent, father_payload(text, task.task_id).encode("utf-8"), what="worker"
        )

        agent.submit_tasks(
            [TaskCreation(payload_id=payload_id, expected_output_keys=[rid]) for rid in result_ids],
            self.settings.subtask_options(
                partition_id=task.task_options.partition_id,
                use_case=UseCase.HELLO_WORKER.value,
            ),
        )
        log.debug(
            "Workers submitted",
            extra={"payload_id": payload_id, "result_ids": result_ids},
        )
        return result_ids


@dataclass(frozen=True, slots=True)
class SubmitJoiner:
    """Submit the continuation that joins the workers' results.

    The joiner takes over `output_id`, the result the launching task was
    expected to produce.
    """

    settings: WorkerSettings

    def submit(
        self,
        task: TaskDescriptor,
        agent: AgentClient,
        *,
        output_id: str,
        dependency_ids: list[str],
    ) -> list[SubmittedTask]:
        log = task_logger(logger, session_id=task.session_id, task_id=task.task_id)
        log.debug("Submitting joiner")

        payload_id = _create_payload(agent, JOINER_PAYLOAD, what="joiner")

        return agent.submit_tasks(
            [
                TaskCreation(
                    payload_id=payload_id,
                    expected_output_keys=[output_id],
                    data_dependencies=list(dependency_ids),
                )
            ],
            self.settings.subtask_options(
                partition_id=task.task_options.partition_id,
                use_case=UseCase.JOINER.value,
            ),
        )


@dataclass(frozen=True, slots=True)
class Launch:
    """Fan out the workers, then submit their joiner."""

    settings: WorkerSettings

    def execute(self, task: TaskDescriptor, agent: AgentClient) -> None:
        log = task_logger(logger, session_id=task.session_id, task_id=task.task_id)
        log.debug("Launching workers")

        # Checked before any submission so a bad task does not leave
        # reserved results nobody will ever write.
        output_id = single_expected_result(task)

        result_ids = SubmitWorkers(self.settings).submit(task, agent)
        SubmitJoiner(self.settings).submit(
            task, agent, output_id=output_id, dependency_ids=result_ids
        )


def _create_payload(agent: AgentClient, data: bytes, *, what: str) -> str:
    created = agent.create_results([ResultCreate(name=f"{uuid.uuid4()}_{what}_payload", data=data)])
    if len(created) != 1:
        raise TaskFailure(f"Expected one {what} payload result, got {len(created)}")
    return created[0].result_id
