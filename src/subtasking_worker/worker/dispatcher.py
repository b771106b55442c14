"""Entry point invoked by the scheduler for every task.

`SubTaskingWorker.process` reads the task's `UseCase` option, runs the matching
handler and reports an `Output`. It never raises: an unknown use-case and any
exception coming out of a handler both become an error outcome, and retrying
is left to the scheduler.
"""

from __future__ import annotations

import logging

from subtasking_worker.worker.agent.client import AgentClient
from subtasking_worker.worker.config import WorkerSettings
from subtasking_worker.worker.logging import task_logger
from subtasking_worker.worker.models import Output, TaskDescriptor, UseCase
from subtasking_worker.worker.usecases import HelloWorker, Joiner, Launch, UseCaseHandler

logger = logging.getLogger(__name__)

USE_CASE_NOT_FOUND = "UseCase not found"


def build_handlers(settings: WorkerSettings) -> dict[UseCase, UseCaseHandler]:
    return {
        UseCase.LAUNCH: Launch(settings),
        UseCase.JOINER: Joiner(order=settings.join_order),
        UseCase.HELLO_WORKER: HelloWorker(),
    }


class SubTaskingWorker:
    """Route a task to its use-case and turn the run into an `Output`."""

    def __init__(self, settings: WorkerSettings | None = None) -> None:
        self._settings = settings or WorkerSettings()
        self._handlers = build_handlers(self._settings)

    def select(self, task: TaskDescriptor) -> UseCaseHandler | None:
        use_case = UseCase.from_tag(task.task_options.use_case)
        if use_case is None:
            return None
        return self._handlers[use_case]

    def process(self, task: TaskDescriptor, agent: AgentClient) -> Output:
        log = task_logger(logger, session_id=task.session_id, task_id=task.task_id)
        log.info("Execute task", extra={"use_case": task.task_options.use_case})

        handler = self.select(task)
        if handler is None:
            log.warning(USE_CASE_NOT_FOUND, extra={"use_case": task.task_options.use_case})
            return Output.failure(USE_CASE_NOT_FOUND)

        try:
            handler.execute(task, agent)
        except Exception as e:
            log.exception("Error during task computing.")
            return Output.failure(str(e))

        log.info("Task completed")
        return Output.success()
