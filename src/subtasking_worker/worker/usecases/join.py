from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from subtasking_worker.worker.agent.client import AgentClient
from subtasking_worker.worker.config import JoinOrder
from subtasking_worker.worker.logging import task_logger
from subtasking_worker.worker.models import TaskDescriptor

from .base import decode_text, single_expected_result

logger = logging.getLogger(__name__)

JOINED_SUFFIX = "_Joined"


def join_dependencies(dependencies: Mapping[str, bytes], *, order: JoinOrder = "mapping") -> str:
    """Concatenate resolved dependencies, one suffixed line each.

    With `order="mapping"` lines follow the mapping's iteration order, which is
    whatever order the scheduler delivered them in. `order="sorted"` sorts by
    result id.
    """

    keys = sorted(dependencies) if order == "sorted" else list(dependencies)
    return "".join(f"{decode_text(dependencies[key])}{JOINED_SUFFIX}\n" for key in keys)


@dataclass(frozen=True, slots=True)
class Joiner:
    """Continuation task: combine the workers' results into the launcher's result."""

    order: JoinOrder = "mapping"

    def execute(self, task: TaskDescriptor, agent: AgentClient) -> None:
        log = task_logger(logger, session_id=task.session_id, task_id=task.task_id)
        log.debug("Starting joiner", extra={"dependencies": len(task.data_dependencies)})

        result_id = single_expected_result(task)
        joined = join_dependencies(task.data_dependencies, order=self.order)
        agent.send_result(result_id, joined.encode("utf-8"))
