"""Behaviors a task can run, selected by its `UseCase` option.

- `Launch`: fan out independent `HelloWorker` tasks and submit their `Joiner`
- `HelloWorker`: leaf transform of the payload
- `Joiner`: combine the resolved results of the workers
"""

from .base import UseCaseHandler
from .fan_out import FAN_OUT_WIDTH, Launch, SubmitJoiner, SubmitWorkers
from .join import Joiner, join_dependencies
from .leaf import HelloWorker

__all__ = [
    "FAN_OUT_WIDTH",
    "HelloWorker",
    "Joiner",
    "Launch",
    "SubmitJoiner",
    "SubmitWorkers",
    "UseCaseHandler",
    "join_dependencies",
]
