"""Client side of the agent API (results and task submission)."""

from subtasking_worker.worker.agent.client import (
    AgentClient,
    AgentError,
    CreatedResult,
    HttpAgentClient,
    ResultCreate,
    SubmittedTask,
    TaskCreation,
)

__all__ = [
    "AgentClient",
    "AgentError",
    "CreatedResult",
    "HttpAgentClient",
    "ResultCreate",
    "SubmittedTask",
    "TaskCreation",
]
