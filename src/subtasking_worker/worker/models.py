"""Task-level data model shared by the dispatcher and the use-cases."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

USE_CASE_OPTION = "UseCase"


class UseCase(str, Enum):
    """Behaviors a task can select through its `UseCase` option."""

    LAUNCH = "Launch"
    JOINER = "Joiner"
    HELLO_WORKER = "HelloWorker"

    @classmethod
    def from_tag(cls, tag: str | None) -> UseCase | None:
        if tag is None:
            return None
        try:
            return cls(tag)
        except ValueError:
            return None


class TaskOptions(BaseModel):
    """Scheduling hints attached to a task.

    The worker never enforces these; they are forwarded to the agent when
    submitting children and interpreted by the external scheduler.
    """

    model_config = ConfigDict(frozen=True)

    max_duration: timedelta = Field(default=timedelta(hours=1))
    max_retries: int = Field(default=2, ge=0)
    priority: int = Field(default=1, ge=0)
    partition_id: str = Field(default="")
    options: dict[str, str] = Field(default_factory=dict)

    @property
    def use_case(self) -> str | None:
        return self.options.get(USE_CASE_OPTION)


class TaskDescriptor(BaseModel):
    """Immutable input of a single invocation.

    `data_dependencies` is filled by the scheduler once every declared
    dependency is resolved; its key set equals the declared dependency set.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str
    task_id: str
    payload: bytes = Field(default=b"")
    task_options: TaskOptions = Field(default_factory=TaskOptions)
    expected_results: list[str] = Field(default_factory=list)
    data_dependencies: dict[str, bytes] = Field(default_factory=dict)
    communication_token: str = Field(default="")


@dataclass(frozen=True, slots=True)
class Output:
    """Outcome reported back to the scheduler: ok, or an error with details."""

    ok: bool
    details: str = ""

    @classmethod
    def success(cls) -> Output:
        return cls(ok=True)

    @classmethod
    def failure(cls, details: str) -> Output:
        return cls(ok=False, details=details)


class TaskFailure(Exception):
    """Raised by a use-case when the task it was handed cannot be processed."""
