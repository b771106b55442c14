"""Configuration for the subtasking worker.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Scheduling hints for submitted children live here rather than in code so that
deployments can tune retries and priority without touching the use-cases.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from subtasking_worker.worker.models import USE_CASE_OPTION, TaskOptions

JoinOrder = Literal["mapping", "sorted"]


def require_http_url(url: str, *, name: str) -> str:
    """Return `url` stripped, or raise ValueError if it is not http(s)."""

    url = url.strip()
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"{name} must be an http(s) URL")
    return url


class WorkerSettings(BaseSettings):
    """Settings for the worker.

    Environment variables:
    - LOG_LEVEL                                (optional)
    - SUBTASKING_AGENT_URL                     (optional)
    - SUBTASKING_AGENT_TIMEOUT_SECONDS         (optional)
    - SUBTASKING_SUBTASK_MAX_DURATION_SECONDS  (optional)
    - SUBTASKING_SUBTASK_MAX_RETRIES           (optional)
    - SUBTASKING_SUBTASK_PRIORITY              (optional)
    - SUBTASKING_JOIN_ORDER                    (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `WorkerSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    agent_base_url: str = Field(
        default="http://localhost:1081",
        validation_alias="SUBTASKING_AGENT_URL",
        description="Base URL of the agent that stores results and accepts submissions",
    )
    agent_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="SUBTASKING_AGENT_TIMEOUT_SECONDS",
        description="Per-request timeout for calls into the agent",
    )

    subtask_max_duration_seconds: int = Field(
        default=3600,
        ge=1,
        validation_alias="SUBTASKING_SUBTASK_MAX_DURATION_SECONDS",
        description="Max duration hint attached to every submitted subtask",
    )
    subtask_max_retries: int = Field(
        default=2,
        ge=0,
        validation_alias="SUBTASKING_SUBTASK_MAX_RETRIES",
        description="Retry budget attached to every submitted subtask",
    )
    subtask_priority: int = Field(
        default=1,
        ge=0,
        validation_alias="SUBTASKING_SUBTASK_PRIORITY",
        description="Priority attached to every submitted subtask",
    )

    join_order: JoinOrder = Field(
        default="mapping",
        validation_alias="SUBTASKING_JOIN_ORDER",
        description=(
            "Order in which the joiner concatenates dependency data: 'mapping' keeps the "
            "order the scheduler handed them over, 'sorted' sorts by result id."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_http_agent_url(self) -> WorkerSettings:
        require_http_url(self.agent_base_url, name="SUBTASKING_AGENT_URL")
        return self

    def subtask_options(self, *, partition_id: str, use_case: str) -> TaskOptions:
        """Options attached to children submitted by a task running in `partition_id`."""

        return TaskOptions(
            max_duration=timedelta(seconds=self.subtask_max_duration_seconds),
            max_retries=self.subtask_max_retries,
            priority=self.subtask_priority,
            partition_id=partition_id,
            options={USE_CASE_OPTION: use_case},
        )
