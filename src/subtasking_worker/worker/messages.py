"""Wire format of a process request and its response.

Bytes travel base64-encoded in JSON; `ProcessRequest.to_descriptor` turns a
decoded request into the `TaskDescriptor` the use-cases work with.
"""

from __future__ import annotations

from pydantic import Base64Bytes, BaseModel, Field

from subtasking_worker.worker.models import Output, TaskDescriptor, TaskOptions


class ProcessRequest(BaseModel):
    session_id: str = Field(min_length=1)
    task_id: str = Field(min_length=1)
    communication_token: str = Field(default="")

    payload: Base64Bytes = Field(default=b"")
    task_options: TaskOptions = Field(default_factory=TaskOptions)
    expected_output_keys: list[str] = Field(default_factory=list)
    data_dependencies: dict[str, Base64Bytes] = Field(
        default_factory=dict,
        description="Resolved data of the declared dependencies, keyed by result id",
    )

    def to_descriptor(self) -> TaskDescriptor:
        return TaskDescriptor(
            session_id=self.session_id,
            task_id=self.task_id,
            payload=self.payload,
            task_options=self.task_options,
            expected_results=list(self.expected_output_keys),
            data_dependencies=dict(self.data_dependencies),
            communication_token=self.communication_token,
        )


class ProcessResponse(BaseModel):
    ok: bool
    error: str | None = None

    @classmethod
    def from_output(cls, output: Output) -> ProcessResponse:
        if output.ok:
            return cls(ok=True)
        return cls(ok=False, error=output.details)
