"""FastAPI app factory.

Endpoints are thin wrappers over `SubTaskingWorker`: the transport decodes the
request, the worker does the rest.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from fastapi import FastAPI

from subtasking_worker import __version__
from subtasking_worker.worker.agent.client import AgentClient, HttpAgentClient
from subtasking_worker.worker.config import WorkerSettings
from subtasking_worker.worker.dispatcher import SubTaskingWorker
from subtasking_worker.worker.messages import ProcessRequest, ProcessResponse
from subtasking_worker.worker.models import TaskDescriptor

logger = logging.getLogger(__name__)

AgentFactory = Callable[[TaskDescriptor], AgentClient]


def http_agent_factory(settings: WorkerSettings) -> AgentFactory:
    def factory(task: TaskDescriptor) -> AgentClient:
        return HttpAgentClient(
            base_url=settings.agent_base_url,
            session_id=task.session_id,
            communication_token=task.communication_token,
            timeout_seconds=settings.agent_timeout_seconds,
        )

    return factory


def create_app(
    settings: WorkerSettings | None = None,
    agent_factory: AgentFactory | None = None,
) -> FastAPI:
    settings = settings or WorkerSettings()
    make_agent = agent_factory or http_agent_factory(settings)
    worker = SubTaskingWorker(settings)

    app = FastAPI(
        title="SubTasking Worker",
        version=__version__,
        description="Processes scheduler tasks: fan-out of leaf workers and their joiner.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Expose settings for request handlers that want to read it.
    app.state.settings = settings

    @app.get("/api/v1/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @app.post("/api/v1/process", response_model=ProcessResponse)
    def process(req: ProcessRequest) -> ProcessResponse:
        task = req.to_descriptor()
        agent = make_agent(task)
        try:
            output = worker.process(task, agent)
        finally:
            agent.close()
        return ProcessResponse.from_output(output)

    return app
