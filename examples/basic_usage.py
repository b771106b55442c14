#!/usr/bin/env python3
"""Programmatic launch example.

This demonstrates using the worker components directly:

* load settings from `.env`
* build a `Launch` task descriptor
* process it against the agent configured in SUBTASKING_AGENT_URL

The agent must already know the session and the expected result passed on the
command line; the example only plays the part of the scheduler invoking the
worker once.
"""

from __future__ import annotations

import argparse
from typing import Sequence

from subtasking_worker.worker.agent.client import HttpAgentClient
from subtasking_worker.worker.config import WorkerSettings
from subtasking_worker.worker.dispatcher import SubTaskingWorker
from subtasking_worker.worker.logging import configure_logging
from subtasking_worker.worker.models import USE_CASE_OPTION, TaskDescriptor, TaskOptions, UseCase


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run one Launch task (programmatic example).")
    parser.add_argument("--session", required=True, help="Session id known by the agent")
    parser.add_argument("--task-id", default="launcher", help="Task id to report")
    parser.add_argument("--result", required=True, help="Result id the launch must eventually fill")
    parser.add_argument("--payload", default="Hello", help="Payload text")
    parser.add_argument("--partition", default="", help="Partition for the submitted subtasks")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = WorkerSettings()
    configure_logging(settings.log_level)

    task = TaskDescriptor(
        session_id=args.session,
        task_id=args.task_id,
        payload=args.payload.encode("utf-8"),
        task_options=TaskOptions(
            partition_id=args.partition,
            options={USE_CASE_OPTION: UseCase.LAUNCH.value},
        ),
        expected_results=[args.result],
    )

    with HttpAgentClient(
        base_url=settings.agent_base_url,
        session_id=task.session_id,
        timeout_seconds=settings.agent_timeout_seconds,
    ) as agent:
        output = SubTaskingWorker(settings).process(task, agent)

    if output.ok:
        print(f"Launched workers; result {args.result} will be written by the joiner")
        return 0
    print(f"Launch failed: {output.details}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
