"""CLI entrypoint for the subtasking worker.

`process` runs a single task read from a JSON file against the configured
agent, which is handy to replay a task outside the scheduler.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from subtasking_worker import __version__
from subtasking_worker.worker.agent.client import HttpAgentClient
from subtasking_worker.worker.config import WorkerSettings, require_http_url
from subtasking_worker.worker.dispatcher import SubTaskingWorker
from subtasking_worker.worker.logging import configure_logging
from subtasking_worker.worker.messages import ProcessRequest, ProcessResponse

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subtasking-worker",
        description="Scheduler task worker: fan-out of leaf workers and their joiner",
    )
    parser.add_argument("--version", action="version", version=f"subtasking-worker {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    process = subparsers.add_parser(
        "process", help="Process one task described by a JSON process request"
    )
    process.add_argument(
        "--task",
        required=True,
        type=Path,
        help="Path to a JSON process request (payload and dependency data base64-encoded)",
    )
    process.add_argument(
        "--agent-url",
        default=None,
        help="Agent base URL (defaults to SUBTASKING_AGENT_URL)",
    )

    return parser


def _load_request(path: Path) -> ProcessRequest:
    return ProcessRequest.model_validate_json(path.read_text(encoding="utf-8"))


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = WorkerSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    if args.command == "process":
        agent_url = settings.agent_base_url
        if args.agent_url is not None:
            try:
                agent_url = require_http_url(args.agent_url, name="--agent-url")
            except ValueError as e:
                print(f"Configuration error: {e}", file=sys.stderr)
                return 2

        try:
            request = _load_request(args.task)
        except (OSError, ValidationError) as e:
            logger.error("Invalid task file", extra={"path": str(args.task)})
            print(f"Cannot read task from {args.task}: {e}", file=sys.stderr)
            return 2

        task = request.to_descriptor()
        with HttpAgentClient(
            base_url=agent_url,
            session_id=task.session_id,
            communication_token=task.communication_token,
            timeout_seconds=settings.agent_timeout_seconds,
        ) as agent:
            output = SubTaskingWorker(settings).process(task, agent)

        print(ProcessResponse.from_output(output).model_dump_json())
        return 0 if output.ok else 1

    logger.error("Unknown command", extra={"command": args.command})
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
