"""FastAPI server adapter for subtasking-worker.

This module exposes the worker's process entry point over HTTP.

Design intent:
- Keep task logic in `subtasking_worker.worker.*`
- Keep server-specific concerns (routing, request decoding) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from subtasking_worker.server.app import create_app
