"""SubTasking Worker.

A scheduler-driven task worker with:
- configuration loaded from `.env`
- structured logging
- use-case dispatch: fan-out of leaf workers and a joiner continuation
"""

__version__ = "0.1.0"

from subtasking_worker.worker.config import WorkerSettings

__all__ = ["__version__", "WorkerSettings"]
