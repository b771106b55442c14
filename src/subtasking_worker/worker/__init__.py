"""Worker components.

- Settings loaded from .env
- Structured logging scoped to the running task
- Use-case dispatch over the agent API
"""
