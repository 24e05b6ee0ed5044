"""Worker entrypoint: ``taskiq worker finder.taskiq_app.worker:broker``."""

from finder.taskiq_app.broker import broker
from finder.taskiq_app import tasks as _tasks  # noqa: F401

__all__ = ["broker"]
