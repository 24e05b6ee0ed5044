"""Taskiq broker configuration."""

import importlib

import taskiq_fastapi
from taskiq import InMemoryBroker
from taskiq_redis import RedisAsyncResultBackend, RedisStreamBroker

from finder.config import get_settings

settings = get_settings()

if settings.taskiq_testing:
    broker = InMemoryBroker()
else:
    result_backend = RedisAsyncResultBackend(
        redis_url=settings.redis_url,
        result_ex_time=settings.task_result_ttl_seconds,
    )
    broker = RedisStreamBroker(url=settings.redis_url).with_result_backend(
        result_backend
    )

taskiq_fastapi.init(broker, "finder.main:app")


def _register_tasks() -> None:
    importlib.import_module("finder.taskiq_app.tasks")


_register_tasks()

__all__ = ["broker"]
