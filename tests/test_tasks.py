from __future__ import annotations

from typing import Any

import pytest

import finder.taskiq_app.tasks as task_module
from finder.filters.query_string import serialize
from finder.filters.state import FilterState
from finder.taskiq_app.tasks import (
    enqueue_subscription_confirmation,
    send_subscription_confirmation,
)


class _RecordingNotifier:
    sent: list[tuple[str, str]] = []

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        _ = args, kwargs

    async def send(self, message: str, *, chat_id: str, **kwargs: Any) -> bool:
        _ = kwargs
        self.sent.append((chat_id, message))
        return True


@pytest.mark.anyio
async def test_send_subscription_confirmation_builds_links(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _RecordingNotifier.sent = []
    monkeypatch.setattr(task_module, "TelegramNotifier", _RecordingNotifier)
    query = serialize(FilterState(neighborhoods=["בבלי"], balcony=["yes"]))

    result = await send_subscription_confirmation("555", query)

    assert result == {"chat_id": "555", "status": "sent"}
    chat_id, message = _RecordingNotifier.sent[0]
    assert chat_id == "555"
    assert "/search?" in message
    assert "/dashboard/private-subscription?chat_id=555" in message
    assert "בבלי" in message


@pytest.mark.anyio
async def test_send_subscription_confirmation_reports_failure(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    class FailingNotifier(_RecordingNotifier):
        async def send(self, message: str, *, chat_id: str, **kwargs: Any) -> bool:
            _ = message, chat_id, kwargs
            return False

    monkeypatch.setattr(task_module, "TelegramNotifier", FailingNotifier)

    result = await send_subscription_confirmation("555", "")

    assert result["status"] == "failed"


@pytest.mark.anyio
async def test_enqueue_subscription_confirmation_skips_identical_repeat_save(
    monkeypatch: pytest.MonkeyPatch, init_taskiq: None
) -> None:
    _ = init_taskiq
    _RecordingNotifier.sent = []
    monkeypatch.setattr(task_module, "TelegramNotifier", _RecordingNotifier)

    first = await enqueue_subscription_confirmation("1", "")
    second = await enqueue_subscription_confirmation("1", "")
    other_chat = await enqueue_subscription_confirmation("2", "")

    assert first["enqueued"] is True
    assert "task_id" in first
    assert second == {"enqueued": False, "reason": "duplicate_enqueue"}
    assert other_chat["enqueued"] is True


@pytest.mark.anyio
async def test_enqueue_subscription_confirmation_sends_again_for_changed_filters(
    monkeypatch: pytest.MonkeyPatch, init_taskiq: None
) -> None:
    _ = init_taskiq
    _RecordingNotifier.sent = []
    monkeypatch.setattr(task_module, "TelegramNotifier", _RecordingNotifier)
    first_query = serialize(FilterState(neighborhoods=["בבלי"]))
    second_query = serialize(FilterState(neighborhoods=["נווה צדק"]))

    first = await enqueue_subscription_confirmation("7", first_query)
    second = await enqueue_subscription_confirmation("7", second_query)

    assert first["enqueued"] is True
    assert second["enqueued"] is True
    assert first["task_id"] != second["task_id"]
