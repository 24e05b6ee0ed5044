"""Tests for the Telegram notifier and subscription links."""

import json

import httpx
import pytest

from finder.config import Settings
from finder.filters.state import FilterState
from finder.notifications.messages import (
    build_confirmation_message,
    build_edit_link,
    build_search_link,
    subscription_token,
    verify_subscription_token,
)
from finder.notifications.telegram import TelegramNotifier


def _settings(**overrides: object) -> Settings:
    return Settings(**overrides)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("app_env", "prod", "dev", "expected"),
    [
        ("production", "prod-token", "dev-token", "prod-token"),
        ("local", "prod-token", "dev-token", "dev-token"),
        ("local", "prod-token", "", "prod-token"),
    ],
)
def test_active_bot_token_by_environment(
    app_env: str, prod: str, dev: str, expected: str
) -> None:
    settings = _settings(
        app_env=app_env, telegram_bot_token=prod, telegram_bot_token_dev=dev
    )

    assert settings.active_telegram_bot_token == expected


@pytest.mark.anyio
async def test_send_posts_to_send_message() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True, "result": {"message_id": 1}})

    notifier = TelegramNotifier(
        _settings(app_env="production", telegram_bot_token="abc"),
        transport=httpx.MockTransport(handler),
    )

    sent = await notifier.send(
        "hello", chat_id="42", reply_markup={"inline_keyboard": []}
    )

    assert sent is True
    assert str(requests[0].url) == "https://api.telegram.org/botabc/sendMessage"
    payload = json.loads(requests[0].content)
    assert payload["chat_id"] == "42"
    assert payload["text"] == "hello"
    assert payload["reply_markup"] == {"inline_keyboard": []}


@pytest.mark.anyio
async def test_send_returns_false_on_http_error() -> None:
    notifier = TelegramNotifier(
        _settings(telegram_bot_token="abc"),
        transport=httpx.MockTransport(lambda request: httpx.Response(403)),
    )

    assert await notifier.send("hello", chat_id="42") is False


@pytest.mark.anyio
async def test_send_without_token_skips_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    notifier = TelegramNotifier(_settings(), transport=httpx.MockTransport(handler))

    assert await notifier.send("hello", chat_id="42") is False


def test_subscription_token_round_trip() -> None:
    token = subscription_token("42", "secret")

    assert len(token) == 32
    assert verify_subscription_token("42", token, "secret") is True
    assert verify_subscription_token("43", token, "secret") is False
    assert verify_subscription_token("42", "", "") is False
    assert verify_subscription_token("42", "anything", "") is True


def test_links_and_confirmation_message() -> None:
    state = FilterState(neighborhoods=["בבלי", "הבורסה"], parking=["yes"])
    search_link = build_search_link("https://thefinder.co.il/", state)
    edit_link = build_edit_link("https://thefinder.co.il", "42", "secret")

    message = build_confirmation_message(
        state, search_link=search_link, edit_link=edit_link
    )

    assert search_link.startswith("https://thefinder.co.il/search?minPrice=0")
    assert "balcony=" not in search_link
    assert f"token={subscription_token('42', 'secret')}" in edit_link
    assert "תל אביב: בבלי" in message
    assert "רמת גן: הבורסה" in message
    assert "חניה: כן" in message
    assert "מרפסת" not in message
