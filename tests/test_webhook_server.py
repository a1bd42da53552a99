import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.webhook_server import create_app
from config.credentials import WatchdogSettings

SENDER = "+5511999999999"


@pytest.fixture
def settings():
    return WatchdogSettings(
        channel="whatsapp",
        recipient="+554799024829",
        account_sid="AC" + "0" * 32,
        auth_token="a" * 32,
        sender="whatsapp:+14155238886",
        services=("A", "B"),
    )


@pytest.fixture
def notifier():
    notifier = MagicMock()
    notifier.send = AsyncMock(return_value=True)
    return notifier


@pytest.fixture
def prober():
    prober = MagicMock()
    prober.is_running.side_effect = lambda service: {"A": False, "B": True}[service]
    return prober


@pytest.fixture
def client(settings, notifier, prober):
    app = create_app(settings, notifier=notifier, prober=prober, run_watchdog=False)
    return TestClient(app)


def test_status_message_gets_one_reply_per_service(client, notifier):
    response = client.post("/webhook", data={"From": SENDER, "Body": "Status"})

    assert response.status_code == 200
    assert "<Response>" in response.text
    assert [call.args for call in notifier.send.await_args_list] == [
        (SENDER, "*Alert*:\nService A is not running."),
        (SENDER, "*Status*:\nService B is running."),
    ]


def test_other_message_is_acknowledged_without_reply(client, notifier):
    response = client.post("/webhook", data={"From": SENDER, "Body": "hi there"})

    assert response.status_code == 200
    notifier.send.assert_not_awaited()


def test_missing_fields_are_ignored(client, notifier):
    response = client.post("/webhook", data={})

    assert response.status_code == 200
    notifier.send.assert_not_awaited()


def test_status_without_sender_is_ignored(client, notifier):
    response = client.post("/webhook", data={"Body": "status"})

    assert response.status_code == 200
    notifier.send.assert_not_awaited()


def test_webhook_does_not_touch_alert_record(settings, notifier, prober):
    app = create_app(settings, notifier=notifier, prober=prober, run_watchdog=False)
    client = TestClient(app)

    client.post("/webhook", data={"From": SENDER, "Body": "status"})

    assert app.state.watchdog.debouncer.snapshot() == {}


def test_health_endpoint_lists_services(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "services": ["A", "B"]}


def test_lifespan_starts_and_cancels_poll_loop(settings, notifier, prober):
    events = []

    async def run_forever():
        events.append("started")
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            events.append("cancelled")
            raise

    watchdog = MagicMock()
    watchdog.run_forever = run_forever
    app = create_app(settings, notifier=notifier, prober=prober, watchdog=watchdog)

    with TestClient(app) as client:
        assert client.get("/health").status_code == 200

    assert events == ["started", "cancelled"]
