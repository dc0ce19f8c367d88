import json

import httpx
import pytest
import respx

from app.modules.notifications.push_client import ExpoPushClient, PushDeliveryError, PushMessage

URL = "https://push.example.com/--/api/v2/push/send"


def _messages(n):
    return [PushMessage(to=f"ExponentPushToken[{i}]", title="Hi", body="Color check") for i in range(n)]


@respx.mock
def test_send_batch_parses_tickets():
    route = respx.post(URL).mock(return_value=httpx.Response(200, json={"data": [
        {"status": "ok", "id": "ticket-1"},
        {"status": "error", "message": "not registered", "details": {"error": "DeviceNotRegistered"}},
    ]}))
    client = ExpoPushClient(url=URL, access_token="secret", batch_size=100)
    tickets = client.send_batch(_messages(2))

    assert route.called
    request = route.calls.last.request
    assert request.headers["Authorization"] == "Bearer secret"
    sent = json.loads(request.content)
    assert sent[0] == {
        "to": "ExponentPushToken[0]", "title": "Hi", "body": "Color check", "data": {}, "sound": "default",
    }

    assert tickets[0].ok
    assert tickets[0].id == "ticket-1"
    assert not tickets[1].ok
    assert tickets[1].device_not_registered
    assert tickets[1].token == "ExponentPushToken[1]"


@respx.mock
def test_missing_tickets_become_errors():
    respx.post(URL).mock(return_value=httpx.Response(200, json={"data": [{"status": "ok", "id": "t"}]}))
    tickets = ExpoPushClient(url=URL, access_token="").send_batch(_messages(2))
    assert [t.ok for t in tickets] == [True, False]
    assert tickets[1].message == "No ticket returned"


@respx.mock
def test_request_level_errors_raise():
    respx.post(URL).mock(return_value=httpx.Response(200, json={"errors": [{"code": "PUSH_TOO_MANY"}]}))
    with pytest.raises(PushDeliveryError):
        ExpoPushClient(url=URL, access_token="").send_batch(_messages(1))


@respx.mock
def test_failed_batch_yields_transport_errors():
    respx.post(URL).mock(return_value=httpx.Response(500, text="boom"))
    tickets = ExpoPushClient(url=URL, access_token="").send(_messages(3))
    assert len(tickets) == 3
    assert all(t.error == "TransportError" for t in tickets)


@respx.mock
def test_send_splits_into_batches():
    def reply(request):
        batch = json.loads(request.content)
        return httpx.Response(200, json={"data": [{"status": "ok", "id": m["to"]} for m in batch]})

    route = respx.post(URL).mock(side_effect=reply)
    tickets = ExpoPushClient(url=URL, access_token="", batch_size=2).send(_messages(5))

    assert route.call_count == 3
    assert [t.id for t in tickets] == [f"ExponentPushToken[{i}]" for i in range(5)]
    assert all(t.ok for t in tickets)


def test_empty_send_makes_no_request():
    assert ExpoPushClient(url=URL, access_token="").send([]) == []
