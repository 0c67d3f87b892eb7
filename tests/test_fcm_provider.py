import json
from types import SimpleNamespace

import pytest
from firebase_admin import exceptions, messaging

import app.notifications.providers.fcm as fcm
from app.notifications.errors import PermanentProviderError, TransientProviderError
from app.notifications.providers import LogNotificationProvider, build_provider
from app.notifications.providers.fcm import FirebaseProviderClient, classify_firebase_error
from app.notifications.types import ErrorKind, ValidatedRequest

REQ = ValidatedRequest(target_token="device-token-1", title="Hi", body="there", data={"screen": "inbox"})


def _settings(**overrides):
    values = {
        "PUSH_PROVIDER": "fcm",
        "FIREBASE_SERVICE_ACCOUNT": None,
        "FIREBASE_CREDENTIALS_PATH": "serviceAccountKey.json",
        "FCM_DRY_RUN": False,
        "FCM_HTTP_TIMEOUT_S": 7.0,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.mark.asyncio
async def test_send_builds_message(monkeypatch):
    sent = {}

    def fake_send(message, dry_run=False, app=None):
        sent.update(message=message, dry_run=dry_run, app=app)
        return "projects/demo/messages/1"

    monkeypatch.setattr(fcm.messaging, "send", fake_send)
    client = FirebaseProviderClient("firebase-app", dry_run=True)
    message_id = await client.send(REQ)

    assert message_id == "projects/demo/messages/1"
    msg = sent["message"]
    assert msg.token == "device-token-1"
    assert msg.notification.title == "Hi"
    assert msg.notification.body == "there"
    assert msg.data == {"screen": "inbox"}
    assert sent["dry_run"] is True
    assert sent["app"] == "firebase-app"


@pytest.mark.parametrize(
    "exc,kind,transient",
    [
        (messaging.UnregisteredError("gone"), ErrorKind.INVALID_TOKEN, False),
        (messaging.SenderIdMismatchError("other sender"), ErrorKind.SENDER_MISMATCH, False),
        (messaging.ThirdPartyAuthError("apns cert"), ErrorKind.UNAUTHENTICATED, False),
        (messaging.QuotaExceededError("slow down"), ErrorKind.RATE_LIMITED, True),
        (exceptions.InvalidArgumentError("bad payload"), ErrorKind.INVALID_PAYLOAD, False),
        (exceptions.NotFoundError("not found"), ErrorKind.INVALID_TOKEN, False),
        (exceptions.UnavailableError("down"), ErrorKind.UNAVAILABLE, True),
        (exceptions.InternalError("oops"), ErrorKind.INTERNAL, True),
        (exceptions.DeadlineExceededError("slow"), ErrorKind.TIMEOUT, True),
        (exceptions.FailedPreconditionError("nope"), ErrorKind.PROVIDER_REJECTED, False),
    ],
)
def test_classify_firebase_error(exc, kind, transient):
    err = classify_firebase_error(exc)
    assert err.kind == kind
    assert err.transient is transient


@pytest.mark.asyncio
async def test_send_wraps_firebase_errors(monkeypatch):
    def fake_send(message, dry_run=False, app=None):
        raise exceptions.UnavailableError("backend down")

    monkeypatch.setattr(fcm.messaging, "send", fake_send)
    with pytest.raises(TransientProviderError) as exc:
        await FirebaseProviderClient("firebase-app").send(REQ)
    assert exc.value.kind == ErrorKind.UNAVAILABLE
    assert isinstance(exc.value.__cause__, exceptions.UnavailableError)


@pytest.mark.asyncio
async def test_send_wraps_unregistered_token(monkeypatch):
    def fake_send(message, dry_run=False, app=None):
        raise messaging.UnregisteredError("Requested entity was not found.")

    monkeypatch.setattr(fcm.messaging, "send", fake_send)
    with pytest.raises(PermanentProviderError) as exc:
        await FirebaseProviderClient("firebase-app").send(REQ)
    assert exc.value.kind == ErrorKind.INVALID_TOKEN


def test_from_settings_prefers_inline_service_account(monkeypatch):
    captured = {}
    monkeypatch.setattr(fcm.credentials, "Certificate", lambda src: ("cert", src))

    def fake_initialize_app(cred, options=None, name=None):
        captured.update(cred=cred, options=options, name=name)
        return SimpleNamespace(name=name)

    monkeypatch.setattr(fcm.firebase_admin, "initialize_app", fake_initialize_app)
    account = {"type": "service_account", "project_id": "demo"}
    client = FirebaseProviderClient.from_settings(_settings(FIREBASE_SERVICE_ACCOUNT=json.dumps(account)))

    assert captured["cred"] == ("cert", account)
    assert captured["options"] == {"httpTimeout": 7.0}
    assert captured["name"] == fcm.APP_NAME
    assert client.firebase_app.name == fcm.APP_NAME


def test_from_settings_falls_back_to_key_file(monkeypatch):
    captured = {}
    monkeypatch.setattr(fcm.credentials, "Certificate", lambda src: ("cert", src))

    def fake_initialize_app(cred, options=None, name=None):
        captured["cred"] = cred
        return SimpleNamespace(name=name)

    monkeypatch.setattr(fcm.firebase_admin, "initialize_app", fake_initialize_app)
    client = FirebaseProviderClient.from_settings(
        _settings(FIREBASE_CREDENTIALS_PATH="/secrets/key.json", FCM_DRY_RUN=True)
    )
    assert captured["cred"] == ("cert", "/secrets/key.json")
    assert client.dry_run is True


def test_close_deletes_app(monkeypatch):
    deleted = []
    monkeypatch.setattr(fcm.firebase_admin, "delete_app", deleted.append)
    client = FirebaseProviderClient("firebase-app")
    client.close()
    client.close()
    assert deleted == ["firebase-app"]


def test_build_provider():
    assert isinstance(build_provider(_settings(PUSH_PROVIDER="log")), LogNotificationProvider)
    with pytest.raises(ValueError):
        build_provider(_settings(PUSH_PROVIDER="carrier-pigeon"))


@pytest.mark.asyncio
async def test_log_provider_returns_message_id():
    message_id = await LogNotificationProvider().send(REQ)
    assert message_id.startswith("log-")
