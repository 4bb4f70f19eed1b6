import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import select

from storefront.data.models import OrderModel
from storefront.domain.errors import InvalidSignature, MalformedPayload
from storefront.services.webhook_service import WebhookService, sign, verify_signature

WEBHOOK_SECRET = "test-secret"


def _body(event, reference="o1", amount=20000):
    return json.dumps({"event": event, "data": {"reference": reference, "amount": amount}}).encode()


@pytest.fixture
def order(db, supermarket):
    o = OrderModel(
        id="o1",
        supermarket_id="s1",
        user_id="user-1",
        total_amount=Decimal("200.00"),
        status="pending",
        created_at=datetime.now(timezone.utc),
    )
    db.add(o)
    db.commit()
    return o


@pytest.fixture
def service(db, notifier):
    return WebhookService(db, notification_service=notifier, secret=WEBHOOK_SECRET)


def _status(db, order_id="o1"):
    db.expire_all()
    return db.get(OrderModel, order_id).status


def test_signature_is_hex_hmac_sha512():
    body = b'{"event":"charge.success"}'
    signature = sign(body, "k")
    assert len(signature) == 128
    assert verify_signature(body, signature, "k")
    assert verify_signature(body, signature.upper(), "k")
    assert not verify_signature(body, signature, "other")
    assert not verify_signature(body, None, "k")
    assert not verify_signature(body, "", "k")


def test_charge_success_marks_order_paid(db, service, order, notifier):
    body = _body("charge.success")

    assert service.handle_notification(body, sign(body, WEBHOOK_SECRET)) == {"status": "ok"}

    assert _status(db) == "paid"
    assert notifier.sent == [("o1", "paid")]


def test_charge_failed_marks_order_failed(db, service, order, notifier):
    body = _body("charge.failed")

    service.handle_notification(body, sign(body, WEBHOOK_SECRET))

    assert _status(db) == "failed"
    assert notifier.sent == [("o1", "failed")]


def test_replay_is_idempotent(db, service, order, notifier):
    body = _body("charge.success")
    signature = sign(body, WEBHOOK_SECRET)

    service.handle_notification(body, signature)
    first = _status(db)
    assert service.handle_notification(body, signature) == {"status": "ok"}

    assert _status(db) == first == "paid"
    assert notifier.sent == [("o1", "paid")]


def test_tampered_body_is_rejected(db, service, order):
    body = _body("charge.success")
    signature = sign(body, WEBHOOK_SECRET)

    for i in (0, len(body) // 2, len(body) - 1):
        tampered = bytearray(body)
        tampered[i] ^= 0x01
        with pytest.raises(InvalidSignature):
            service.handle_notification(bytes(tampered), signature)

    assert _status(db) == "pending"


def test_missing_signature_is_rejected(db, service, order):
    with pytest.raises(InvalidSignature):
        service.handle_notification(_body("charge.success"), None)
    assert _status(db) == "pending"


def test_unknown_reference_is_acknowledged(db, service, order, notifier):
    body = _body("charge.success", reference="does-not-exist")

    assert service.handle_notification(body, sign(body, WEBHOOK_SECRET)) == {"status": "ok"}

    db.expire_all()
    assert [o.id for o in db.execute(select(OrderModel)).scalars()] == ["o1"]
    assert notifier.sent == []


def test_unrecognized_event_is_a_noop(db, service, order, notifier):
    body = _body("transfer.success")

    assert service.handle_notification(body, sign(body, WEBHOOK_SECRET)) == {"status": "ok"}

    assert _status(db) == "pending"
    assert notifier.sent == []


def test_malformed_known_event_is_rejected(db, service, order):
    body = json.dumps({"event": "charge.success", "data": {"amount": 100}}).encode()

    with pytest.raises(MalformedPayload):
        service.handle_notification(body, sign(body, WEBHOOK_SECRET))

    assert _status(db) == "pending"


def test_late_failure_after_payment_wins_and_is_flagged(db, service, order, notifier, caplog):
    success, failed = _body("charge.success"), _body("charge.failed")

    service.handle_notification(success, sign(success, WEBHOOK_SECRET))
    with caplog.at_level("WARNING"):
        service.handle_notification(failed, sign(failed, WEBHOOK_SECRET))

    assert _status(db) == "failed"
    assert notifier.sent == [("o1", "paid"), ("o1", "failed")]
    assert "was paid" in caplog.text


class BrokenNotifier:
    def __init__(self):
        self.attempts = []

    def send_payment_notification(self, order_id, status):
        self.attempts.append((order_id, status))
        raise ConnectionError("broker down")


def test_notification_failure_still_acks_committed_status(db, order):
    notifier = BrokenNotifier()
    service = WebhookService(db, notification_service=notifier, secret=WEBHOOK_SECRET)
    body = _body("charge.success")

    assert service.handle_notification(body, sign(body, WEBHOOK_SECRET)) == {"status": "ok"}

    assert _status(db) == "paid"
    assert notifier.attempts == [("o1", "paid")]


def test_webhook_endpoint_acks_when_broker_is_down(client, db, order, notifier, monkeypatch):
    def broker_down(order_id, status):
        raise ConnectionError("broker down")

    monkeypatch.setattr(notifier, "send_payment_notification", broker_down)
    body = _body("charge.success")

    resp = client.post("/api/paystack-webhook", content=body, headers={"x-paystack-signature": sign(body, WEBHOOK_SECRET)})

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert _status(db) == "paid"


def test_failed_order_can_still_be_paid(db, service, order):
    failed, success = _body("charge.failed"), _body("charge.success")

    service.handle_notification(failed, sign(failed, WEBHOOK_SECRET))
    service.handle_notification(success, sign(success, WEBHOOK_SECRET))

    assert _status(db) == "paid"


def test_amount_mismatch_still_marks_paid(db, service, order, caplog):
    body = _body("charge.success", amount=100)

    with caplog.at_level("WARNING"):
        service.handle_notification(body, sign(body, WEBHOOK_SECRET))

    assert _status(db) == "paid"
    assert "expected 200.00" in caplog.text


# --- HTTP endpoint ---------------------------------------------------------


def test_webhook_endpoint_marks_paid(client, db, order):
    body = _body("charge.success")

    resp = client.post(
        "/api/paystack-webhook",
        content=body,
        headers={"x-paystack-signature": sign(body, WEBHOOK_SECRET), "content-type": "application/json"},
    )

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert _status(db) == "paid"


def test_webhook_endpoint_bad_signature_is_401(client, db, order):
    body = _body("charge.success")

    resp = client.post("/api/paystack-webhook", content=body, headers={"x-paystack-signature": "00" * 64})

    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid signature"}
    assert _status(db) == "pending"


def test_webhook_endpoint_garbage_is_500(client, db, order):
    body = b"not json"

    resp = client.post("/api/paystack-webhook", content=body, headers={"x-paystack-signature": sign(body, WEBHOOK_SECRET)})

    assert resp.status_code == 500
    assert "error" in resp.json()
