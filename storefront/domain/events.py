# storefront/domain/events.py
"""
Payment gateway notifications.

The webhook body is parsed into one of a closed set of variants. Known
event types are validated strictly, anything else becomes UnrecognizedEvent
so it can be acknowledged without touching the ledger.
"""
import json
from decimal import Decimal
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from storefront.domain.errors import MalformedPayload

CHARGE_SUCCESS = "charge.success"
CHARGE_FAILED = "charge.failed"


class ChargeData(BaseModel):
    reference: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0, description="Amount in minor currency units")

    @property
    def major_amount(self) -> Decimal:
        return (Decimal(self.amount) / 100).quantize(Decimal("0.01"))


class ChargeSuccess(BaseModel):
    event: Literal["charge.success"]
    data: ChargeData


class ChargeFailed(BaseModel):
    event: Literal["charge.failed"]
    data: ChargeData


class UnrecognizedEvent(BaseModel):
    event: str
    data: Optional[Dict[str, Any]] = None


PaymentEvent = Union[ChargeSuccess, ChargeFailed, UnrecognizedEvent]

_KNOWN_EVENTS = {
    CHARGE_SUCCESS: ChargeSuccess,
    CHARGE_FAILED: ChargeFailed,
}


def parse_payment_event(raw_body: bytes) -> PaymentEvent:
    try:
        payload = json.loads(raw_body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedPayload(f"Webhook body is not valid JSON: {e}")

    if not isinstance(payload, dict) or not isinstance(payload.get("event"), str):
        raise MalformedPayload("Webhook body has no event type")

    model = _KNOWN_EVENTS.get(payload["event"])
    if model is None:
        data = payload.get("data")
        return UnrecognizedEvent(event=payload["event"], data=data if isinstance(data, dict) else None)

    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise MalformedPayload(f"Invalid {payload['event']} payload: {e.error_count()} error(s)")
