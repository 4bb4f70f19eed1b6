# storefront/services/payment_client.py
from decimal import Decimal, ROUND_HALF_UP

import requests

from storefront.utils.retry import http_retry
from storefront.utils.settings import (
    PAYSTACK_BASE_URL,
    PAYSTACK_SECRET_KEY,
    PAYMENT_SUCCESS_URL,
    HTTP_TIMEOUT_SECONDS,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentGatewayError(Exception):
    """Gateway answered, but not with a 2xx. `body` is its error payload as-is."""

    def __init__(self, status_code: int, body):
        super().__init__(f"Payment gateway returned {status_code}")
        self.status_code = status_code
        self.body = body


def to_minor_units(amount: Decimal) -> int:
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentClient:
    def __init__(
        self,
        base_url: str | None = None,
        secret_key: str | None = None,
        callback_url: str | None = None,
        timeout: int = HTTP_TIMEOUT_SECONDS,
    ):
        self.base_url = (base_url or PAYSTACK_BASE_URL).rstrip("/")
        self.secret_key = secret_key if secret_key is not None else PAYSTACK_SECRET_KEY
        self.callback_url = callback_url or PAYMENT_SUCCESS_URL
        self.timeout = timeout

    @http_retry()
    def initialize_transaction(self, email: str, amount: Decimal, reference: str) -> dict:
        """
        Start a transaction for `amount` (major units) and return the gateway's
        JSON body, which carries data.authorization_url on success.

        Raises PaymentGatewayError on a non-2xx answer and RequestException on
        network failure (after retries).
        """
        url = f"{self.base_url}/transaction/initialize"
        logger.info(f"PaymentClient POST {url} reference={reference}")

        resp = requests.post(
            url,
            json={
                "email": email,
                "amount": to_minor_units(amount),
                "reference": reference,
                "callback_url": self.callback_url,
            },
            headers={"Authorization": f"Bearer {self.secret_key}"},
            timeout=self.timeout,
        )
        try:
            body = resp.json()
        except ValueError:
            body = {"message": resp.text}

        if not resp.ok:
            logger.error(f"Payment initialization failed for {reference}: {resp.status_code} {body}")
            raise PaymentGatewayError(resp.status_code, body)
        return body


def authorization_url(body: dict) -> str | None:
    data = body.get("data") if isinstance(body, dict) else None
    if isinstance(data, dict):
        return data.get("authorization_url")
    return None
