# storefront/services/identity_client.py
import requests

from storefront.utils.retry import http_retry
from storefront.utils.settings import IDENTITY_URL, IDENTITY_API_KEY, HTTP_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class IdentityClient:
    """Resolves an access token against the external identity provider."""

    def __init__(self, base_url: str | None = None, api_key: str | None = None, timeout: int = HTTP_TIMEOUT_SECONDS):
        self.base_url = (base_url or IDENTITY_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else IDENTITY_API_KEY
        self.timeout = timeout

    @http_retry()
    def fetch_user(self, access_token: str) -> dict | None:
        url = f"{self.base_url}/auth/v1/user"
        logger.info(f"IdentityClient GET {url}")

        resp = requests.get(
            url,
            headers={"Authorization": f"Bearer {access_token}", "apikey": self.api_key},
            timeout=self.timeout,
        )
        if resp.status_code in (401, 403):
            return None
        resp.raise_for_status()
        return resp.json()
