# storefront/services/auth_service.py
from requests import RequestException
from sqlalchemy.orm import Session

from storefront.data.models.profile import ROLE_USER
from storefront.domain.errors import AuthenticationRequired, IdentityUnavailable
from storefront.domain.schemas import Buyer
from storefront.repos.profile_repo import ProfileRepo
from storefront.services.identity_client import IdentityClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AuthService:
    """Bearer token -> Buyer. Sessions themselves belong to the identity provider."""

    def __init__(self, db: Session, identity_client: IdentityClient):
        self.profiles = ProfileRepo(db)
        self.identity_client = identity_client

    def resolve_buyer(self, authorization: str | None) -> Buyer:
        token = _bearer_token(authorization)
        if not token:
            raise AuthenticationRequired()

        try:
            user = self.identity_client.fetch_user(token)
        except RequestException as e:
            logger.error(f"Identity provider call failed: {e}")
            raise IdentityUnavailable() from e

        if not user or not user.get("id"):
            raise AuthenticationRequired("Session expired, please sign in again")

        profile = self.profiles.get_profile(user["id"])
        return Buyer(
            id=user["id"],
            email=user.get("email"),
            role=profile.role if profile else ROLE_USER,
        )


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
