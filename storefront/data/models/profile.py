from sqlalchemy import Column, String
from storefront.data.database import Base

ROLE_ADMIN = "admin"
ROLE_USER = "user"


class ProfileModel(Base):
    __tablename__ = "profiles"
    # same id as the identity provider's user
    id = Column(String(36), primary_key=True)
    role = Column(String(20), nullable=False, default=ROLE_USER)
