from sqlalchemy.orm import Session
from storefront.data.models.profile import ProfileModel


class ProfileRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: str) -> ProfileModel | None:
        return self.db.get(ProfileModel, user_id)
