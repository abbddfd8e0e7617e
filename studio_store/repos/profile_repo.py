from sqlalchemy import select
from sqlalchemy.orm import Session

from studio_store.data.models.auth_session import AuthSessionModel
from studio_store.data.models.profile import ProfileModel


class ProfileRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: str) -> ProfileModel | None:
        return self.db.get(ProfileModel, user_id)

    def get_by_email(self, email: str) -> ProfileModel | None:
        return self.db.execute(
            select(ProfileModel).where(ProfileModel.email == email.lower())
        ).scalar_one_or_none()

    def create_profile(self, profile: ProfileModel) -> ProfileModel:
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        return profile

    def create_session(self, session: AuthSessionModel) -> AuthSessionModel:
        self.db.add(session)
        self.db.commit()
        return session

    def get_session(self, token: str) -> AuthSessionModel | None:
        return self.db.get(AuthSessionModel, token)

    def delete_session(self, token: str) -> None:
        session = self.get_session(token)
        if session:
            self.db.delete(session)
            self.db.commit()
