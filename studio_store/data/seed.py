# studio_store/data/seed.py
from studio_store.data.database import SessionLocal
from studio_store.data.models.profile import ProfileModel
from studio_store.repos.profile_repo import ProfileRepo
from studio_store.utils.logging import get_logger
from studio_store.utils.security import hash_password
from studio_store.utils.settings import ADMIN_EMAIL, ADMIN_PASSWORD

logger = get_logger(__name__)


def seed(session_factory=SessionLocal):
    """Crea la cuenta de staff (rol admin) si aun no existe."""
    db = session_factory()
    try:
        repo = ProfileRepo(db)
        #no forzamos: solo si falta
        if repo.get_by_email(ADMIN_EMAIL):
            return
        repo.create_profile(
            ProfileModel(
                id="admin001",
                email=ADMIN_EMAIL.lower(),
                password_hash=hash_password(ADMIN_PASSWORD),
                first_name="Admin Staff",
                role="admin",
                favorites=[],
            )
        )
        logger.info(f"Seeded admin profile {ADMIN_EMAIL}")
    finally:
        db.close()


if __name__ == "__main__":
    from studio_store.main import init_database

    init_database()
    seed()
