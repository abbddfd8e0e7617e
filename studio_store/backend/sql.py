# studio_store/backend/sql.py
import uuid
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from studio_store.backend.base import Backend, Row
from studio_store.data.database import SessionLocal
from studio_store.data.models.auth_session import AuthSessionModel
from studio_store.data.models.order import OrderModel
from studio_store.data.models.order_item import OrderItemModel
from studio_store.data.models.profile import ProfileModel
from studio_store.domain.errors import BackendError
from studio_store.domain.schemas import AuthSession
from studio_store.repos.order_repo import OrderRepo
from studio_store.repos.profile_repo import ProfileRepo
from studio_store.utils.logging import get_logger
from studio_store.utils.security import hash_password, new_access_token, verify_password
from studio_store.utils.settings import ATTACHMENTS_BUCKET, ATTACHMENTS_DIR, PUBLIC_FILES_URL

logger = get_logger(__name__)


def _profile_row(profile: ProfileModel) -> Row:
    return {
        "id": profile.id,
        "email": profile.email,
        "first_name": profile.first_name,
        "last_name": profile.last_name,
        "phone": profile.phone,
        "role": profile.role,
        "favorites": list(profile.favorites or []),
        "created_at": profile.created_at,
    }


def _item_row(item: OrderItemModel) -> Row:
    return {
        "id": item.id,
        "order_id": item.order_id,
        "service_id": item.service_id,
        "service_name": item.service_name,
        "price": item.price,
        "quantity": item.quantity,
        "variations": item.variations,
    }


def _order_row(order: OrderModel, with_items: bool = False) -> Row:
    row = {
        "id": order.id,
        "user_id": order.user_id,
        "user_email": order.user_email,
        "user_name": order.user_name,
        "total": order.total,
        "status": order.status,
        "priority": order.priority,
        "payment_method": order.payment_method,
        "specifications": dict(order.specifications or {}),
        "notes": order.notes,
        "created_at": order.created_at,
    }
    if with_items:
        row["order_items"] = [_item_row(i) for i in order.items]
    return row


class SqlBackend(Backend):
    """
    Backend propio sobre SQLAlchemy (equivalente autoalojado del servicio externo).
    Los adjuntos se guardan en disco bajo ATTACHMENTS_DIR/<bucket>/<path>.
    """

    def __init__(
        self,
        session_factory: sessionmaker = SessionLocal,
        files_dir: str = ATTACHMENTS_DIR,
        public_base_url: str = PUBLIC_FILES_URL,
    ):
        self.session_factory = session_factory
        self.files_root = Path(files_dir) / ATTACHMENTS_BUCKET
        self.public_base_url = public_base_url.rstrip("/")

    def _run(self, fn):
        """Ejecuta fn(db) en una sesion propia y traduce errores de SQLAlchemy."""
        db = self.session_factory()
        try:
            return fn(db)
        except IntegrityError as e:
            db.rollback()
            logger.error(f"Integrity error: {e.orig}")
            raise BackendError(str(e.orig), code=getattr(e.orig, "pgcode", None)) from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error: {e}")
            raise BackendError(str(e)) from e
        finally:
            db.close()

    # =====================================================
    # AUTH
    # =====================================================
    def sign_in(self, email: str, password: str) -> AuthSession:
        def op(db):
            repo = ProfileRepo(db)
            profile = repo.get_by_email(email)
            if not profile or not verify_password(password, profile.password_hash):
                raise BackendError("Invalid login credentials", code="invalid_credentials")

            session = repo.create_session(
                AuthSessionModel(token=new_access_token(), user_id=profile.id)
            )
            return AuthSession(access_token=session.token, user_id=profile.id, email=profile.email)

        return self._run(op)

    def sign_up(self, email, password, first_name, last_name=None, phone=None) -> AuthSession:
        def op(db):
            repo = ProfileRepo(db)
            if repo.get_by_email(email):
                raise BackendError("User already registered", code="user_already_exists")

            profile = repo.create_profile(
                ProfileModel(
                    id=str(uuid.uuid4()),
                    email=email.lower(),
                    password_hash=hash_password(password),
                    first_name=first_name,
                    last_name=last_name,
                    phone=phone,
                    role="client",
                    favorites=[],
                )
            )
            session = repo.create_session(
                AuthSessionModel(token=new_access_token(), user_id=profile.id)
            )
            logger.info(f"Registered user {profile.id}")
            return AuthSession(access_token=session.token, user_id=profile.id, email=profile.email)

        return self._run(op)

    def sign_out(self, access_token: str) -> None:
        self._run(lambda db: ProfileRepo(db).delete_session(access_token))

    def get_session(self, access_token: str) -> Optional[AuthSession]:
        def op(db):
            repo = ProfileRepo(db)
            session = repo.get_session(access_token)
            if not session:
                return None
            profile = repo.get_profile(session.user_id)
            return AuthSession(access_token=session.token, user_id=profile.id, email=profile.email)

        return self._run(op)

    # =====================================================
    # TABLES
    # =====================================================
    def get_profile(self, user_id, access_token=None) -> Optional[Row]:
        def op(db):
            profile = ProfileRepo(db).get_profile(user_id)
            return _profile_row(profile) if profile else None

        return self._run(op)

    def insert_order(self, row, access_token=None) -> Row:
        def op(db):
            order = OrderRepo(db).create_order(
                OrderModel(
                    user_id=row["user_id"],
                    user_email=row["user_email"],
                    user_name=row["user_name"],
                    total=Decimal(str(row["total"])),
                    status=row.get("status", "pending"),
                    priority=row.get("priority", "normal"),
                    payment_method=row.get("payment_method"),
                    specifications=row.get("specifications") or {},
                    notes=row.get("notes"),
                )
            )
            return _order_row(order)

        return self._run(op)

    def insert_order_items(self, rows, access_token=None) -> List[Row]:
        def op(db):
            items = OrderRepo(db).create_items(
                [
                    OrderItemModel(
                        order_id=r["order_id"],
                        service_id=r["service_id"],
                        service_name=r["service_name"],
                        price=Decimal(str(r["price"])),
                        quantity=r["quantity"],
                        variations=r.get("variations"),
                    )
                    for r in rows
                ]
            )
            return [_item_row(i) for i in items]

        return self._run(op)

    def select_orders(self, user_id=None, access_token=None) -> List[Row]:
        def op(db):
            orders = OrderRepo(db).list_orders(user_id)
            return [_order_row(o, with_items=True) for o in orders]

        return self._run(op)

    def update_order_status(self, order_id, status, access_token=None, expected_status=None) -> Optional[Row]:
        def op(db):
            order = OrderRepo(db).update_order_status(order_id, status, expected_status)
            return _order_row(order) if order else None

        return self._run(op)

    def delete_order(self, order_id, access_token=None) -> None:
        self._run(lambda db: OrderRepo(db).delete_order(order_id))

    # =====================================================
    # STORAGE
    # =====================================================
    def upload(self, path, content, content_type, access_token=None) -> None:
        target = self.files_root / path
        if target.exists():
            raise BackendError("The resource already exists", code="Duplicate")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            logger.error(f"Upload failed for {path}: {e}")
            raise BackendError(f"Upload failed: {e.strerror}") from e

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{ATTACHMENTS_BUCKET}/{path}"
