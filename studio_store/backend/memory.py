# studio_store/backend/memory.py
import copy
import itertools
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from studio_store.backend.base import Backend, Row
from studio_store.domain.errors import BackendError
from studio_store.domain.schemas import AuthSession
from studio_store.utils.logging import get_logger
from studio_store.utils.security import hash_password, new_access_token, verify_password
from studio_store.utils.settings import (
    ATTACHMENTS_BUCKET,
    ADMIN_EMAIL,
    ADMIN_PASSWORD,
    PUBLIC_FILES_URL,
)

logger = get_logger(__name__)

ADMIN_ID = "admin001"


class MemoryBackend(Backend):
    """
    Modo "mock data": todo vive en memoria del proceso.
    Se siembra con la cuenta de staff (rol admin).
    """

    def __init__(
        self,
        admin_email: str = ADMIN_EMAIL,
        admin_password: str = ADMIN_PASSWORD,
        public_base_url: str = PUBLIC_FILES_URL,
    ):
        self.credentials: Dict[str, Tuple[str, str]] = {}  # email -> (user_id, hash)
        self.profiles: Dict[str, Row] = {}
        self.sessions: Dict[str, str] = {}  # token -> user_id
        self.orders: Dict[str, Row] = {}
        self.order_items: List[Row] = []
        self.files: Dict[str, Tuple[bytes, str]] = {}
        self.public_base_url = public_base_url.rstrip("/")
        self._item_ids = itertools.count(1)

        self._add_user(
            user_id=ADMIN_ID,
            email=admin_email,
            password=admin_password,
            first_name="Admin Staff",
            role="admin",
        )

    def _add_user(self, user_id, email, password, first_name, last_name=None, phone=None, role="client"):
        self.credentials[email.lower()] = (user_id, hash_password(password))
        self.profiles[user_id] = {
            "id": user_id,
            "email": email,
            "first_name": first_name,
            "last_name": last_name,
            "phone": phone,
            "role": role,
            "favorites": [],
            "created_at": datetime.now(timezone.utc),
        }

    def _open_session(self, user_id: str, email: str) -> AuthSession:
        token = new_access_token()
        self.sessions[token] = user_id
        return AuthSession(access_token=token, user_id=user_id, email=email)

    # =====================================================
    # AUTH
    # =====================================================
    def sign_in(self, email: str, password: str) -> AuthSession:
        entry = self.credentials.get(email.lower())
        if not entry or not verify_password(password, entry[1]):
            raise BackendError("Invalid login credentials", code="invalid_credentials")

        user_id = entry[0]
        return self._open_session(user_id, self.profiles[user_id]["email"])

    def sign_up(self, email, password, first_name, last_name=None, phone=None) -> AuthSession:
        if email.lower() in self.credentials:
            raise BackendError("User already registered", code="user_already_exists")

        user_id = f"usr_{uuid.uuid4().hex[:12]}"
        self._add_user(user_id, email, password, first_name, last_name, phone)
        logger.info(f"Registered mock user {user_id}")
        return self._open_session(user_id, email)

    def sign_out(self, access_token: str) -> None:
        self.sessions.pop(access_token, None)

    def get_session(self, access_token: str) -> Optional[AuthSession]:
        user_id = self.sessions.get(access_token)
        if user_id is None:
            return None
        return AuthSession(
            access_token=access_token,
            user_id=user_id,
            email=self.profiles[user_id]["email"],
        )

    # =====================================================
    # TABLES
    # =====================================================
    def get_profile(self, user_id, access_token=None) -> Optional[Row]:
        profile = self.profiles.get(user_id)
        return copy.deepcopy(profile) if profile else None

    def insert_order(self, row, access_token=None) -> Row:
        if row.get("user_id") not in self.profiles:
            raise BackendError(
                'insert or update on table "orders" violates foreign key constraint',
                code="23503",
            )

        order = copy.deepcopy(row)
        order.setdefault("id", str(uuid.uuid4()))
        order.setdefault("created_at", datetime.now(timezone.utc))
        self.orders[order["id"]] = order
        return copy.deepcopy(order)

    def insert_order_items(self, rows, access_token=None) -> List[Row]:
        #validar el lote completo antes de escribir nada
        for row in rows:
            if row.get("order_id") not in self.orders:
                raise BackendError(
                    'insert or update on table "order_items" violates foreign key constraint',
                    code="23503",
                )

        created = []
        for row in rows:
            item = dict(row, id=next(self._item_ids))
            self.order_items.append(item)
            created.append(dict(item))
        return created

    def select_orders(self, user_id=None, access_token=None) -> List[Row]:
        orders = [
            o for o in self.orders.values()
            if user_id is None or o["user_id"] == user_id
        ]
        orders.sort(key=lambda o: o["created_at"], reverse=True)

        result = []
        for order in orders:
            joined = copy.deepcopy(order)
            joined["order_items"] = [
                dict(i) for i in self.order_items if i["order_id"] == order["id"]
            ]
            result.append(joined)
        return result

    def update_order_status(self, order_id, status, access_token=None, expected_status=None) -> Optional[Row]:
        order = self.orders.get(order_id)
        if order is None:
            return None
        if expected_status is not None and order["status"] != expected_status:
            return None

        order["status"] = status
        return copy.deepcopy(order)

    def delete_order(self, order_id, access_token=None) -> None:
        self.orders.pop(order_id, None)
        #cascade
        self.order_items = [i for i in self.order_items if i["order_id"] != order_id]

    # =====================================================
    # STORAGE
    # =====================================================
    def upload(self, path, content, content_type, access_token=None) -> None:
        if path in self.files:
            raise BackendError("The resource already exists", code="Duplicate")
        self.files[path] = (content, content_type)

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{ATTACHMENTS_BUCKET}/{path}"
