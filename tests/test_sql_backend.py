from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import studio_store.data.models  # noqa: F401
from studio_store.backend.sql import SqlBackend
from studio_store.data.database import Base, make_engine
from studio_store.data.models.order_item import OrderItemModel
from studio_store.data.seed import seed
from studio_store.domain.errors import BackendError
from studio_store.domain.schemas import Order
from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD


@pytest.fixture
def session_factory():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def sql_backend(session_factory, tmp_path):
    return SqlBackend(session_factory, files_dir=str(tmp_path), public_base_url="http://test/files")


@pytest.fixture
def session(sql_backend):
    return sql_backend.sign_up("Ana@Example.com", "secret123", "Ana", "Ruiz")


def _order_row(user_id, total="150.00"):
    return {
        "user_id": user_id,
        "user_email": "ana@example.com",
        "user_name": "Ana Ruiz",
        "total": total,
        "status": "pending",
        "priority": "normal",
        "payment_method": "credit_card",
        "specifications": {"style": "Anime", "budgetRange": "$100-500", "files": []},
        "notes": "",
    }


def _items(order_id):
    return [
        {"order_id": order_id, "service_id": "2", "service_name": "Explainer", "price": "150", "quantity": 1},
    ]


class TestAuth:
    def test_sign_up_and_sign_in(self, sql_backend, session):
        again = sql_backend.sign_in("ana@example.com", "secret123")

        assert again.user_id == session.user_id
        assert again.access_token != session.access_token

    def test_wrong_password(self, sql_backend, session):
        with pytest.raises(BackendError) as exc:
            sql_backend.sign_in("ana@example.com", "wrong")

        assert exc.value.message == "Invalid login credentials"

    def test_duplicate_email(self, sql_backend, session):
        with pytest.raises(BackendError):
            sql_backend.sign_up("ana@example.com", "secret123", "Otra")

    def test_session_lifecycle(self, sql_backend, session):
        assert sql_backend.get_session(session.access_token).user_id == session.user_id

        sql_backend.sign_out(session.access_token)

        assert sql_backend.get_session(session.access_token) is None

    def test_profile_row(self, sql_backend, session):
        profile = sql_backend.get_profile(session.user_id)

        assert profile["first_name"] == "Ana"
        assert profile["role"] == "client"
        assert sql_backend.get_profile("missing") is None

    def test_seeded_admin_can_sign_in(self, sql_backend, session_factory):
        seed(session_factory)
        seed(session_factory)

        admin = sql_backend.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)

        assert sql_backend.get_profile(admin.user_id)["role"] == "admin"


class TestOrders:
    def test_insert_and_select_joined(self, sql_backend, session):
        order = sql_backend.insert_order(_order_row(session.user_id))
        sql_backend.insert_order_items(_items(order["id"]))

        [row] = sql_backend.select_orders(user_id=session.user_id)
        parsed = Order.from_row(row)

        assert parsed.total == Decimal("150.00")
        assert parsed.specifications.budget_range == "$100-500"
        assert [i.service_id for i in parsed.items] == ["2"]

    def test_select_filters_by_user(self, sql_backend, session):
        other = sql_backend.sign_up("eva@example.com", "secret123", "Eva")
        sql_backend.insert_order(_order_row(session.user_id))
        sql_backend.insert_order(_order_row(other.user_id))

        assert len(sql_backend.select_orders()) == 2
        assert len(sql_backend.select_orders(user_id=other.user_id)) == 1

    def test_unknown_user_violates_foreign_key(self, sql_backend):
        with pytest.raises(BackendError):
            sql_backend.insert_order(_order_row("nobody"))

    def test_items_for_unknown_order_are_rejected(self, sql_backend, session):
        with pytest.raises(BackendError):
            sql_backend.insert_order_items(_items("missing-order"))

    def test_update_status(self, sql_backend, session):
        order = sql_backend.insert_order(_order_row(session.user_id))

        updated = sql_backend.update_order_status(order["id"], "in_progress")

        assert updated["status"] == "in_progress"
        assert sql_backend.update_order_status("missing", "completed") is None

    def test_update_status_only_from_expected_status(self, sql_backend, session):
        order = sql_backend.insert_order(_order_row(session.user_id))
        sql_backend.update_order_status(order["id"], "completed")

        stale = sql_backend.update_order_status(order["id"], "in_progress", expected_status="pending")

        assert stale is None
        [row] = sql_backend.select_orders()
        assert row["status"] == "completed"
        assert sql_backend.update_order_status(order["id"], "cancelled", expected_status="completed")["status"] == "cancelled"

    def test_delete_cascades_to_items(self, sql_backend, session, session_factory):
        order = sql_backend.insert_order(_order_row(session.user_id))
        sql_backend.insert_order_items(_items(order["id"]))

        sql_backend.delete_order(order["id"])

        db = session_factory()
        try:
            remaining = db.execute(select(func.count()).select_from(OrderItemModel)).scalar_one()
        finally:
            db.close()
        assert remaining == 0
        assert sql_backend.select_orders() == []


class TestStorage:
    def test_upload_writes_file(self, sql_backend, tmp_path):
        sql_backend.upload("u1/ORD-1/1-1.png", b"png", "image/png")

        assert (tmp_path / "order-attachments" / "u1/ORD-1/1-1.png").read_bytes() == b"png"
        assert sql_backend.public_url("u1/ORD-1/1-1.png") == "http://test/files/order-attachments/u1/ORD-1/1-1.png"

    def test_upload_never_overwrites(self, sql_backend):
        sql_backend.upload("u1/a.txt", b"1", "text/plain")

        with pytest.raises(BackendError):
            sql_backend.upload("u1/a.txt", b"2", "text/plain")
