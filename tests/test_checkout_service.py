from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from studio_store.domain.errors import AuthRequiredError, BackendError
from studio_store.domain.schemas import Attachment, CheckoutForm, OrderPriority, OrderStatus, RegisterIn
from studio_store.domain.state import NotificationType, View
from studio_store.services.storefront import Storefront
from tests.conftest import make_service

FORM = CheckoutForm(
    name="Ana Ruiz",
    email="ana@example.com",
    style="Anime",
    software=["Blender"],
    budget="$500-1000",
    specs="Un personaje para mi juego",
    notes="Sin prisa",
)


def _fill_cart(storefront):
    a = make_service("a", "100")
    storefront.cart.add(a)
    storefront.cart.add(a)
    storefront.cart.add(make_service("b", "50"))
    storefront.state.drain_notifications()


class TestSubmitOrder:
    def test_order_total_matches_cart(self, client_storefront, backend):
        _fill_cart(client_storefront)

        order = client_storefront.checkout.submit_order(FORM)

        assert order.total == Decimal("250")
        assert order.status == OrderStatus.PENDING
        assert order.priority == OrderPriority.NORMAL
        assert sorted((i.service_id, i.quantity) for i in order.items) == [("a", 2), ("b", 1)]

        stored = backend.select_orders(user_id=client_storefront.state.user.id)
        assert len(stored) == 1
        assert Decimal(stored[0]["total"]) == Decimal("250")
        assert len(stored[0]["order_items"]) == 2

    def test_success_clears_cart_and_navigates_to_profile(self, client_storefront, notifier):
        _fill_cart(client_storefront)

        order = client_storefront.checkout.submit_order(FORM)

        assert client_storefront.state.cart == []
        assert client_storefront.cart.load() == []
        assert client_storefront.state.view == View.PROFILE
        assert client_storefront.state.orders[-1].id == order.id
        notifier.send_order_notification.assert_called_once_with(order.user_id, order.id)

        [note] = client_storefront.state.drain_notifications()
        assert note.type == NotificationType.SUCCESS

    def test_specifications_use_form_fields(self, client_storefront):
        _fill_cart(client_storefront)

        order = client_storefront.checkout.submit_order(FORM)

        assert order.specifications.style == "Anime"
        assert order.specifications.software == ["Blender"]
        assert order.specifications.budget_range == "$500-1000"
        assert order.specifications.description == "Un personaje para mi juego"
        assert order.notes == "Sin prisa"

    def test_blank_contact_fields_use_logged_in_user(self, client_storefront):
        _fill_cart(client_storefront)

        order = client_storefront.checkout.submit_order(CheckoutForm())

        assert order.user_email == "ana@example.com"
        assert order.user_name == "Ana Ruiz"


class TestValidation:
    def test_anonymous_checkout_requests_login(self, storefront):
        _fill_cart(storefront)

        with pytest.raises(AuthRequiredError):
            storefront.checkout.submit_order(FORM)

        assert storefront.state.login_requested is True
        assert len(storefront.state.cart) == 2

    def test_empty_cart_never_reaches_backend(self, backend, redis_client, notifier):
        spy = MagicMock(wraps=backend)
        sf = Storefront.open("device-spy", spy, redis_client, notifier=notifier)
        sf.session.register(RegisterIn(email="eva@example.com", password="secret123", first_name="Eva"))
        spy.reset_mock()

        with pytest.raises(ValueError):
            sf.checkout.submit_order(FORM)

        spy.upload.assert_not_called()
        spy.insert_order.assert_not_called()
        spy.insert_order_items.assert_not_called()
        assert sf.state.view == View.SERVICES
        assert sf.state.drain_notifications()[-1].type == NotificationType.ERROR


class TestFailures:
    def test_backend_failure_leaves_cart_and_orders_untouched(self, client_storefront, backend, monkeypatch):
        _fill_cart(client_storefront)
        cart_before = [i.model_copy() for i in client_storefront.state.cart]

        def boom(row, access_token=None):
            raise BackendError("permission denied for table orders", code="42501")

        monkeypatch.setattr(backend, "insert_order", boom)

        with pytest.raises(BackendError):
            client_storefront.checkout.submit_order(FORM)

        assert client_storefront.state.cart == cart_before
        assert client_storefront.state.orders == []
        [note] = client_storefront.state.drain_notifications()
        assert note.message == "Error al crear el pedido: permission denied for table orders"

    def test_item_insert_failure_deletes_orphan_order(self, client_storefront, backend, monkeypatch):
        _fill_cart(client_storefront)

        def boom(rows, access_token=None):
            raise BackendError("items rejected")

        monkeypatch.setattr(backend, "insert_order_items", boom)

        with pytest.raises(BackendError):
            client_storefront.checkout.submit_order(FORM)

        assert backend.orders == {}
        assert len(client_storefront.state.cart) == 2

    def test_unexpected_error_is_reported_as_backend_error(self, client_storefront, backend, monkeypatch):
        _fill_cart(client_storefront)
        monkeypatch.setattr(backend, "insert_order", MagicMock(side_effect=KeyError("id")))

        with pytest.raises(BackendError):
            client_storefront.checkout.submit_order(FORM)

        [note] = client_storefront.state.drain_notifications()
        assert note.message.startswith("Ocurrió un error inesperado")
        assert len(client_storefront.state.cart) == 2


class TestAttachments:
    def test_attachments_are_uploaded_under_user_folder(self, client_storefront, backend):
        _fill_cart(client_storefront)
        user_id = client_storefront.state.user.id

        order = client_storefront.checkout.submit_order(
            FORM,
            [
                Attachment(filename="ref.png", content=b"png", content_type="image/png"),
                Attachment(filename="brief", content=b"txt"),
            ],
        )

        assert len(backend.files) == 2
        assert all(path.startswith(f"{user_id}/ORD-") for path in backend.files)
        assert sorted(p.rsplit(".", 1)[-1] for p in backend.files) == ["bin", "png"]
        assert len(order.specifications.files) == 2
        assert all(url.startswith(backend.public_base_url) for url in order.specifications.files)

    def test_attachments_beyond_limit_are_ignored(self, client_storefront, backend):
        _fill_cart(client_storefront)
        attachments = [Attachment(filename=f"f{n}.jpg", content=b"x") for n in range(5)]

        order = client_storefront.checkout.submit_order(FORM, attachments)

        assert len(backend.files) == 3
        assert len(order.specifications.files) == 3

    def test_upload_failure_aborts_before_order_insert(self, client_storefront, backend, monkeypatch):
        _fill_cart(client_storefront)
        monkeypatch.setattr(backend, "upload", MagicMock(side_effect=BackendError("bucket not found")))
        insert = MagicMock(wraps=backend.insert_order)
        monkeypatch.setattr(backend, "insert_order", insert)

        with pytest.raises(BackendError) as exc:
            client_storefront.checkout.submit_order(FORM, [Attachment(filename="ref.png", content=b"x")])

        assert "ref.png" in exc.value.message
        insert.assert_not_called()
        assert len(client_storefront.state.cart) == 2
