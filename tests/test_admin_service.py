from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from studio_store.domain.errors import AuthRequiredError, NotFoundError
from studio_store.domain.schemas import CheckoutForm, OrderStatus
from studio_store.domain.state import View
from studio_store.services.admin_service import validate_transition
from studio_store.services.storefront import Storefront
from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD, make_service


def _place_order(storefront, price="100"):
    storefront.cart.add(make_service("a", price))
    return storefront.checkout.submit_order(CheckoutForm())


class TestAccess:
    def test_anonymous_user_is_denied(self, storefront):
        with pytest.raises(AuthRequiredError):
            storefront.admin.open_dashboard()

        assert storefront.state.view == View.ADMIN

    def test_client_is_denied_without_backend_call(self, backend, redis_client, notifier):
        backend.sign_up("eva@example.com", "secret123", "Eva")
        spy = MagicMock(wraps=backend)
        sf = Storefront.open("device-eva", spy, redis_client, notifier=notifier)
        sf.session.login("eva@example.com", "secret123")
        spy.reset_mock()

        with pytest.raises(PermissionError):
            sf.admin.open_dashboard()
        with pytest.raises(PermissionError):
            sf.admin.set_status("any", OrderStatus.COMPLETED)

        spy.select_orders.assert_not_called()
        spy.update_order_status.assert_not_called()

    def test_admin_sees_every_order(self, client_storefront, admin_storefront):
        first = _place_order(client_storefront)
        second = _place_order(client_storefront)

        orders = admin_storefront.admin.open_dashboard()

        assert admin_storefront.state.view == View.ADMIN
        assert {o.id for o in orders} == {first.id, second.id}


class TestSetStatus:
    def test_status_update_is_persisted_and_mirrored(self, client_storefront, admin_storefront, backend, notifier):
        order = _place_order(client_storefront)
        admin_storefront.admin.open_dashboard()

        updated = admin_storefront.admin.set_status(order.id, OrderStatus.IN_PROGRESS)

        assert updated.status == OrderStatus.IN_PROGRESS
        assert backend.orders[order.id]["status"] == "in_progress"
        local = next(o for o in admin_storefront.state.orders if o.id == order.id)
        assert local.status == OrderStatus.IN_PROGRESS
        notifier.send_status_notification.assert_called_with(order.id, "in_progress")

    def test_status_update_loads_orders_when_panel_is_empty(self, client_storefront, admin_storefront, backend):
        order = _place_order(client_storefront)

        admin_storefront.admin.set_status(order.id, OrderStatus.COMPLETED)

        assert backend.orders[order.id]["status"] == "completed"

    def test_unknown_order(self, admin_storefront):
        with pytest.raises(NotFoundError):
            admin_storefront.admin.set_status("missing", OrderStatus.COMPLETED)

    def test_final_status_cannot_go_back(self, client_storefront, admin_storefront, backend):
        order = _place_order(client_storefront)
        admin_storefront.admin.set_status(order.id, OrderStatus.CANCELLED)

        with pytest.raises(ValueError):
            admin_storefront.admin.set_status(order.id, OrderStatus.PENDING)

        assert backend.orders[order.id]["status"] == "cancelled"


@pytest.mark.parametrize(
    "current, new, allowed",
    [
        (OrderStatus.PENDING, OrderStatus.IN_PROGRESS, True),
        (OrderStatus.PENDING, OrderStatus.CANCELLED, True),
        (OrderStatus.IN_PROGRESS, OrderStatus.COMPLETED, True),
        (OrderStatus.IN_PROGRESS, OrderStatus.PENDING, False),
        (OrderStatus.COMPLETED, OrderStatus.IN_PROGRESS, False),
        (OrderStatus.CANCELLED, OrderStatus.COMPLETED, False),
        (OrderStatus.COMPLETED, OrderStatus.COMPLETED, True),
    ],
)
def test_validate_transition(current, new, allowed):
    if allowed:
        validate_transition(current, new)
    else:
        with pytest.raises(ValueError):
            validate_transition(current, new)


def test_stats(client_storefront, admin_storefront, backend, redis_client, notifier):
    done = _place_order(client_storefront, "300")
    _place_order(client_storefront, "50")

    other = Storefront.open("device-bob", backend, redis_client, notifier=notifier)
    other.session.login(ADMIN_EMAIL, ADMIN_PASSWORD)
    _place_order(other, "20")

    admin_storefront.admin.open_dashboard()
    admin_storefront.admin.set_status(done.id, OrderStatus.COMPLETED)

    stats = admin_storefront.admin.stats()

    assert stats.total_orders == 3
    assert stats.pending_orders == 2
    assert stats.revenue == Decimal("300")
    assert stats.clients == 2


class TestConcurrentAdmins:
    """Dos paneles admin con la misma lista cargada."""

    @pytest.fixture
    def second_admin(self, backend, redis_client, notifier):
        sf = Storefront.open("admin-laptop", backend, redis_client, notifier=notifier)
        sf.session.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        return sf

    def test_stale_panel_cannot_move_status_backwards(self, client_storefront, admin_storefront, second_admin, backend):
        order = _place_order(client_storefront)
        admin_storefront.admin.load_orders()
        second_admin.admin.load_orders()

        second_admin.admin.set_status(order.id, OrderStatus.COMPLETED)

        with pytest.raises(ValueError):
            admin_storefront.admin.set_status(order.id, OrderStatus.IN_PROGRESS)

        assert backend.orders[order.id]["status"] == "completed"
        local = next(o for o in admin_storefront.state.orders if o.id == order.id)
        assert local.status == OrderStatus.COMPLETED

    def test_stale_panel_applies_a_still_valid_transition(self, client_storefront, admin_storefront, second_admin, backend):
        order = _place_order(client_storefront)
        admin_storefront.admin.load_orders()
        second_admin.admin.load_orders()

        second_admin.admin.set_status(order.id, OrderStatus.IN_PROGRESS)
        updated = admin_storefront.admin.set_status(order.id, OrderStatus.COMPLETED)

        assert updated.status == OrderStatus.COMPLETED
        assert backend.orders[order.id]["status"] == "completed"

    def test_stale_panel_same_target_is_a_no_op(self, client_storefront, admin_storefront, second_admin, backend, notifier):
        order = _place_order(client_storefront)
        admin_storefront.admin.load_orders()
        second_admin.admin.load_orders()
        second_admin.admin.set_status(order.id, OrderStatus.CANCELLED)
        notifier.reset_mock()

        result = admin_storefront.admin.set_status(order.id, OrderStatus.CANCELLED)

        assert result.status == OrderStatus.CANCELLED
        notifier.send_status_notification.assert_not_called()
