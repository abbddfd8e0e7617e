import os

os.environ.setdefault("BACKEND_MODE", "mock")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "1")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from decimal import Decimal
from unittest.mock import MagicMock

import fakeredis
import pytest

from studio_store.backend.memory import MemoryBackend
from studio_store.domain.schemas import RegisterIn, Service, ServiceCategory
from studio_store.services.notification_service import NotificationService
from studio_store.services.storefront import Storefront

ADMIN_EMAIL = "admin"
ADMIN_PASSWORD = "phkstudio2025"


def make_service(service_id: str, price: str, name: str | None = None, active: bool = True) -> Service:
    return Service(
        id=service_id,
        name=name or f"Servicio {service_id}",
        category=ServiceCategory.ILUSTRACION_DIGITAL,
        description="Servicio de prueba",
        price=Decimal(price),
        unit="proyecto",
        delivery_time="3 días",
        image="https://example.com/img.png",
        variations=["Básico"],
        active=active,
    )


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def backend():
    return MemoryBackend(admin_email=ADMIN_EMAIL, admin_password=ADMIN_PASSWORD)


@pytest.fixture
def notifier():
    return MagicMock(spec=NotificationService)


@pytest.fixture
def storefront(backend, redis_client, notifier):
    return Storefront.open("device-1", backend, redis_client, notifier=notifier)


@pytest.fixture
def client_storefront(storefront):
    """Storefront con un cliente registrado y sesion iniciada."""
    storefront.session.register(
        RegisterIn(email="ana@example.com", password="secret123", first_name="Ana", last_name="Ruiz")
    )
    storefront.state.drain_notifications()
    return storefront


@pytest.fixture
def admin_storefront(backend, redis_client, notifier):
    sf = Storefront.open("admin-device", backend, redis_client, notifier=notifier)
    sf.session.login(ADMIN_EMAIL, ADMIN_PASSWORD)
    sf.state.drain_notifications()
    return sf
