# studio_store/services/catalog_service.py
from typing import List, Optional

from pydantic import ValidationError

from studio_store.data.catalog import INITIAL_SERVICES
from studio_store.domain.errors import NotFoundError
from studio_store.domain.schemas import Service, ServiceCategory
from studio_store.domain.state import AppState
from studio_store.services.device_storage import SERVICES_KEY, DeviceStorage
from studio_store.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogService:
    """Catalogo estatico con cache en el almacenamiento del dispositivo."""

    def __init__(self, state: AppState, storage: DeviceStorage):
        self.state = state
        self.storage = storage

    def load(self) -> List[Service]:
        stored = self.storage.get_json(SERVICES_KEY)

        if stored is not None:
            try:
                self.state.services = [Service.model_validate(s) for s in stored]
                return self.state.services
            except (TypeError, ValidationError) as e:
                logger.warning(f"Cached catalog for {self.state.client_id} is invalid: {e}")

        self.state.services = [s.model_copy() for s in INITIAL_SERVICES]
        self.storage.set_json(
            SERVICES_KEY, [s.model_dump(mode="json") for s in self.state.services]
        )
        logger.info(f"Seeded catalog cache for {self.state.client_id}")
        return self.state.services

    def list(self, category: Optional[ServiceCategory] = None, query: Optional[str] = None) -> List[Service]:
        services = [s for s in self.state.services if s.active]

        if category is not None:
            services = [s for s in services if s.category == category]

        if query:
            q = query.strip().lower()
            services = [
                s for s in services
                if q in s.name.lower() or q in s.description.lower()
            ]

        return services

    def get(self, service_id: str) -> Service:
        for service in self.state.services:
            if service.id == service_id:
                return service
        raise NotFoundError(f"Servicio {service_id} no existe")
