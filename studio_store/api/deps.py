# studio_store/api/deps.py
import threading
from collections import OrderedDict
from functools import lru_cache

import redis
from fastapi import Depends, Header, HTTPException

from studio_store.backend import Backend, build_backend
from studio_store.domain.errors import AuthRequiredError, BackendError, NotFoundError
from studio_store.services.storefront import Storefront
from studio_store.utils.logging import get_logger
from studio_store.utils.settings import MAX_DEVICES, REDIS_URL

logger = get_logger(__name__)


class StorefrontRegistry:
    """
    Un Storefront por dispositivo (X-Client-Id), en memoria del proceso.
    Acotado a max_devices: se expulsa el menos usado. Su carrito, catalogo y
    sesion siguen en redis y se rehidratan en la siguiente peticion.
    """

    def __init__(self, max_devices: int = MAX_DEVICES):
        self.max_devices = max_devices
        self._storefronts: "OrderedDict[str, Storefront]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, client_id: str, backend: Backend, redis_client: redis.Redis) -> Storefront:
        with self._lock:
            storefront = self._storefronts.get(client_id)
            if storefront is not None:
                self._storefronts.move_to_end(client_id)
                return storefront

            storefront = Storefront.open(client_id, backend, redis_client)
            self._storefronts[client_id] = storefront

            while len(self._storefronts) > self.max_devices:
                evicted, _ = self._storefronts.popitem(last=False)
                logger.info(f"Evicted storefront for device {evicted}")

            return storefront

    def __len__(self) -> int:
        return len(self._storefronts)

    def clear(self) -> None:
        with self._lock:
            self._storefronts.clear()


registry = StorefrontRegistry()


@lru_cache
def get_backend() -> Backend:
    return build_backend()


@lru_cache
def get_redis() -> redis.Redis:
    return redis.Redis.from_url(REDIS_URL, decode_responses=True)


def get_storefront(
    x_client_id: str = Header(..., min_length=1),
    backend: Backend = Depends(get_backend),
    redis_client: redis.Redis = Depends(get_redis),
) -> Storefront:
    return registry.get(x_client_id, backend, redis_client)


def to_http(e: Exception) -> HTTPException:
    """Traduce errores de los servicios a respuestas HTTP."""
    if isinstance(e, AuthRequiredError):
        return HTTPException(status_code=401, detail=str(e))
    if isinstance(e, PermissionError):
        return HTTPException(status_code=403, detail=str(e))
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, BackendError):
        return HTTPException(status_code=502, detail=e.message)
    return HTTPException(status_code=400, detail=str(e))
