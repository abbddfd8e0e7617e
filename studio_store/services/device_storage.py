# studio_store/services/device_storage.py
import json
from typing import Any

import redis

from studio_store.utils.logging import get_logger
from studio_store.utils.retry import redis_retry

logger = get_logger(__name__)

CART_KEY = "phk_cart"
SERVICES_KEY = "phk_services"
COOKIE_CONSENT_KEY = "phk_cookie_consent"
USER_SESSION_KEY = "phk_user_session"


class DeviceStorage:
    """
    Almacenamiento local del dispositivo (equivalente a localStorage):
    valores JSON bajo claves fijas, aislados por client_id en redis.
    """

    def __init__(self, client_id: str, redis_client: redis.Redis):
        self.client_id = client_id
        self.redis = redis_client

    def _key(self, key: str) -> str:
        #device:<client_id>:phk_cart
        return f"device:{self.client_id}:{key}"

    @redis_retry()
    def get_raw(self, key: str) -> str | None:
        return self.redis.get(self._key(key))

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self.get_raw(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning(f"Malformed JSON under {self._key(key)}, using default")
            return default

    @redis_retry()
    def set_json(self, key: str, value: Any) -> None:
        self.redis.set(self._key(key), json.dumps(value, default=str))

    @redis_retry()
    def remove(self, key: str) -> None:
        self.redis.delete(self._key(key))

