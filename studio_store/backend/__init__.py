# studio_store/backend/__init__.py
from studio_store.backend.base import Backend
from studio_store.utils.settings import BACKEND_MODE


def build_backend(mode: str = BACKEND_MODE) -> Backend:
    if mode == "mock":
        from studio_store.backend.memory import MemoryBackend
        return MemoryBackend()

    if mode == "sql":
        from studio_store.backend.sql import SqlBackend
        return SqlBackend()

    if mode == "rest":
        from studio_store.backend.rest import RestBackend
        return RestBackend()

    raise ValueError(f"Unknown BACKEND_MODE: {mode}")


__all__ = ["Backend", "build_backend"]
