from fastapi import APIRouter

from studio_store.utils.settings import BACKEND_MODE

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok", "backend": BACKEND_MODE}
