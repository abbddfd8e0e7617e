# studio_store/api/routers/admin.py
from typing import List

from fastapi import APIRouter, Depends

from studio_store.api.deps import get_storefront, to_http
from studio_store.domain.errors import AuthRequiredError, BackendError, NotFoundError
from studio_store.domain.schemas import DashboardStats, Order, StatusIn
from studio_store.services.storefront import Storefront

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/orders", response_model=List[Order])
def list_orders(storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        try:
            return storefront.admin.open_dashboard()
        except (AuthRequiredError, PermissionError, BackendError) as e:
            raise to_http(e)


@router.patch("/orders/{order_id}/status", response_model=Order)
def set_status(order_id: str, payload: StatusIn, storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        try:
            return storefront.admin.set_status(order_id, payload.status)
        except (AuthRequiredError, PermissionError, NotFoundError, BackendError, ValueError) as e:
            raise to_http(e)


@router.get("/stats", response_model=DashboardStats)
def stats(storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        try:
            return storefront.admin.stats()
        except (AuthRequiredError, PermissionError) as e:
            raise to_http(e)
