# studio_store/api/routers/catalog.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from studio_store.api.deps import get_storefront
from studio_store.domain.errors import NotFoundError
from studio_store.domain.schemas import Service, ServiceCategory
from studio_store.services.storefront import Storefront

router = APIRouter(prefix="/services", tags=["catalog"])


@router.get("/", response_model=List[Service])
def list_services(
    category: Optional[ServiceCategory] = Query(None),
    q: Optional[str] = Query(None),
    storefront: Storefront = Depends(get_storefront),
):
    with storefront.lock:
        return storefront.catalog.list(category=category, query=q)


@router.get("/{service_id}", response_model=Service)
def get_service(service_id: str, storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        try:
            return storefront.catalog.get(service_id)
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
