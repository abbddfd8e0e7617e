# studio_store/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException

from studio_store.api.deps import get_storefront
from studio_store.domain.errors import NotFoundError
from studio_store.domain.schemas import AddToCartIn, CartOut, QuantityIn
from studio_store.services.storefront import Storefront

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/", response_model=CartOut)
def get_cart(storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        return storefront.cart.get_cart()


@router.post("/items", response_model=CartOut)
def add_item(payload: AddToCartIn, storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        try:
            service = storefront.catalog.get(payload.service_id)
            return storefront.cart.add(service, payload.variations)
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))


@router.put("/items/{service_id}", response_model=CartOut)
def set_quantity(service_id: str, payload: QuantityIn, storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        return storefront.cart.set_quantity(service_id, payload.quantity)


@router.delete("/items/{service_id}", response_model=CartOut)
def remove_item(service_id: str, storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        return storefront.cart.remove(service_id)
