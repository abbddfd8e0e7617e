# studio_store/api/routers/custom_requests.py
from fastapi import APIRouter, Depends

from studio_store.api.deps import get_storefront, to_http
from studio_store.data.catalog import CUSTOM_STYLES
from studio_store.domain.errors import AuthRequiredError, BackendError
from studio_store.domain.schemas import CustomDetailsIn, CustomPaymentIn, Order
from studio_store.domain.state import CustomRequestWizard
from studio_store.services.storefront import Storefront

router = APIRouter(prefix="/custom-request", tags=["custom-request"])


def _wizard_out(wizard: CustomRequestWizard) -> dict:
    return {
        "step": wizard.step,
        "style": wizard.style,
        "description": wizard.description,
        "order_id": wizard.order_id,
        "styles": CUSTOM_STYLES,
    }


@router.get("/")
def get_wizard(storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        return _wizard_out(storefront.custom_request.wizard)


@router.post("/details")
def submit_details(payload: CustomDetailsIn, storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        try:
            wizard = storefront.custom_request.submit_details(payload.style, payload.description)
        except ValueError as e:
            raise to_http(e)
        return _wizard_out(wizard)


@router.post("/payment", response_model=Order, status_code=201)
def submit_payment(payload: CustomPaymentIn, storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        try:
            return storefront.custom_request.submit_payment(payload.payment_method, payload.card_details)
        except (AuthRequiredError, BackendError, ValueError) as e:
            raise to_http(e)


@router.post("/reset")
def reset(storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        return _wizard_out(storefront.custom_request.reset())
