from fastapi import APIRouter, Depends, HTTPException

from studio_store.api.deps import get_storefront
from studio_store.domain.schemas import ConsentIn, ViewIn
from studio_store.domain.state import View
from studio_store.services.storefront import Storefront

router = APIRouter(tags=["state"])


def _view_out(storefront: Storefront) -> dict:
    state = storefront.state
    user = state.user
    return {
        "view": state.view.value,
        "login_requested": state.login_requested,
        "access_denied": state.view == View.ADMIN and (user is None or not user.is_admin),
    }


@router.get("/view")
def get_view(storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        return _view_out(storefront)


@router.put("/view")
def navigate(payload: ViewIn, storefront: Storefront = Depends(get_storefront)):
    try:
        view = View(payload.view.upper())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Vista desconocida: {payload.view}")

    with storefront.lock:
        storefront.state.navigate(view)
        return _view_out(storefront)


@router.get("/notifications")
def drain_notifications(storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        notifications = storefront.state.drain_notifications()
    return [{"message": n.message, "type": n.type.value} for n in notifications]


@router.get("/consent")
def get_consent(storefront: Storefront = Depends(get_storefront)):
    return {"accepted": storefront.cookie_consent()}


@router.put("/consent")
def set_consent(payload: ConsentIn, storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        return {"accepted": storefront.accept_cookies(payload.accepted)}
