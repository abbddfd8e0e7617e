# studio_store/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException

from studio_store.api.deps import get_storefront, to_http
from studio_store.domain.errors import AuthRequiredError, BackendError
from studio_store.domain.schemas import LoginIn, RegisterIn, User
from studio_store.services.storefront import Storefront

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=User)
def login(payload: LoginIn, storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        try:
            return storefront.session.login(payload.email, payload.password)
        except BackendError as e:
            #sin codigo = fallo de red o de base de datos
            raise HTTPException(status_code=401 if e.code else 502, detail=e.message)


@router.post("/register", response_model=User, status_code=201)
def register(payload: RegisterIn, storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        try:
            return storefront.session.register(payload)
        except BackendError as e:
            raise HTTPException(status_code=400 if e.code else 502, detail=e.message)


@router.post("/logout")
def logout(storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        storefront.session.logout()
        return {"view": storefront.state.view.value}


@router.get("/me", response_model=User)
def me(storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        try:
            return storefront.session.require_user()
        except AuthRequiredError as e:
            raise to_http(e)
