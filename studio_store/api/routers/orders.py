# studio_store/api/routers/orders.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from studio_store.api.deps import get_storefront, to_http
from studio_store.domain.errors import AuthRequiredError, BackendError
from studio_store.domain.schemas import Attachment, CheckoutForm, Order, PaymentMethod
from studio_store.services.storefront import Storefront

router = APIRouter(tags=["orders"])


@router.post("/checkout", response_model=Order, status_code=201)
def checkout(
    name: str = Form(""),
    email: str = Form(""),
    phone: Optional[str] = Form(None),
    style: str = Form("Realista"),
    software: Optional[List[str]] = Form(None),
    budget: str = Form("$100-500"),
    specs: str = Form(""),
    payment_method: PaymentMethod = Form(PaymentMethod.CREDIT_CARD),
    notes: str = Form(""),
    files: Optional[List[UploadFile]] = File(None),
    storefront: Storefront = Depends(get_storefront),
):
    """
    Envia el carrito como pedido.
    Formulario multipart; hasta tres adjuntos en `files`.
    """
    form = CheckoutForm(
        name=name,
        email=email,
        phone=phone,
        style=style,
        software=software or [],
        budget=budget,
        specs=specs,
        payment_method=payment_method,
        notes=notes,
    )
    attachments = [
        Attachment(
            filename=f.filename or "adjunto",
            content=f.file.read(),
            content_type=f.content_type or "application/octet-stream",
        )
        for f in files or []
    ]

    with storefront.lock:
        try:
            return storefront.checkout.submit_order(form, attachments)
        except (AuthRequiredError, BackendError, ValueError) as e:
            raise to_http(e)


@router.get("/orders", response_model=List[Order])
def my_orders(storefront: Storefront = Depends(get_storefront)):
    with storefront.lock:
        try:
            return storefront.orders.load_my_orders()
        except (AuthRequiredError, BackendError) as e:
            raise to_http(e)
