# studio_store/domain/schemas.py
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ServiceCategory(str, Enum):
    ILUSTRACION_DIGITAL = "ILUSTRACIÓN DIGITAL"
    ANIMACION_2D = "ANIMACIÓN 2D"
    ANIMACION_3D = "ANIMACIÓN 3D"
    MOTION_GRAPHICS = "MOTION GRAPHICS"
    CHARACTER_DESIGN = "CHARACTER DESIGN"
    STORYBOARDS = "STORYBOARDS"


class OrderStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderPriority(str, Enum):
    NORMAL = "normal"
    URGENT = "urgent"


class Role(str, Enum):
    CLIENT = "client"
    ADMIN = "admin"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"


class Service(BaseModel):
    """Servicio del catalogo (dato de referencia, inmutable)."""

    id: str
    name: str
    category: ServiceCategory
    description: str
    price: Decimal = Field(..., ge=0)
    unit: str
    delivery_time: str
    image: str
    variations: List[str] = Field(default_factory=list)
    active: bool = True


class CartItem(BaseModel):
    """Linea del carrito; solo vive en el dispositivo del cliente."""

    service_id: str
    service_name: str
    price: Decimal
    quantity: int = Field(1, ge=1)
    variations: Optional[str] = None


class CartOut(BaseModel):
    items: List[CartItem]
    count: int
    total: Decimal


class Specifications(BaseModel):
    style: str = ""
    software: List[str] = Field(default_factory=list)
    description: str = ""
    budget_range: str = Field("", alias="budgetRange")
    files: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class OrderItem(BaseModel):
    id: Optional[int] = None
    order_id: Optional[str] = None
    service_id: str
    service_name: str
    price: Decimal
    quantity: int = Field(..., ge=1)
    variations: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class Order(BaseModel):
    id: str
    user_id: str
    user_email: str
    user_name: str
    created_at: datetime
    items: List[OrderItem] = Field(default_factory=list)
    total: Decimal
    status: OrderStatus = OrderStatus.PENDING
    priority: OrderPriority = OrderPriority.NORMAL
    specifications: Specifications = Field(default_factory=Specifications)
    notes: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("specifications", mode="before")
    @classmethod
    def _empty_specifications(cls, value):
        #filas antiguas pueden traer null
        return value or {}

    @classmethod
    def from_row(cls, row: dict) -> "Order":
        """Convierte una fila `orders` (con `order_items` unidos) en Order."""
        data = dict(row)
        data["items"] = data.pop("order_items", None) or data.get("items") or []
        return cls.model_validate(data)


class User(BaseModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    role: Role = Role.CLIENT
    favorites: List[str] = Field(default_factory=list)
    registered_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def display_name(self) -> str:
        if self.first_name:
            return " ".join(p for p in (self.first_name, self.last_name) if p)
        return self.email.split("@")[0]


class AuthSession(BaseModel):
    """Sesion emitida por el servicio de autenticacion del backend."""

    access_token: str
    user_id: str
    email: str


# =====================================================
# PAYLOADS DE ENTRADA
# =====================================================

class LoginIn(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterIn(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = None


class AddToCartIn(BaseModel):
    service_id: str = Field(..., min_length=1)
    variations: Optional[str] = None


class QuantityIn(BaseModel):
    quantity: int


class CheckoutForm(BaseModel):
    """Campos del formulario de checkout."""

    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    style: str = "Realista"
    software: List[str] = Field(default_factory=list)
    budget: str = "$100-500"
    specs: str = ""
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD
    notes: str = ""


class Attachment(BaseModel):
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class CardDetails(BaseModel):
    number: str = ""
    expiry: str = ""
    cvc: str = ""
    holder: str = ""


class CustomDetailsIn(BaseModel):
    style: str = ""
    description: str = ""


class CustomPaymentIn(BaseModel):
    payment_method: str = Field("card", pattern="^(card|paypal)$")
    card_details: Optional[CardDetails] = None


class StatusIn(BaseModel):
    status: OrderStatus


class ViewIn(BaseModel):
    view: str


class ConsentIn(BaseModel):
    accepted: bool = True


class DashboardStats(BaseModel):
    total_orders: int
    pending_orders: int
    revenue: Decimal
    clients: int
