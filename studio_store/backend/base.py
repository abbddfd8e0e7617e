# studio_store/backend/base.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from studio_store.domain.schemas import AuthSession

Row = Dict[str, Any]


class Backend(ABC):
    """
    Interfaz comun del backend externo:
    - autenticacion (sign in / sign up / sign out / sesion)
    - tablas profiles, orders y order_items
    - almacenamiento de objetos para adjuntos de pedidos

    Las filas viajan como dicts con los nombres de columna del backend.
    Cualquier fallo se reporta como BackendError con el mensaje original.
    """

    # =====================================================
    # AUTH
    # =====================================================
    @abstractmethod
    def sign_in(self, email: str, password: str) -> AuthSession: ...

    @abstractmethod
    def sign_up(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> AuthSession: ...

    @abstractmethod
    def sign_out(self, access_token: str) -> None: ...

    @abstractmethod
    def get_session(self, access_token: str) -> Optional[AuthSession]: ...

    # =====================================================
    # TABLES
    # =====================================================
    @abstractmethod
    def get_profile(self, user_id: str, access_token: Optional[str] = None) -> Optional[Row]: ...

    @abstractmethod
    def insert_order(self, row: Row, access_token: Optional[str] = None) -> Row: ...

    @abstractmethod
    def insert_order_items(self, rows: List[Row], access_token: Optional[str] = None) -> List[Row]: ...

    @abstractmethod
    def select_orders(
        self, user_id: Optional[str] = None, access_token: Optional[str] = None
    ) -> List[Row]:
        """Pedidos con sus order_items, ordenados por created_at descendente."""

    @abstractmethod
    def update_order_status(
        self,
        order_id: str,
        status: str,
        access_token: Optional[str] = None,
        expected_status: Optional[str] = None,
    ) -> Optional[Row]:
        """
        Cambia el estado solo si el pedido existe y, con expected_status,
        si su estado guardado sigue siendo ese. None si ninguna fila coincide.
        """

    @abstractmethod
    def delete_order(self, order_id: str, access_token: Optional[str] = None) -> None: ...

    # =====================================================
    # STORAGE
    # =====================================================
    @abstractmethod
    def upload(
        self,
        path: str,
        content: bytes,
        content_type: str,
        access_token: Optional[str] = None,
    ) -> None: ...

    @abstractmethod
    def public_url(self, path: str) -> str: ...
