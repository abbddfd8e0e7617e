# studio_store/domain/errors.py


class BackendError(Exception):
    """Error reportado por el backend (auth, tablas o almacenamiento)."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class AuthRequiredError(Exception):
    """La accion necesita un usuario con sesion iniciada."""


class NotFoundError(LookupError):
    """Servicio o pedido inexistente."""
