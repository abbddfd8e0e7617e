# studio_store/services/session_service.py
from typing import Optional

from pydantic import ValidationError

from studio_store.backend.base import Backend
from studio_store.domain.errors import AuthRequiredError, BackendError
from studio_store.domain.schemas import AuthSession, RegisterIn, User
from studio_store.domain.state import AppState, NotificationType, View
from studio_store.services.device_storage import USER_SESSION_KEY, DeviceStorage
from studio_store.utils.logging import get_logger

logger = get_logger(__name__)


class SessionService:
    """
    La autenticacion la resuelve el backend; aqui solo se refleja la sesion
    en un User local leyendo la fila vinculada de `profiles`.
    """

    def __init__(self, state: AppState, storage: DeviceStorage, backend: Backend):
        self.state = state
        self.storage = storage
        self.backend = backend

    def current_user(self) -> Optional[User]:
        return self.state.user

    def require_user(self) -> User:
        if self.state.user is None:
            raise AuthRequiredError("Debes iniciar sesión para continuar")
        return self.state.user

    def _mirror(self, session: AuthSession) -> User:
        profile = self.backend.get_profile(session.user_id, access_token=session.access_token)

        data = {"id": session.user_id, "email": session.email}

        if profile is None:
            logger.warning(f"No profile row for user {session.user_id}, using session data")
        else:
            for field in ("email", "first_name", "last_name", "phone", "role", "favorites"):
                if profile.get(field) is not None:
                    data[field] = profile[field]
            if profile.get("created_at"):
                data["registered_at"] = profile["created_at"]

        user = User(**data)

        self.state.session = session
        self.state.user = user
        self.state.login_requested = False
        self.storage.set_json(USER_SESSION_KEY, session.model_dump())
        return user

    def login(self, email: str, password: str) -> User:
        try:
            session = self.backend.sign_in(email, password)
            user = self._mirror(session)
        except BackendError as e:
            logger.error(f"Login failed for {email}: {e.message}")
            self.state.notify(e.message, NotificationType.ERROR)
            raise

        if user.is_admin:
            self.state.notify("Bienvenido Staff PHKStudio", NotificationType.SUCCESS)
        else:
            self.state.notify(f"Bienvenido de nuevo, {user.display_name}", NotificationType.SUCCESS)

        logger.info(f"User {user.id} logged in on device {self.state.client_id}")
        return user

    def register(self, payload: RegisterIn) -> User:
        try:
            session = self.backend.sign_up(
                email=payload.email,
                password=payload.password,
                first_name=payload.first_name,
                last_name=payload.last_name,
                phone=payload.phone,
            )
            user = self._mirror(session)
        except BackendError as e:
            logger.error(f"Registration failed for {payload.email}: {e.message}")
            self.state.notify(e.message, NotificationType.ERROR)
            raise

        self.state.notify("Registro exitoso. ¡Bienvenido!", NotificationType.SUCCESS)
        logger.info(f"User {user.id} registered on device {self.state.client_id}")
        return user

    def logout(self) -> None:
        session = self.state.session

        if session is not None:
            try:
                self.backend.sign_out(session.access_token)
            except BackendError as e:
                #la sesion local se cierra igualmente
                logger.warning(f"Backend sign out failed: {e.message}")

        self.state.user = None
        self.state.session = None
        self.state.orders = []
        self.storage.remove(USER_SESSION_KEY)
        self.state.navigate(View.HOME)
        self.state.notify("Sesión cerrada", NotificationType.INFO)

    def restore(self) -> Optional[User]:
        stored = self.storage.get_json(USER_SESSION_KEY)
        if not stored:
            return None

        try:
            token = AuthSession.model_validate(stored).access_token
        except ValidationError:
            logger.warning(f"Stored session for {self.state.client_id} is malformed")
            self.storage.remove(USER_SESSION_KEY)
            return None

        try:
            session = self.backend.get_session(token)
            if session is None:
                logger.info(f"Stored session for {self.state.client_id} expired")
                self.storage.remove(USER_SESSION_KEY)
                return None
            return self._mirror(session)
        except BackendError as e:
            logger.warning(f"Could not restore session for {self.state.client_id}: {e.message}")
            return None
