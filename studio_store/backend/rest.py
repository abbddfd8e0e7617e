# studio_store/backend/rest.py
from typing import List, Optional
from urllib.parse import quote

import requests
from requests import RequestException

from studio_store.backend.base import Backend, Row
from studio_store.domain.errors import BackendError
from studio_store.domain.schemas import AuthSession
from studio_store.utils.logging import get_logger
from studio_store.utils.retry import http_retry
from studio_store.utils.settings import ATTACHMENTS_BUCKET, BACKEND_API_KEY, BACKEND_URL, HTTP_TIMEOUT

logger = get_logger(__name__)


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason

    if isinstance(body, dict):
        for key in ("message", "msg", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return resp.reason


class RestBackend(Backend):
    """
    Cliente HTTP del backend-as-a-service alojado:
    - /auth/v1/*                      autenticacion
    - /rest/v1/<tabla>                filas (profiles, orders, order_items)
    - /storage/v1/object/<bucket>/... adjuntos

    Solo las lecturas pasan por http_retry(); las escrituras nunca se reintentan.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: int = HTTP_TIMEOUT,
        bucket: str = ATTACHMENTS_BUCKET,
        http: requests.Session | None = None,
    ):
        self.base_url = (base_url or BACKEND_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else BACKEND_API_KEY
        self.timeout = timeout
        self.bucket = bucket
        self.http = http or requests.Session()

    def _headers(self, access_token: Optional[str] = None, **extra) -> dict:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {access_token or self.api_key}",
        }
        headers.update(extra)
        return headers

    def _request(self, method: str, path: str, access_token=None, headers=None, **kwargs):
        url = f"{self.base_url}{path}"
        logger.info(f"RestBackend {method} {url}")

        try:
            resp = self.http.request(
                method,
                url,
                headers=self._headers(access_token, **(headers or {})),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.ConnectionError:
            #se propaga para que http_retry() decida
            raise
        except RequestException as e:
            raise BackendError(str(e)) from e

        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.error(f"RestBackend {method} {url} -> {resp.status_code}: {message}")
            raise BackendError(message, code=str(resp.status_code))

        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    def _write(self, method: str, path: str, access_token=None, **kwargs):
        try:
            return self._request(method, path, access_token, **kwargs)
        except requests.ConnectionError as e:
            raise BackendError(str(e)) from e

    #solo las lecturas pasan por http_retry; _write nunca reintenta
    @http_retry()
    def _read_with_retry(self, path: str, access_token=None, **kwargs):
        return self._request("GET", path, access_token, **kwargs)

    def _read(self, path: str, access_token=None, **kwargs):
        try:
            return self._read_with_retry(path, access_token, **kwargs)
        except requests.ConnectionError as e:
            raise BackendError(str(e)) from e

    @staticmethod
    def _to_session(body: dict) -> AuthSession:
        user = body.get("user") or {}
        return AuthSession(
            access_token=body["access_token"],
            user_id=user["id"],
            email=user.get("email", ""),
        )

    # =====================================================
    # AUTH
    # =====================================================
    def sign_in(self, email: str, password: str) -> AuthSession:
        body = self._write(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return self._to_session(body)

    def sign_up(self, email, password, first_name, last_name=None, phone=None) -> AuthSession:
        body = self._write(
            "POST",
            "/auth/v1/signup",
            json={
                "email": email,
                "password": password,
                "data": {"first_name": first_name, "last_name": last_name, "phone": phone},
            },
        )
        if not body or not body.get("access_token"):
            #proyecto con confirmacion de email: aun no hay sesion
            raise BackendError("Email not confirmed", code="email_not_confirmed")
        return self._to_session(body)

    def sign_out(self, access_token: str) -> None:
        self._write("POST", "/auth/v1/logout", access_token=access_token)

    def get_session(self, access_token: str) -> Optional[AuthSession]:
        try:
            user = self._read("/auth/v1/user", access_token=access_token)
        except BackendError as e:
            if e.code in ("401", "403"):
                return None
            raise
        return AuthSession(access_token=access_token, user_id=user["id"], email=user.get("email", ""))

    # =====================================================
    # TABLES
    # =====================================================
    def get_profile(self, user_id, access_token=None) -> Optional[Row]:
        rows = self._read(
            "/rest/v1/profiles",
            access_token,
            params={"id": f"eq.{user_id}", "select": "*"},
        )
        return rows[0] if rows else None

    def insert_order(self, row, access_token=None) -> Row:
        rows = self._write(
            "POST",
            "/rest/v1/orders",
            access_token,
            headers={"Prefer": "return=representation"},
            json=row,
        )
        return rows[0]

    def insert_order_items(self, rows, access_token=None) -> List[Row]:
        return self._write(
            "POST",
            "/rest/v1/order_items",
            access_token,
            headers={"Prefer": "return=representation"},
            json=rows,
        ) or []

    def select_orders(self, user_id=None, access_token=None) -> List[Row]:
        params = {
            "select": "*,order_items(id,order_id,service_id,service_name,price,quantity,variations)",
            "order": "created_at.desc",
        }
        if user_id is not None:
            params["user_id"] = f"eq.{user_id}"
        return self._read("/rest/v1/orders", access_token, params=params) or []

    def update_order_status(self, order_id, status, access_token=None, expected_status=None) -> Optional[Row]:
        params = {"id": f"eq.{order_id}"}
        if expected_status is not None:
            params["status"] = f"eq.{expected_status}"

        rows = self._write(
            "PATCH",
            "/rest/v1/orders",
            access_token,
            headers={"Prefer": "return=representation"},
            params=params,
            json={"status": status},
        )
        return rows[0] if rows else None

    def delete_order(self, order_id, access_token=None) -> None:
        self._write("DELETE", "/rest/v1/orders", access_token, params={"id": f"eq.{order_id}"})

    # =====================================================
    # STORAGE
    # =====================================================
    def upload(self, path, content, content_type, access_token=None) -> None:
        self._write(
            "POST",
            f"/storage/v1/object/{self.bucket}/{quote(path)}",
            access_token,
            headers={
                "Content-Type": content_type,
                "cache-control": "max-age=3600",
                "x-upsert": "false",
            },
            data=content,
        )

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{quote(path)}"
