# studio_store/utils/settings.py
import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


#mock | sql | rest
BACKEND_MODE = os.getenv("BACKEND_MODE", "mock")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./studio_store.db")
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")

#backend-as-a-service (modo rest)
BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:54321")
BACKEND_API_KEY = os.getenv("BACKEND_API_KEY", "")
HTTP_TIMEOUT = int(os.getenv("HTTP_TIMEOUT", 10))
# 1 = sin reintentos
HTTP_RETRY_ATTEMPTS = int(os.getenv("HTTP_RETRY_ATTEMPTS", 1))
REDIS_RETRY_ATTEMPTS = int(os.getenv("REDIS_RETRY_ATTEMPTS", 3))

ATTACHMENTS_BUCKET = os.getenv("ATTACHMENTS_BUCKET", "order-attachments")
ATTACHMENTS_DIR = os.getenv("ATTACHMENTS_DIR", "./attachments")
PUBLIC_FILES_URL = os.getenv("PUBLIC_FILES_URL", "http://localhost:8000/files")
MAX_ATTACHMENTS = int(os.getenv("MAX_ATTACHMENTS", 3))

#estados de dispositivo en memoria antes de expulsar el menos usado
MAX_DEVICES = int(os.getenv("MAX_DEVICES", 1000))

DEPOSIT_AMOUNT = Decimal(os.getenv("DEPOSIT_AMOUNT", "100.00"))

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "phkstudio2025")

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", REDIS_URL)
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")
CELERY_TASK_ALWAYS_EAGER = _flag("CELERY_TASK_ALWAYS_EAGER")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
